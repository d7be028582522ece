"""Domain exceptions raised by the service layer.

Handlers registered in ``billmate.main`` turn these into ``ErrorResponse``
envelopes with the matching HTTP status.
"""

from fastapi import status


class BillMateError(Exception):
    """Base class for errors a client can act on."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DomainValidationError(BillMateError, ValueError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class NotFoundError(BillMateError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "RESOURCE_NOT_FOUND"


class ConflictError(BillMateError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class PermissionDeniedError(BillMateError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
