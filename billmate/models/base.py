"""Base Models and Mixins for DRY principles"""

import enum
import uuid
from typing import Type

from sqlalchemy import Column, DateTime, Enum, Uuid

from billmate.database import Base
from billmate.utils.time import get_utc_now


def enum_column(enum_cls: Type[enum.Enum], name: str) -> Enum:
    """
    Portable enum column type that stores the enum *values* ("pending"),
    not member names, so rows read the same from SQL and from the API.
    """
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class BaseModel(Base):
    """
    Base model class with common fields for all models.

    Provides:
    - UUID primary key
    - created_at timestamp
    - updated_at timestamp
    """
    __abstract__ = True

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    created_at = Column(DateTime, default=get_utc_now, nullable=False)
    updated_at = Column(DateTime, default=get_utc_now, onupdate=get_utc_now, nullable=False)
