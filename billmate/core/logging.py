"""Structured logging.

JSON lines on stdout in deployed environments, plain text locally. Context
passed through ``extra=`` (request id, job name, bill or payment ids) ends up
as top-level keys of the JSON record.
"""

import logging
import sys
from pythonjsonlogger import jsonlogger

from billmate.config import settings

# Libraries whose INFO output is either noisy or duplicated by our own
# request log line.
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "botocore", "boto3", "urllib3", "httpx")

_HANDLER_NAME = "billmate"


class BillMateJsonFormatter(jsonlogger.JsonFormatter):
    """Adds level, logger, environment and service name to every record."""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = settings.APP_NAME
        log_record["environment"] = settings.ENVIRONMENT


def _build_formatter() -> logging.Formatter:
    if settings.LOG_FORMAT == "json":
        return BillMateJsonFormatter(fmt="%(asctime)s %(message)s", datefmt="%Y-%m-%dT%H:%M:%S")
    return logging.Formatter(
        fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def setup_logging() -> None:
    """Install the stdout handler on the root logger. Safe to call more than once."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(_build_formatter())
    root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL.upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
