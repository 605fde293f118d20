"""Structured JSON Logging Configuration"""

import logging
import sys
from pythonjsonlogger import jsonlogger

from app.config import settings

_HANDLER_NAME = "academic-identity"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Request-scoped extras copied onto JSON records when a log call supplies them
_CONTEXT_FIELDS = ("correlation_id", "client_id", "user_id")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that stamps every record with service metadata"""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["environment"] = settings.ENVIRONMENT
        log_record["app_name"] = settings.APP_NAME
        log_record["storage_backend"] = settings.STORAGE_BACKEND

        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value


def _build_formatter() -> logging.Formatter:
    if settings.LOG_FORMAT == "json":
        return CustomJsonFormatter(fmt="%(asctime)s %(level)s %(name)s %(message)s", datefmt=_DATE_FORMAT)
    return logging.Formatter(fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt=_DATE_FORMAT)


def setup_logging() -> None:
    """Configure the root logger once; repeated calls are no-ops."""
    root_logger = logging.getLogger()
    if any(h.get_name() == _HANDLER_NAME for h in root_logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(_build_formatter())

    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root_logger.addHandler(handler)

    # Quiet chatty libraries
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger; handlers are attached to the root by setup_logging()."""
    return logging.getLogger(name)
