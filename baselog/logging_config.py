"""Structured logging setup for the logbook."""

import logging
import logging.config
import os
from enum import Enum

from pythonjsonlogger import jsonlogger

from .config.settings import get_diagnostic_log_path, get_log_level

DIAGNOSTIC_FORMAT = "[%(asctime)s] [CAT:%(category)s] %(levelname)s %(name)s: %(message)s"


class LogCategory(Enum):
    """Categories of events written to the diagnostic log."""

    DATA_CONSISTENCY = "DATA_CONSISTENCY"
    NUMBER_SHIFT = "NUMBER_SHIFT"
    IMPORT_EXPORT = "IMPORT_EXPORT"
    REFERENCE_INTEGRITY = "REFERENCE_INTEGRITY"
    RUNTIME_ERROR = "RUNTIME_ERROR"


def diagnostic(category: LogCategory) -> dict:
    """Build the ``extra`` mapping that tags a log call with a category.

    Example:
        logger.warning("Jump 4 shifted", extra=diagnostic(LogCategory.NUMBER_SHIFT))
    """
    return {"category": category.value}


# A custom formatter to produce JSON logs
class JsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = record.levelname.lower()
        log_record["name"] = record.name
        log_record["service"] = "baselog"
        log_record["category"] = getattr(record, "category", None)


class CategorizedOnlyFilter(logging.Filter):
    """Let through only records tagged with a diagnostic category."""

    def filter(self, record: logging.LogRecord) -> bool:
        return getattr(record, "category", None) is not None


def setup_logging(
    diagnostic_log_path: str | None = None, level: str | None = None
) -> None:
    """
    Set up structured JSON logging for the entire application.

    The root logger writes JSON to stdout. Categorized events are also
    appended to the diagnostic log file in a plain text layout, one block per
    event starting with ``[timestamp] [CAT:<CATEGORY>]``.

    Args:
        diagnostic_log_path: Diagnostic log file, defaults to the configured path
        level: Root log level, defaults to the configured level
    """
    log_path = diagnostic_log_path or get_diagnostic_log_path()
    log_dir = os.path.dirname(log_path)
    if log_dir and log_dir != ".":
        os.makedirs(log_dir, exist_ok=True)

    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "categorized_only": {"()": CategorizedOnlyFilter},
        },
        "formatters": {
            "json": {
                "()": JsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
            "diagnostic": {
                "format": DIAGNOSTIC_FORMAT,
            },
        },
        "handlers": {
            "json_handler": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
            "diagnostic_handler": {
                "class": "logging.FileHandler",
                "formatter": "diagnostic",
                "filename": log_path,
                "encoding": "utf-8",
                "filters": ["categorized_only"],
            },
        },
        "root": {
            "handlers": ["json_handler", "diagnostic_handler"],
            "level": level or get_log_level(),
        },
        "loggers": {
            "sqlalchemy.engine": {
                "handlers": ["json_handler"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }
    logging.config.dictConfig(log_config)
