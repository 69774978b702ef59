"""Structured logging configuration.

Production runs emit one JSON object per log record so that heatmap
requests and dataset loads can be searched by their ``extra`` fields;
debug runs use a plain single-line format.
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

from pythonjsonlogger import jsonlogger

# Third-party loggers that are too chatty at INFO
_NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "watchfiles")

# Set by the request-id middleware for the duration of one request
REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("request_id", default=None)


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and logger name.

    Records emitted while a request is being served carry its
    ``request_id`` so that a heatmap computation can be matched to the
    ``X-Request-ID`` response header. Records at WARNING or above also
    carry their source location.
    """

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        """Populate the JSON object for one record.

        Args:
            log_record: Dictionary to populate with log fields.
            record: The original LogRecord.
            message_dict: Message dictionary from the record.
        """
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        request_id = REQUEST_ID_CTX.get()
        if request_id is not None and "request_id" not in log_record:
            log_record["request_id"] = request_id

        if record.levelno >= logging.WARNING:
            log_record["location"] = f"{record.pathname}:{record.lineno}"
            log_record["function"] = record.funcName


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Install a single stdout handler on the root logger.

    Calling this again replaces the previous handler, so the application
    factory can be invoked repeatedly (as the tests do) without
    duplicating output.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR,
            CRITICAL). Unknown names fall back to INFO.
        json_output: If True, emit JSON records; otherwise use a
            human-readable format.

    Example:
        >>> configure_logging("DEBUG", json_output=False)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)

    formatter: logging.Formatter
    if json_output:
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Heatmap computed", extra={"angle": "40"})
    """
    return logging.getLogger(name)
