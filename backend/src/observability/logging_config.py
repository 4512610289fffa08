"""Structured JSON logging configuration.

Provides centralized logging setup with request ID correlation and JSON formatting.

Routing engine log calls pass the affected document through ``extra``
(document_id, process_number, operation) next to the acting user_id, and the
request middleware passes method/path/status_code/duration_ms. Both
formatters render whichever of those fields a record carries.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from .request_id import get_request_id, NO_REQUEST_ID

# Fields the routing engine attaches to its records
DOCUMENT_FIELDS = ("user_id", "document_id", "process_number", "operation")

# Fields the HTTP middleware attaches to access-log records
REQUEST_FIELDS = ("method", "path", "status_code", "duration_ms")

TEXT_FORMAT = '%(asctime)s - %(levelname)s - %(request_id)s - %(name)s.%(funcName)s - %(message)s%(context)s'


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Collect the document and request fields present on a log record.

    Args:
        record: Log record to inspect

    Returns:
        dict: Field name to value, in DOCUMENT_FIELDS then REQUEST_FIELDS order
    """
    context = {}
    for name in DOCUMENT_FIELDS + REQUEST_FIELDS:
        value = getattr(record, name, None)
        if value is not None:
            context[name] = value
    return context


class RequestIDFilter(logging.Filter):
    """Add request_id and a rendered context suffix to all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add request_id and context attributes to log record.

        Args:
            record: Log record to enhance

        Returns:
            bool: Always True (don't filter out records)
        """
        record.request_id = get_request_id()
        context = record_context(record)
        record.context = (
            " [" + " ".join(f"{name}={value}" for name, value in context.items()) + "]"
            if context else ""
        )
        return True


class JSONFormatter(logging.Formatter):
    """Format log records as JSON.

    Document fields are grouped under "document" so log queries can filter
    on a process number without knowing which operation logged it.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string.

        Args:
            record: Log record to format

        Returns:
            str: JSON-formatted log message
        """
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "request_id": getattr(record, "request_id", NO_REQUEST_ID),
            "logger": record.name,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["error"] = str(record.exc_info[1])
            log_data["traceback"] = self.formatException(record.exc_info)

        context = record_context(record)
        if "user_id" in context:
            log_data["user_id"] = context.pop("user_id")

        document = {name: context.pop(name) for name in DOCUMENT_FIELDS if name in context}
        if document:
            log_data["document"] = document

        # Remaining fields come from the request middleware
        log_data.update(context)

        return json.dumps(log_data, default=str, ensure_ascii=False)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Configure application-wide logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, use JSON formatter; otherwise use simple format
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handler.setFormatter(formatter)
    handler.addFilter(RequestIDFilter())
    root_logger.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (request ID is added by the handler filter).

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger: Logger instance
    """
    return logging.getLogger(name)
