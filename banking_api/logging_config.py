"""
Structured logging configuration.

Every log line is a single JSON object. Modules log through
get_logger(__name__) and pass structured fields as
extra={"context": {...}}.
"""

import json
import logging
from datetime import datetime, timezone

RESERVED_FIELDS = ("timestamp", "level", "logger", "message", "exception")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if context:
            # Context never overwrites the core fields.
            for key, value in context.items():
                if key in RESERVED_FIELDS:
                    key = f"context_{key}"
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", logger_name: str = "banking_api") -> logging.Logger:
    """
    Set up structured JSON logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Name of the root application logger

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    # Remove existing handlers to avoid duplicates on reload
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False

    return logger


def get_logger(name: str = "banking_api") -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)
