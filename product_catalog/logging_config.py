"""
Structured Logging Configuration Module

JSON log lines for catalog operations. Version writes carry the kind, the
business key and the parent key as top-level fields so a key's history can
be followed through the logs.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Optional


# Record attributes promoted to top-level JSON fields, in output order
STRUCTURED_FIELDS = (
    "correlation_id",
    "user_id",
    "action",
    "resource",
    "business_key",
    "parent_key",
    "extra",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record; unset structured fields are omitted"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", logger_name: str = "product_catalog",
                  log_format: str = "json", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the catalog logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Logger to configure
        log_format: "json" for structured output, "text" for plain lines
        log_file: Optional file path; logs go to stderr when omitted

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False

    return logger


def get_logger(name: str = "product_catalog") -> logging.Logger:
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               user_id: Optional[str] = None, action: Optional[str] = None,
               resource: Optional[str] = None, business_key: Optional[str] = None,
               parent_key: Optional[str] = None, correlation_id: Optional[str] = None,
               extra: Optional[dict] = None):
    """
    Log a catalog action with structured fields.

    Args:
        logger: Logger instance
        level: Level name (info, warning, error, ...)
        message: Log message
        user_id: Caller stamped on the action
        action: create / update / delete, or the HTTP method for API errors
        resource: Entity kind or request path
        business_key: Versioned key the action touched
        parent_key: Owning product code of a sub-resource key
        correlation_id: Request tracing id
        extra: Any further structured data
    """
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    fields = {
        "user_id": user_id,
        "action": action,
        "resource": resource,
        "business_key": business_key,
        "parent_key": parent_key,
        "correlation_id": correlation_id,
        "extra": extra or None,
    }
    logger.log(levelno, message, extra={k: v for k, v in fields.items() if v is not None})
