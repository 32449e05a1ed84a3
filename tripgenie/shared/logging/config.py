"""
Logging configuration.

Plain-text logging by default, JSON records when LOG_JSON is set, and a helper
for logging pipeline state transitions as structured events.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s"

NOISY_LOGGERS = ("httpcore", "httpx", "openai", "urllib3")


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs log records as JSON.

    Each log entry includes:
    - timestamp: ISO format datetime
    - level: Log level name
    - logger: Logger name
    - message: Log message
    - extra: Any additional fields attached to the record
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "extra"):
            log_entry["extra"] = record.extra

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(
    level: str = "INFO",
    json_logs: bool = False,
    logger_name: str = "tripgenie",
) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        level: Logging level name (e.g. "INFO")
        json_logs: Emit JSON records instead of plain text
        logger_name: Name of the logger to configure

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers = []
    logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def log_pipeline_event(
    event: str,
    state: Dict[str, Any],
    extra: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a pipeline state transition.

    Args:
        event: Name of the event (e.g. "parse_complete")
        state: Current pipeline state (key fields are extracted)
        extra: Additional context to include
        logger: Logger to use; defaults to the tripgenie logger
    """
    if logger is None:
        logger = logging.getLogger("tripgenie")

    state_summary = {
        "request_id": state.get("request_id"),
        "kind": state.get("kind"),
        "parse_stage": state.get("parse_stage"),
        "has_error": state.get("error") is not None,
    }

    log_data = {
        "event": event,
        "state_summary": state_summary,
    }
    if extra:
        log_data["extra"] = extra

    logger.info(f"Pipeline event: {event}", extra={"extra": log_data})
