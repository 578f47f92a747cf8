"""Structured logging for the persistence layer.

Every event is a single JSON line. The HTTP client binds the request id and
the backends bind the entity type through structlog contextvars, so any log
call made while serving a request carries them.
"""
import logging
import sys
import uuid
from typing import Optional

import structlog

from case_manager import config

PACKAGE_LOGGER = "case_manager"


def setup_structured_logging(log_level: Optional[str] = None) -> None:
    """
    Route structlog through the stdlib ``logging`` module as JSON.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR (default: config.LOG_LEVEL)
    """
    level = getattr(logging, (log_level or config.LOG_LEVEL).upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Request id sent as X-Request-ID and bound to the request's log lines."""
    return f"req-{uuid.uuid4().hex[:12]}"
