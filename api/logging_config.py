"""
Request tracking for API logs.

Each request gets a short id, stored in a ContextVar so it follows the
request across awaits and shows up in every API log line.
"""

import logging
import os
import uuid
from contextvars import ContextVar
from typing import Optional

from filmorate.utils import setup_logger

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

REQUEST_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s"


class RequestIdFilter(logging.Filter):
    """Add request_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


def generate_request_id() -> str:
    """Generate a short unique request ID."""
    return uuid.uuid4().hex[:8]


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


# Routers log through children of this logger ("api.films", "api.users")
logger = setup_logger(
    "api",
    log_dir=os.getenv("LOG_DIR") or None,
    level=os.getenv("LOG_LEVEL", "INFO"),
    console_level=logging.INFO,
    fmt=REQUEST_LOG_FORMAT,
    log_filter=RequestIdFilter(),
)
