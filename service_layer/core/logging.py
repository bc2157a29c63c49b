"""Logging configuration for the service layer.

Every record carries the office id of the authenticated user (or "-"),
so cache hits, flushes and deletes can be traced per office.
"""

import logging
import sys

from service_layer.core.config import get_settings
from service_layer.core.office_context import get_current_user

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [office=%(office_id)s] %(message)s"


class OfficeContextFilter(logging.Filter):
    """Set record.office_id from the authenticated user."""

    def filter(self, record: logging.LogRecord) -> bool:
        user = get_current_user()
        record.office_id = user.office_id if user is not None else "-"
        return True


def setup_logging() -> None:
    """Configure stdout logging; DEBUG when settings.debug is True, otherwise INFO."""
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(OfficeContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        handlers=[handler],
    )
    logging.getLogger("redis").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
