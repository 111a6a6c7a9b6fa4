"""Logging configuration with per-check correlation ids."""
import logging
from contextvars import ContextVar
from typing import Optional

from .settings import settings

# Context var for check_id (used in logging)
check_id_ctx: ContextVar[str] = ContextVar('check_id', default='-')


# Logging filter to inject check_id into all log records
class CheckIdFilter(logging.Filter):
    def filter(self, record):
        record.check_id = check_id_ctx.get()
        return True


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic stdout config and attach CheckIdFilter to every root handler."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=(level or settings.log_level),
            format='[%(check_id)s] %(levelname)s %(name)s: %(message)s',
        )
    elif level:
        root_logger.setLevel(level)

    for handler in logging.root.handlers:
        if not any(isinstance(f, CheckIdFilter) for f in handler.filters):
            handler.addFilter(CheckIdFilter())
