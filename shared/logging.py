"""
Logger factory: framework-agnostic.

Every module obtains its logger here:

    >>> from shared.logging import get_logger
    >>> log = get_logger(__name__)
    >>> log.info("user_login", user_id="123")
"""

from __future__ import annotations

import structlog
from structlog.stdlib import BoundLogger


def get_logger(name: str) -> BoundLogger:
    """Return a structlog logger bound to *name* (typically ``__name__``)."""
    return structlog.get_logger(name)


def log_with_context(logger: BoundLogger, **context) -> BoundLogger:
    """Bind context (e.g. ``user_id``) to *logger* for all subsequent calls."""
    return logger.bind(**context)


__all__ = ["get_logger", "log_with_context"]
