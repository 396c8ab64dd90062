"""
Core Logging Module

Logging configuration with trace_id injection. The trace id lives in a
contextvar so it follows a quote request across the concurrent carrier calls
issued by the orchestrator.

Usage:
    from postage_service.core.logging import TRACE_ID, setup_logging
    import logging

    setup_logging()
    TRACE_ID.set("abc123")
    logging.getLogger(__name__).info("Quoting")  # carries [abc123]
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Optional


TRACE_ID: ContextVar[str] = ContextVar("trace_id", default="-")

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(trace_id)s] %(name)s: %(message)s"


def get_trace_id() -> str:
    """Current trace_id, or "-" outside a request."""
    return TRACE_ID.get()


def new_trace_id() -> str:
    """Generate a trace id for requests that arrive without x-request-id."""
    return uuid.uuid4().hex


class TraceIdFilter(logging.Filter):
    """Copies the contextvar trace_id onto every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id()
        return True


# ==================== Logging Setup ====================

_configured = False


def _console_handler(level: int) -> logging.Handler:
    """stdout handler stamping every record with the request trace id."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.addFilter(TraceIdFilter())
    return handler


def setup_logging(log_level: Optional[str] = None, force: bool = False) -> None:
    """
    Install the trace-aware console handler on the root logger.

    Runs once per process; force=True replaces whatever handlers exist.

    Args:
        log_level: Level name; LOG_LEVEL from settings when omitted
        force: Drop existing root handlers and reconfigure
    """
    global _configured

    if _configured and not force:
        return

    if log_level is None:
        from postage_service.core.config import settings
        log_level = settings.LOG_LEVEL

    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    if force:
        root.handlers.clear()
    if not root.handlers:
        root.addHandler(_console_handler(level))

    _configured = True
    logging.getLogger(__name__).info(f"Log level set to {log_level.upper()}")


def mask_secret(secret: Optional[str]) -> str:
    """
    Render a credential safely for logs.

    Example:
        >>> mask_secret("abcd1234")
        'abcd***'
    """
    if not secret:
        return "<empty>"
    return secret[: min(4, len(secret))] + "***"
