"""
Logging setup with per-request context.

The current RequestContext lives in a context variable so that log lines
written from the render session task carry the same request id as the
handler that spawned it.
"""

import logging
import sys
from contextvars import ContextVar

from .types import RequestContext

_request_context: ContextVar[RequestContext | None] = ContextVar(
    "dashprint_request_context", default=None
)

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s"


class RequestContextFilter(logging.Filter):
    """Inject request id and peer into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = _request_context.get()
        record.request_id = ctx.request_id if ctx else "-"
        record.peer = ctx.peer if ctx and ctx.peer else "-"
        return True


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once at startup."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())

    # asyncio is noisy at debug
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_request_context(ctx: RequestContext) -> None:
    _request_context.set(ctx)


def get_request_context() -> RequestContext | None:
    return _request_context.get()


def clear_request_context() -> None:
    _request_context.set(None)
