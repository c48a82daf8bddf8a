"""Report module - dashboard to PDF rendering using Playwright."""

from .router import router
from .schemas import RenderRequest, ReportSize, RequestEnvelope, SessionCookie
from .service import RenderService

__all__ = [
    "router",
    "RenderService",
    "RenderRequest",
    "ReportSize",
    "RequestEnvelope",
    "SessionCookie",
]
