"""
Response writers.

Success is a PDF body written verbatim; failure is an RFC 7807 style problem
document with a single ``detail`` field.
"""

from typing import Any

from fastapi.responses import JSONResponse, Response
from starlette.requests import ClientDisconnect
from starlette.types import Receive, Scope, Send

from .logging import get_logger
from .net import is_client_disconnect

logger = get_logger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
PROBLEM_MEDIA_TYPE = "application/problem+json"


class ProblemResponse(JSONResponse):
    """JSON problem body. Starlette serializes without ASCII or HTML escaping."""

    media_type = PROBLEM_MEDIA_TYPE

    def __init__(self, detail: str, status_code: int) -> None:
        super().__init__(
            content={"detail": detail},
            status_code=status_code,
            headers={"X-Content-Type-Options": "nosniff"},
        )

    def render(self, content: Any) -> bytes:
        return super().render(content) + b"\n"


class PdfResponse(Response):
    """PDF body. Once headers are sent, a failed write is only logged."""

    media_type = PDF_MEDIA_TYPE

    def __init__(self, content: bytes, peer: str | None = None) -> None:
        super().__init__(content=content)
        self.peer = peer

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        except ClientDisconnect:
            logger.error(
                f"failed to write response to report request from {self.peer}: "
                "client disconnected"
            )
        except OSError as e:
            if not is_client_disconnect(e):
                raise
            logger.error(f"failed to write response to report request from {self.peer}: {e}")
