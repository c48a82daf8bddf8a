"""
Request context middleware.

Plain ASGI rather than BaseHTTPMiddleware so the response is written straight
to the server's send channel and write failures reach the response object.
"""

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .ids import generate_request_id
from .logging import clear_request_context, set_request_context
from .types import RequestContext


class RequestContextMiddleware:
    """Attach request context for logging and echo X-Request-ID."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get("X-Request-ID") or generate_request_id()
        set_request_context(RequestContext(request_id=request_id))

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)["X-Request-ID"] = request_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            clear_request_context()
