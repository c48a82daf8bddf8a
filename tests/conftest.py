"""
Shared fixtures.

The browser is replaced by in-process fakes that mimic the parts of the
Playwright API the render service uses, so no test launches Chromium.
"""

import asyncio
import socket
from contextlib import asynccontextmanager
from typing import Any

import pytest
from fastapi.testclient import TestClient

from dashprint.app import build_app
from dashprint.config import Settings, init_settings, reset_settings
from dashprint.modules.report.service import RenderService

PDF_BYTES = b"%PDF-1.7\n%fake dashboard\n%%EOF\n"
DASHBOARD_URL = "https://host/zabbix.php?action=dashboard.print"


class FakeFailedRequest:
    def __init__(self, url: str, failure: str | None) -> None:
        self.url = url
        self.failure = failure


class FakeHandle:
    def __init__(self, value: Any) -> None:
        self.value = value

    async def json_value(self) -> Any:
        return self.value


class FakePage:
    """
    Stand-in for playwright Page.

    fail_on names the step ("goto", "ready", "pdf") during which a
    requestfailed event with failure_text is emitted.
    """

    def __init__(self) -> None:
        self.url = ""
        self.listeners: dict[str, list] = {}
        self.calls: list[tuple[str, Any]] = []
        self.viewport: dict[str, int] | None = None
        self.pdf_bytes = PDF_BYTES
        self.ready: Any = True
        self.ready_error: Exception | None = None
        self.pdf_error: Exception | None = None
        self.pdf_delay = 0.0
        self.fail_on: str | None = None
        self.failure_text: str | None = ""

    def on(self, event: str, handler) -> None:
        self.listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler) -> None:
        self.listeners[event].remove(handler)

    def emit_request_failed(self, failure: str | None) -> None:
        for handler in list(self.listeners.get("requestfailed", [])):
            handler(FakeFailedRequest(self.url, failure))

    def _maybe_fail(self, step: str) -> None:
        if self.fail_on == step:
            self.emit_request_failed(self.failure_text)

    async def set_viewport_size(self, size: dict[str, int]) -> None:
        self.viewport = size

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.url = url
        self.calls.append(("goto", url))
        self._maybe_fail("goto")
        await asyncio.sleep(0)

    async def wait_for_function(self, expression: str, **kwargs: Any) -> FakeHandle:
        self.calls.append(("wait_for_function", expression))
        self._maybe_fail("ready")
        await asyncio.sleep(0)
        if self.ready_error is not None:
            raise self.ready_error
        return FakeHandle(self.ready)

    async def pdf(self, **kwargs: Any) -> bytes:
        self.calls.append(("pdf", kwargs))
        self._maybe_fail("pdf")
        if self.pdf_delay:
            await asyncio.sleep(self.pdf_delay)
        if self.pdf_error is not None:
            raise self.pdf_error
        return self.pdf_bytes

    def called(self, name: str) -> bool:
        return any(call[0] == name for call in self.calls)


class FakeContext:
    def __init__(self, page: FakePage, ignore_https_errors: bool) -> None:
        self.page = page
        self.ignore_https_errors = ignore_https_errors
        self.cookies: list[dict[str, Any]] = []
        self.closed = False

    async def add_cookies(self, cookies: list[dict[str, Any]]) -> None:
        self.cookies.extend(cookies)

    async def new_page(self) -> FakePage:
        return self.page


class FakeBrowser:
    """Session factory handing out FakeContexts around one FakePage."""

    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.contexts: list[FakeContext] = []

    @asynccontextmanager
    async def session(self, ignore_https_errors: bool = False):
        context = FakeContext(self.page, ignore_https_errors)
        self.contexts.append(context)
        try:
            yield context
        finally:
            context.closed = True

    @property
    def context(self) -> FakeContext:
        return self.contexts[-1]


def _fake_getaddrinfo(host, port, *args, **kwargs):
    if host == "localhost":
        return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", 0))]
    raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")


@pytest.fixture(autouse=True)
def no_dns(monkeypatch):
    """Allow-list name resolution never leaves the process."""
    monkeypatch.setattr("dashprint.modules.report.peers.socket.getaddrinfo", _fake_getaddrinfo)


@pytest.fixture
def settings():
    """Settings that allow the TestClient peer."""
    reset_settings()
    s = init_settings(Settings(allowed_ip="127.0.0.1,testclient", timeout=3))
    yield s
    reset_settings()


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def fake_browser(fake_page) -> FakeBrowser:
    return FakeBrowser(fake_page)


@pytest.fixture
def render_service(settings, fake_browser) -> RenderService:
    return RenderService(settings, session_factory=fake_browser.session)


@pytest.fixture
def client(settings, render_service):
    # No lifespan: logging stays under pytest's control
    app = build_app(settings, report_service=render_service)
    return TestClient(app)
