"""Render service - dashboard to PDF using Playwright."""

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from enum import Enum

from playwright.async_api import BrowserContext, Page, Request, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from dashprint.config import Settings
from dashprint.shared.errors import (
    DashboardNotReadyError,
    DashPrintError,
    LoadFailureError,
    RenderCancelledError,
    RenderError,
    RenderTimeoutError,
)
from dashprint.shared.handoff import OutcomeSlot, RenderOutcome
from dashprint.shared.logging import get_logger

from .classify import classify_load_failure
from .schemas import RenderRequest

logger = get_logger(__name__)

# Set by the frontend once every dashboard widget has rendered
DASHBOARD_READY_JS = "document.querySelector('.wrapper.is-ready') !== null"
DASHBOARD_READY_TIMEOUT = 45  # seconds

# 96 pixels per inch
PIXELS_TO_INCHES = 0.0104166667

SessionFactory = Callable[..., AbstractAsyncContextManager[BrowserContext]]


def pixels_to_inches(value: int) -> float:
    return value * PIXELS_TO_INCHES


class RenderState(str, Enum):
    CREATED = "created"
    COOKIES_INJECTED = "cookies_injected"
    VIEWPORT_SET = "viewport_set"
    NAVIGATION_ISSUED = "navigation_issued"
    DASHBOARD_READY = "dashboard_ready"
    PDF_CAPTURED = "pdf_captured"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RenderRun:
    """State of one automation session, for logging and inspection."""

    def __init__(self, request: RenderRequest) -> None:
        self.request = request
        self.state = RenderState.CREATED

    def advance(self, state: RenderState) -> None:
        if self.state in (RenderState.COMPLETED, RenderState.CANCELLED):
            return
        logger.debug(f"render session {self.state.value} -> {state.value}")
        self.state = state


@asynccontextmanager
async def chromium_session(ignore_https_errors: bool = False) -> AsyncIterator[BrowserContext]:
    """Launch a private headless Chromium and yield a fresh browser context."""
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)

        try:
            context = await browser.new_context(
                device_scale_factor=1,
                is_mobile=False,
                ignore_https_errors=ignore_https_errors,
            )
            yield context
        finally:
            await browser.close()


def _outcome_of(task: "asyncio.Task[bytes]") -> RenderOutcome:
    if task.cancelled():
        return RenderOutcome.failure(RenderCancelledError("render session was cancelled"))

    exc = task.exception()
    if exc is None:
        return RenderOutcome.success(task.result())
    if isinstance(exc, DashPrintError):
        return RenderOutcome.failure(exc)
    return RenderOutcome.failure(RenderError(str(exc)))


class RenderService:
    """
    Service for rendering a dashboard to PDF.

    Each call runs its own browser. The capture pipeline (navigate, wait for
    the dashboard, print) runs as a task while the page's ``requestfailed``
    listener watches for load failures. Both report into a single OutcomeSlot;
    whichever writes first decides the result and the pipeline is cancelled
    if the listener won.
    """

    def __init__(
        self,
        settings: Settings,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self.capture_timeout = settings.timeout
        self.ready_timeout = DASHBOARD_READY_TIMEOUT
        self.ignore_https_errors = settings.ignore_url_cert_errors
        self._session_factory = session_factory or chromium_session

    async def render(self, request: RenderRequest) -> bytes:
        """
        Render the dashboard to PDF bytes.

        Raises:
            RenderError: the session failed, timed out, or the browser
                reported a load failure
        """
        run = RenderRun(request)
        slot = OutcomeSlot()

        try:
            async with self._session_factory(ignore_https_errors=self.ignore_https_errors) as context:
                page = await self._prepare_page(context, request, run)

                pipeline = asyncio.create_task(self._capture(page, request, run))

                def on_request_failed(failed: Request) -> None:
                    error = LoadFailureError(classify_load_failure(failed.failure), failed.failure)
                    if slot.offer(RenderOutcome.failure(error)):
                        logger.debug(f"request to {failed.url} failed: {failed.failure!r}")
                        run.advance(RenderState.CANCELLED)
                        pipeline.cancel()

                page.on("requestfailed", on_request_failed)
                pipeline.add_done_callback(lambda task: slot.offer(_outcome_of(task)))

                try:
                    outcome = await slot.take()
                finally:
                    page.remove_listener("requestfailed", on_request_failed)
                    pipeline.cancel()
                    (result,) = await asyncio.gather(pipeline, return_exceptions=True)
                    if isinstance(result, BaseException):
                        logger.debug(f"capture pipeline exited with {result!r}")
        except PlaywrightError as e:
            # Browser launch, context creation or shutdown
            raise RenderError(e.message) from e

        if outcome.error is None:
            run.advance(RenderState.COMPLETED)
        return outcome.unwrap()

    async def _prepare_page(
        self, context: BrowserContext, request: RenderRequest, run: RenderRun
    ) -> Page:
        try:
            if request.cookies:
                await context.add_cookies([c.to_playwright() for c in request.cookies])
            run.advance(RenderState.COOKIES_INJECTED)

            page = await context.new_page()
            await page.set_viewport_size({
                "width": request.size.width,
                "height": request.size.height,
            })
            run.advance(RenderState.VIEWPORT_SET)
        except PlaywrightError as e:
            raise RenderError(e.message) from e

        return page

    async def _capture(self, page: Page, request: RenderRequest, run: RenderRun) -> bytes:
        try:
            await page.goto(
                request.url,
                wait_until="commit",
                timeout=self.ready_timeout * 1000,
            )
            run.advance(RenderState.NAVIGATION_ISSUED)

            await self._wait_for_dashboard_ready(page, request.url)
            run.advance(RenderState.DASHBOARD_READY)

            try:
                data = await asyncio.wait_for(
                    page.pdf(
                        print_background=True,
                        prefer_css_page_size=True,
                        width=f"{pixels_to_inches(request.size.width)}in",
                        height=f"{pixels_to_inches(request.size.height)}in",
                    ),
                    timeout=self.capture_timeout,
                )
            except asyncio.TimeoutError as e:
                raise RenderTimeoutError(
                    f"PDF capture did not finish in {self.capture_timeout}s, url: '{request.url}'"
                ) from e
            run.advance(RenderState.PDF_CAPTURED)

        except PlaywrightError as e:
            raise RenderError(e.message) from e

        logger.info(f"Generated PDF: {len(data)} bytes")
        return data

    async def _wait_for_dashboard_ready(self, page: Page, url: str) -> None:
        try:
            handle = await page.wait_for_function(
                DASHBOARD_READY_JS,
                timeout=self.ready_timeout * 1000,
            )
            is_ready = await handle.json_value()
        except PlaywrightTimeoutError as e:
            raise DashboardNotReadyError(
                f"dashboard failed to get ready, url: '{url}': {e.message}"
            ) from e

        if not is_ready:
            # wait_for_function resolves only on a truthy value or times out
            logger.error(f"readiness poll returned {is_ready!r} without an error")
            raise DashboardNotReadyError(
                f"dashboard failed to get ready with no error, url: '{url}'"
            )
