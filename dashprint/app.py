"""
Application factory - builds FastAPI app with middleware, error handling and routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from dashprint import __version__
from dashprint.config import Settings, get_settings
from dashprint.modules.report import RenderService
from dashprint.modules.report import router as report_router
from dashprint.modules.report.peers import AllowedPeers
from dashprint.shared.errors import DashPrintError
from dashprint.shared.logging import get_logger, setup_logging
from dashprint.shared.middleware import RequestContextMiddleware
from dashprint.shared.responses import ProblemResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info("Starting dashprint...")
    logger.info(f"Allowed peers: {settings.get_allowed_ip() or 'any'}")
    logger.info(f"PDF capture timeout: {settings.timeout}s")
    if settings.ignore_url_cert_errors:
        logger.warning("Frontend TLS certificate errors will be ignored")

    yield

    logger.info("dashprint stopped")


def build_app(
    settings: Settings | None = None,
    report_service: RenderService | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)
        report_service: Optional render service override (useful for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="dashprint",
        description="Dashboard to PDF report web service",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # Read-only state shared by all requests
    app.state.settings = settings
    app.state.allowed_peers = AllowedPeers(settings.get_allowed_ip())
    app.state.report_service = report_service or RenderService(settings)

    app.add_middleware(RequestContextMiddleware)

    @app.exception_handler(DashPrintError)
    async def dashprint_error_handler(request: Request, exc: DashPrintError) -> ProblemResponse:
        """Log the failure and write it as a problem document."""
        logger.error(exc.message)
        return ProblemResponse(exc.message, exc.http_status)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> ProblemResponse:
        """Anything the pipeline did not classify is still a problem document."""
        logger.exception(f"Unexpected error handling {request.method} {request.url.path}")
        return ProblemResponse(f"Cannot fetch data: {exc}", 500)

    app.include_router(report_router)

    return app
