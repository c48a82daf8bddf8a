"""Report module routes."""

from fastapi import APIRouter, Depends, Request, Response
from starlette.requests import ClientDisconnect

from dashprint.shared.errors import MalformedBodyError
from dashprint.shared.logging import get_logger, get_request_context
from dashprint.shared.responses import PdfResponse

from .peers import AllowedPeers, authorize_peer, format_address
from .service import RenderService
from .validation import (
    build_render_request,
    check_content_type,
    check_method,
    parse_envelope,
)

logger = get_logger(__name__)
router = APIRouter(tags=["report"])

# Every method is routed here so that a wrong verb gets the same problem
# response as any other rejected request.
REPORT_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_report_service(request: Request) -> RenderService:
    """Dependency injection for service."""
    return request.app.state.report_service


def get_allowed_peers(request: Request) -> AllowedPeers:
    return request.app.state.allowed_peers


def remote_address(request: Request) -> str:
    if request.client is None:
        return ""
    return format_address(request.client.host, request.client.port)


@router.api_route("/report", methods=REPORT_METHODS)
async def create_report(
    request: Request,
    peers: AllowedPeers = Depends(get_allowed_peers),
    service: RenderService = Depends(get_report_service),
) -> Response:
    """
    Render a dashboard to PDF.

    Returns the PDF as binary content; failures are problem+json documents.
    """
    address = remote_address(request)
    ctx = get_request_context()
    if ctx is not None:
        ctx.peer = address

    logger.info(f"received report request from {address}")

    authorize_peer(address, peers)
    check_method(request.method)
    check_content_type(request.headers.get("content-type"))

    try:
        body = await request.body()
    except ClientDisconnect as e:
        raise MalformedBodyError("Can not read body data.") from e

    envelope = parse_envelope(body)
    render_request = build_render_request(envelope)

    logger.debug(
        f"making headless browser request with parameters url: {render_request.url}, "
        f"width: {envelope.parameters.get('width')}, height: {envelope.parameters.get('height')} "
        f"for report request from {address}"
    )

    data = await service.render(render_request)

    logger.info(f"writing response to report request from {address}")
    return PdfResponse(data, peer=address)
