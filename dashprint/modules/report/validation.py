"""
Report request validation.

Everything here runs before a browser is launched, so a bad request never
costs an automation session.
"""

import re
from urllib.parse import SplitResult, parse_qs, urlsplit

from pydantic import ValidationError

from dashprint.shared.errors import (
    InvalidParameterError,
    MalformedBodyError,
    MalformedURLError,
    MethodNotAllowedError,
    UnsupportedMediaTypeError,
    URLActionError,
    URLPathError,
    URLSchemeError,
)

from .cookies import translate_cookies
from .schemas import RenderRequest, ReportSize, RequestEnvelope

JSON_MEDIA_TYPE = "application/json"
ALLOWED_SCHEMES = ("http", "https")
DASHBOARD_PATH_SUFFIX = "/zabbix.php"
DASHBOARD_PRINT_ACTION = "dashboard.print"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)


def check_method(method: str) -> None:
    if method.upper() != "POST":
        raise MethodNotAllowedError(method)


def check_content_type(content_type: str | None) -> None:
    if content_type != JSON_MEDIA_TYPE:
        raise UnsupportedMediaTypeError(content_type)


def parse_envelope(body: bytes) -> RequestEnvelope:
    try:
        return RequestEnvelope.model_validate_json(body)
    except ValidationError as e:
        raise MalformedBodyError(f"Cannot unmarshal JSON: {_first_error(e)}") from e


def _first_error(e: ValidationError) -> str:
    errors = e.errors()
    if not errors:
        return str(e)
    err = errors[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else err["msg"]


def parse_dimension(parameters: dict[str, str], field: str) -> int:
    """
    Parse a pixel dimension as a base-10 integer.

    No defaulting: a missing value is parsed as the empty string and rejected.
    """
    raw = parameters.get(field, "")

    if not _INT_RE.fullmatch(raw):
        raise InvalidParameterError(field, raw, f'parsing "{raw}": invalid syntax')

    value = int(raw, 10)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise InvalidParameterError(field, raw, f'parsing "{raw}": value out of range')
    if value <= 0:
        raise InvalidParameterError(field, raw, f'parsing "{raw}": value must be positive')

    return value


def parse_size(parameters: dict[str, str]) -> ReportSize:
    return ReportSize(
        width=parse_dimension(parameters, "width"),
        height=parse_dimension(parameters, "height"),
    )


def parse_target_url(url: str) -> SplitResult:
    """
    Parse and constrain the dashboard URL.

    Raises:
        MalformedURLError: empty, unparsable or scheme-less URL
        URLSchemeError: scheme is not http/https
        URLPathError: path does not end with the frontend entry point
        URLActionError: action query parameter is not dashboard.print
    """
    if not url:
        raise MalformedURLError(url, "url is empty")

    try:
        parsed = urlsplit(url)
        # Port is validated lazily by urllib
        parsed.port
    except ValueError as e:
        raise MalformedURLError(url, str(e)) from e

    if not parsed.scheme:
        raise MalformedURLError(url, "url is missing scheme")

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise URLSchemeError(parsed.scheme)

    if not parsed.path.endswith(DASHBOARD_PATH_SUFFIX):
        raise URLPathError(parsed.path)

    action = parse_qs(parsed.query, keep_blank_values=True).get("action", [""])[0]
    if action != DASHBOARD_PRINT_ACTION:
        raise URLActionError(action)

    return parsed


def build_render_request(envelope: RequestEnvelope) -> RenderRequest:
    """Validate the envelope and translate it into a RenderRequest."""
    size = parse_size(envelope.parameters)
    target = parse_target_url(envelope.url)

    cookies = translate_cookies(
        envelope.headers.get("Cookie"),
        url=envelope.url,
        hostname=target.hostname or "",
    )

    return RenderRequest(size=size, url=target.geturl(), cookies=cookies)
