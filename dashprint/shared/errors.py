"""
Typed error hierarchy.

Every failure the report pipeline can surface derives from DashPrintError and
carries the HTTP status the response writer should use. Errors are raised in
the core and only converted to HTTP responses by the app exception handler.
"""

from typing import Any


class DashPrintError(Exception):
    """Base error with a stable code and an HTTP status."""

    code = "internal_error"
    http_status = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# PEER AUTHORIZATION
# =============================================================================

class AddressParseError(DashPrintError):
    """Remote address could not be split into host and port."""

    code = "address_parse_error"

    def __init__(self, address: str, reason: str) -> None:
        super().__init__(
            f"Cannot remove port from host for incoming ip {reason}.",
            {"address": address},
        )
        self.address = address


class UnauthorizedPeerError(DashPrintError):
    """Caller is not on the allow-list."""

    code = "unauthorized_peer"

    def __init__(self, address: str) -> None:
        super().__init__(
            f"Cannot accept incoming connection for peer: {address}.",
            {"address": address},
        )
        self.address = address


# =============================================================================
# REQUEST VALIDATION
# =============================================================================

class MethodNotAllowedError(DashPrintError):
    code = "method_not_allowed"
    http_status = 405

    def __init__(self, method: str) -> None:
        super().__init__("Method is not supported.", {"method": method})


class UnsupportedMediaTypeError(DashPrintError):
    # Reported as 405, same as a wrong method.
    code = "unsupported_media_type"
    http_status = 405

    def __init__(self, content_type: str | None) -> None:
        super().__init__(
            "Content Type is not application/json.",
            {"content_type": content_type},
        )


class MalformedBodyError(DashPrintError):
    """Body could not be read or decoded."""

    code = "malformed_body"


class InvalidParameterError(DashPrintError):
    code = "invalid_parameter"
    http_status = 400

    def __init__(self, field: str, value: str | None, reason: str) -> None:
        super().__init__(
            f"Incorrect parameter {field}: {reason}",
            {"field": field, "value": value},
        )
        self.field = field
        self.value = value


class InvalidURLError(DashPrintError):
    """Base for every target URL constraint violation."""

    code = "invalid_url"
    http_status = 400

    def __init__(self, message: str, value: str) -> None:
        super().__init__(message, {"value": value})
        self.value = value


class MalformedURLError(InvalidURLError):
    """URL is empty, unparsable, or has no scheme."""

    code = "malformed_url"

    def __init__(self, value: str, reason: str) -> None:
        super().__init__(f"Incorrect request url: {reason}", value)


class URLSchemeError(InvalidURLError):
    code = "unexpected_url_scheme"

    def __init__(self, scheme: str) -> None:
        super().__init__(f'Unexpected URL scheme: "{scheme}"', scheme)


class URLPathError(InvalidURLError):
    code = "unexpected_url_path"

    def __init__(self, path: str) -> None:
        super().__init__(f'Unexpected URL path: "{path}"', path)


class URLActionError(InvalidURLError):
    code = "unexpected_url_action"

    def __init__(self, action: str) -> None:
        super().__init__(f'Unexpected URL action: "{action}"', action)


# =============================================================================
# RENDERING
# =============================================================================

class RenderError(DashPrintError):
    """Automation session failed; the request is terminal."""

    code = "render_failed"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Cannot fetch data: {message}", details)
        self.reason = message


class LoadFailureError(RenderError):
    """The browser reported a failed navigation or resource load."""

    code = "load_failed"

    def __init__(self, message: str, error_text: str | None) -> None:
        super().__init__(message, {"error_text": error_text})
        self.error_text = error_text


class DashboardNotReadyError(RenderError):
    code = "dashboard_not_ready"


class RenderTimeoutError(RenderError):
    code = "render_timeout"


class RenderCancelledError(RenderError):
    """The session ended without producing data or a classified failure."""

    code = "render_cancelled"
