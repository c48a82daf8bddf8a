"""Report module schemas."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# REQUEST
# =============================================================================

class RequestEnvelope(BaseModel):
    """JSON body of a report request. Unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    url: str = Field(default="", description="Dashboard print URL")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers to replay against the frontend (Cookie)",
    )
    parameters: dict[str, str] = Field(
        default_factory=dict,
        description="Report parameters: width and height in pixels",
    )


# =============================================================================
# RENDER INPUT
# =============================================================================

@dataclass(frozen=True)
class ReportSize:
    """Report size in pixels."""
    width: int
    height: int


@dataclass(frozen=True)
class SessionCookie:
    """Cookie replayed into the browser session, bound to the target host."""
    name: str
    value: str
    url: str
    domain: str
    same_site: str = "Strict"
    http_only: bool = True

    def to_playwright(self) -> dict[str, Any]:
        # Playwright takes either url or domain/path, not both; url only decides secure.
        return {
            "name": self.name,
            "value": self.value,
            "domain": self.domain,
            "path": "/",
            "secure": self.url.lower().startswith("https://"),
            "httpOnly": self.http_only,
            "sameSite": self.same_site,
        }


@dataclass(frozen=True)
class RenderRequest:
    """Everything one automation session needs."""
    size: ReportSize
    url: str
    cookies: tuple[SessionCookie, ...] = field(default_factory=tuple)
