"""Shared types."""

from dataclasses import dataclass


@dataclass
class RequestContext:
    """Per-request context attached to every log record."""
    request_id: str
    peer: str | None = None
