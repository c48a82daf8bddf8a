"""
Single-slot outcome handoff.

A render session has two writers (the capture pipeline and the browser's
failure listener) and one reader (the request handler). OutcomeSlot accepts
exactly one write; every later write is rejected, so the first activity to
reach a terminal state decides the outcome and the other cannot overwrite it.
"""

import asyncio
from dataclasses import dataclass

from .errors import DashPrintError


@dataclass(frozen=True)
class RenderOutcome:
    """Exactly one of data or error is set."""
    data: bytes | None = None
    error: DashPrintError | None = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.error is None):
            raise ValueError("RenderOutcome needs exactly one of data or error")

    @classmethod
    def success(cls, data: bytes) -> "RenderOutcome":
        return cls(data=data)

    @classmethod
    def failure(cls, error: DashPrintError) -> "RenderOutcome":
        return cls(error=error)

    def unwrap(self) -> bytes:
        """Return the data or raise the error."""
        if self.error is not None:
            raise self.error
        assert self.data is not None
        return self.data


class OutcomeSlot:
    """One write, one read. Must be created inside a running event loop."""

    def __init__(self) -> None:
        self._future: asyncio.Future[RenderOutcome] = (
            asyncio.get_running_loop().create_future()
        )
        self._taken = False

    @property
    def filled(self) -> bool:
        return self._future.done()

    def offer(self, outcome: RenderOutcome) -> bool:
        """Store the outcome if the slot is empty. Returns False if rejected."""
        if self._future.done():
            return False
        self._future.set_result(outcome)
        return True

    async def take(self) -> RenderOutcome:
        """Wait for the outcome. A slot can only be read once."""
        if self._taken:
            raise RuntimeError("outcome already taken")
        self._taken = True
        return await asyncio.shield(self._future)
