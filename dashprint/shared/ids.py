"""ID generation."""

import uuid


def generate_request_id() -> str:
    """Generate a request ID for tracing."""
    return f"req_{uuid.uuid4().hex[:16]}"
