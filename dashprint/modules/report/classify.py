"""Browser load-failure → user-facing message."""

NET_ERR_CERT_AUTHORITY_INVALID = "net::ERR_CERT_AUTHORITY_INVALID"


def classify_load_failure(error_text: str | None) -> str:
    """Map a failed-request error text to the message shown to the caller."""
    text = (error_text or "").strip()

    if text.upper() == NET_ERR_CERT_AUTHORITY_INVALID.upper():
        return (
            "Invalid certificate authority detected while loading dashboard. Fix TLS "
            "configuration or configure web service to ignore TLS certificate errors "
            "when accessing frontend URL."
        )

    if not text:
        return (
            "network.EventLoadingFailed event with empty ErrorText was received "
            "while loading dashboard."
        )

    return (
        f"network.EventLoadingFailed event with ErrorText = '{error_text}' was "
        "received while loading dashboard."
    )
