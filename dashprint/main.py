"""
dashprint entrypoint - runs uvicorn server.
"""

import uvicorn

from dashprint.app import build_app
from dashprint.config import get_settings


def main() -> None:
    """Run the dashprint server."""
    settings = get_settings()
    app = build_app(settings)

    scheme = "https" if settings.tls_enabled else "http"
    print(f"Starting dashprint on {scheme}://{settings.host}:{settings.port}")

    tls_options = {}
    if settings.tls_enabled:
        tls_options = {
            "ssl_certfile": str(settings.tls_cert_file),
            "ssl_keyfile": str(settings.tls_key_file),
        }
        if settings.tls_ca_file is not None:
            tls_options["ssl_ca_certs"] = str(settings.tls_ca_file)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        **tls_options,
    )


if __name__ == "__main__":
    main()
