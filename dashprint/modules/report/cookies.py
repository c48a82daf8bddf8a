"""Cookie header → browser session cookies."""

import re

from .schemas import SessionCookie

# RFC 6265 token characters
_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
# cookie-octet, plus space and comma which browsers send in the wild
_VALUE_RE = re.compile(r"^[\x20\x21\x23-\x2b\x2c-\x3a\x3c-\x5b\x5d-\x7e]*$")


def parse_cookie_header(header: str | None) -> list[tuple[str, str]]:
    """
    Split a Cookie header into (name, value) pairs.

    Order and duplicates are kept. Pairs with an invalid name or value are
    skipped rather than failing the whole header.
    """
    if not header:
        return []

    pairs = []
    for part in header.split(";"):
        part = part.strip()
        if not part:
            continue

        name, _, value = part.partition("=")
        name = name.strip()
        if not _TOKEN_RE.match(name):
            continue

        if len(value) > 1 and value[0] == value[-1] == '"':
            value = value[1:-1]
        if not _VALUE_RE.match(value):
            continue

        pairs.append((name, value))

    return pairs


def translate_cookies(header: str | None, url: str, hostname: str) -> tuple[SessionCookie, ...]:
    """Build one SessionCookie per pair, bound to the target URL and host."""
    return tuple(
        SessionCookie(name=name, value=value, url=url, domain=hostname)
        for name, value in parse_cookie_header(header)
    )
