# app/core/enhancement/url_validator.py
"""
Syntactic URL validation. No network access happens here.
"""
from __future__ import annotations

from urllib.parse import urlsplit

ALLOWED_SCHEMES = frozenset({"http", "https"})


def is_valid_url(candidate: str | None) -> bool:
    """
    True if *candidate* is an absolute http(s) URL with a non-empty host.

    Surrounding whitespace is ignored. Malformed input returns False;
    this function never raises.
    """
    if not isinstance(candidate, str):
        return False

    candidate = candidate.strip()
    if not candidate:
        return False

    # Embedded whitespace or control characters are never part of a valid URL
    if any(ch.isspace() or ord(ch) < 0x20 for ch in candidate):
        return False

    try:
        parts = urlsplit(candidate)
        host = parts.hostname
        # Accessing .port validates the port component (raises on junk)
        parts.port
    except ValueError:
        return False

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return False

    return bool(host)
