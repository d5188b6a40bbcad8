# app/infra/providers/base.py
"""
Enhancement provider abstraction layer.

A provider takes a public image URL and returns the URL of an enhanced
copy. Providers are untrusted: callers wrap every call and re-classify
whatever comes out (see EnhancementInvoker).
"""
from __future__ import annotations


class EnhancementProviderError(Exception):
    """
    Base error for provider failures.

    Attributes:
        status_code: HTTP status returned by the provider, if any.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
