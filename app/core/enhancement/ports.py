# app/core/enhancement/ports.py
from __future__ import annotations
from typing import Protocol
from app.core.enhancement.domain import HeadProbe


class EnhancementProvider(Protocol):
    async def enhance(self, url: str) -> str:
        """Return the URL of an enhanced copy of the image at *url*."""
        ...


class ResourceProber(Protocol):
    async def head(self, url: str, *, accept_forbidden: bool = False) -> HeadProbe:
        """
        Header-only request against *url*.

        Raises ProbeError on network failure, timeout, redirect overflow
        or an unacceptable status.
        """
        ...

    async def probe_size(self, url: str) -> str:
        """Best-effort ``"<n> KB"`` label; ``"Unknown"`` on any failure."""
        ...
