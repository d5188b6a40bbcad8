# app/infra/providers/echo.py
from __future__ import annotations


class EchoProvider:
    """Dev double: "enhances" an image by returning its own URL."""

    async def enhance(self, url: str) -> str:
        return url
