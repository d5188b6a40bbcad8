# app/infra/providers/__init__.py
"""
Enhancement providers.

Strategy pattern: the pipeline depends only on the EnhancementProvider
protocol; ``get_enhancement_provider()`` picks the implementation from
settings.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from app.infra.providers.base import EnhancementProviderError
from app.infra.providers.echo import EchoProvider
from app.infra.providers.remini_api import ReminiApiProvider

if TYPE_CHECKING:
    from app.config import Settings
    from app.core.enhancement.ports import EnhancementProvider


def get_enhancement_provider(settings: "Settings") -> "EnhancementProvider":
    """Build the provider selected by ``settings.enhancement_provider``."""
    if settings.enhancement_provider == "echo":
        return EchoProvider()

    return ReminiApiProvider(
        api_url=settings.remini_api_url,
        api_key=settings.remini_api_key,
        result_field=settings.remini_result_field,
        timeout=settings.enhancement_timeout_seconds,
    )


__all__ = [
    "EnhancementProviderError",
    "EchoProvider",
    "ReminiApiProvider",
    "get_enhancement_provider",
]
