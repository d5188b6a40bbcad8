# app/core/enhancement/invoker.py
from __future__ import annotations

from app.core.enhancement.domain import ErrorKind, PipelineFailure
from app.core.enhancement.ports import EnhancementProvider
from app.infra.logging_config import get_logger, mask_url

logger = get_logger(__name__)


class EnhancementInvoker:
    """
    Calls the external enhancement provider and normalizes its failures.

    Whatever the provider raises becomes ``PipelineFailure(PROVIDER_FAILURE)``
    with the original text kept in ``cause``. The returned URL is passed
    through as-is; checking it is the pipeline's job.
    """

    def __init__(self, provider: EnhancementProvider) -> None:
        self.provider = provider

    async def invoke(self, url: str) -> str:
        try:
            return await self.provider.enhance(url)
        except Exception as exc:
            logger.error(
                "Enhancement provider failed for %s: %s: %s",
                mask_url(url), type(exc).__name__, exc,
            )
            raise PipelineFailure(
                ErrorKind.PROVIDER_FAILURE,
                "Failed to enhance the image",
                cause=str(exc) or type(exc).__name__,
            ) from exc
