# app/core/enhancement/pipeline.py
from __future__ import annotations

from app.core.enhancement.domain import (
    EnhancementRequest,
    EnhancementResult,
    ErrorKind,
    PipelineFailure,
    ProbeError,
    ValidationMode,
)
from app.core.enhancement.invoker import EnhancementInvoker
from app.core.enhancement.ports import EnhancementProvider, ResourceProber
from app.core.enhancement.url_validator import is_valid_url
from app.infra.logging_config import get_logger, mask_url

logger = get_logger(__name__)


class EnhancementPipeline:
    """
    Use-case layer for "enhance the image at this URL".
    Workflow: presence -> syntax -> (strict: reachability + type) -> provider
    -> result check -> size probe.

    Every step can end the run. Failures leave as ``PipelineFailure`` with the
    most specific ``ErrorKind``; nothing partial is ever returned. Instances
    hold only injected collaborators, so one pipeline can serve any number of
    concurrent requests.
    """

    def __init__(
        self,
        *,
        provider: EnhancementProvider,
        prober: ResourceProber,
        mode: ValidationMode = ValidationMode.STRICT,
    ) -> None:
        self.invoker = EnhancementInvoker(provider)
        self.prober = prober
        self.mode = mode

    @property
    def is_strict(self) -> bool:
        return self.mode is ValidationMode.STRICT

    async def enhance(self, raw_url: str | None) -> EnhancementResult:
        try:
            return await self._run(raw_url)
        except PipelineFailure as failure:
            logger.warning(
                "Enhancement failed: %s (%s)",
                failure.message, mask_url(raw_url),
                extra={"error_kind": failure.kind.value},
            )
            raise
        except Exception as exc:
            logger.error(
                "Unexpected enhancement fault: %s", type(exc).__name__,
                exc_info=True,
                extra={"error_kind": ErrorKind.INTERNAL_FAULT.value},
            )
            raise PipelineFailure(
                ErrorKind.INTERNAL_FAULT,
                "An unexpected error occurred",
                cause=str(exc) or type(exc).__name__,
            ) from exc

    async def _run(self, raw_url: str | None) -> EnhancementResult:
        request = self._parse_request(raw_url)

        if self.is_strict:
            await self._check_source(request.source_url)

        enhanced_url = await self.invoker.invoke(request.source_url)

        if not is_valid_url(enhanced_url):
            raise PipelineFailure(
                ErrorKind.INVALID_PROVIDER_RESULT,
                "Enhanced image URL is invalid",
                cause=(
                    mask_url(enhanced_url) if isinstance(enhanced_url, str)
                    else type(enhanced_url).__name__
                ),
            )
        enhanced_url = enhanced_url.strip()

        size_label = await self.prober.probe_size(enhanced_url)

        logger.info(
            "Enhanced %s -> %s (%s)",
            mask_url(request.source_url), mask_url(enhanced_url), size_label,
        )
        return EnhancementResult(
            original_url=request.source_url,
            enhanced_url=enhanced_url,
            size_label=size_label,
        )

    @staticmethod
    def _parse_request(raw_url: str | None) -> EnhancementRequest:
        if not raw_url:
            raise PipelineFailure(ErrorKind.MISSING_URL, "URL is required")

        if not isinstance(raw_url, str) or not is_valid_url(raw_url):
            raise PipelineFailure(ErrorKind.INVALID_URL, "Invalid URL format")

        return EnhancementRequest(source_url=raw_url.strip())

    async def _check_source(self, url: str) -> None:
        """Strict mode: the source must answer a HEAD with 2xx and image/*."""
        try:
            probe = await self.prober.head(url, accept_forbidden=False)
        except ProbeError as exc:
            raise PipelineFailure(
                ErrorKind.UNREACHABLE_RESOURCE,
                "Image URL is not reachable",
                cause=str(exc),
            ) from exc

        content_type = (probe.content_type or "").strip().lower()
        if not content_type.startswith("image/"):
            raise PipelineFailure(
                ErrorKind.NOT_AN_IMAGE,
                "URL does not point to an image",
                cause=f"content-type={probe.content_type!r}",
            )
