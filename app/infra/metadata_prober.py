# app/infra/metadata_prober.py
"""
Header-only metadata probes over the shared aiohttp session.

``head()`` issues a HEAD request (5 s total timeout, at most 3 redirects)
and returns the status and the headers the pipeline cares about.
``probe_size()`` wraps it for size reporting and never raises: any failure
collapses to the ``"Unknown"`` label so sizing cannot fail a request.

A 403 is accepted only when the caller asks for it. Some image hosts
refuse HEAD while still serving GET, so size probes tolerate it; the
reachability check does not.
"""
from __future__ import annotations

import asyncio

import aiohttp

from app.core.enhancement.domain import HeadProbe, ProbeError
from app.infra.http_client import get_probe_session
from app.infra.logging_config import get_logger, mask_url

logger = get_logger(__name__)

PROBE_TIMEOUT_SECONDS = 5
PROBE_MAX_REDIRECTS = 3
UNKNOWN_SIZE = "Unknown"


def parse_content_length(raw: str | None) -> int:
    """Content-Length header → int; missing or non-numeric → 0."""
    if raw is None:
        return 0
    raw = raw.strip()
    if not raw.isdigit():
        return 0
    return int(raw)


def format_size_label(size_bytes: int) -> str:
    """``204800`` → ``"200.00 KB"``"""
    return f"{size_bytes / 1024:.2f} KB"


def _is_acceptable(status: int, accept_forbidden: bool) -> bool:
    if 200 <= status < 300:
        return True
    return accept_forbidden and status == 403


class MetadataProber:
    """Implements ResourceProber with aiohttp HEAD requests."""

    def __init__(
        self,
        timeout_seconds: float = PROBE_TIMEOUT_SECONDS,
        max_redirects: int = PROBE_MAX_REDIRECTS,
    ) -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._max_redirects = max_redirects

    async def head(self, url: str, *, accept_forbidden: bool = False) -> HeadProbe:
        session = get_probe_session()
        try:
            async with session.head(
                url,
                timeout=self._timeout,
                allow_redirects=True,
                # aiohttp raises once its hop count reaches max_redirects,
                # so +1 lets exactly max_redirects hops through
                max_redirects=self._max_redirects + 1,
            ) as resp:
                if not _is_acceptable(resp.status, accept_forbidden):
                    raise ProbeError(f"HTTP {resp.status}", status=resp.status)

                return HeadProbe(
                    url=str(resp.url),
                    status=resp.status,
                    content_type=resp.headers.get("Content-Type"),
                    content_length=parse_content_length(resp.headers.get("Content-Length")),
                )
        except ProbeError:
            raise
        except aiohttp.TooManyRedirects as exc:
            raise ProbeError(f"Too many redirects (>{self._max_redirects})") from exc
        except asyncio.TimeoutError as exc:
            raise ProbeError(f"Timed out after {self._timeout.total}s") from exc
        except (aiohttp.ClientError, ValueError) as exc:
            # ValueError: yarl rejects some URLs before any I/O happens
            raise ProbeError(f"{type(exc).__name__}: {exc}") from exc

    async def probe_size(self, url: str) -> str:
        try:
            probe = await self.head(url, accept_forbidden=True)
        except ProbeError as exc:
            logger.warning("Error getting file size for %s: %s", mask_url(url), exc)
            return UNKNOWN_SIZE
        except Exception as exc:
            logger.error(
                "Unexpected error getting file size for %s: %s",
                mask_url(url), type(exc).__name__, exc_info=True,
            )
            return UNKNOWN_SIZE

        return format_size_label(probe.content_length)
