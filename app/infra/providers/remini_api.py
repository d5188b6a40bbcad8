# app/infra/providers/remini_api.py
"""
Remini-compatible HTTP enhancement provider.

Calls ``GET {api_url}?url=<image>&apikey=<key>`` and expects a JSON body
carrying the enhanced image URL, either at the top level or nested under
``result`` / ``data``::

    {"status": true, "url": "https://..."}
    {"status": true, "result": {"url": "https://..."}}
    {"status": true, "result": "https://..."}

The key is sent as a query parameter and never logged.
"""
from __future__ import annotations

from typing import Any

import httpx

from app.infra.logging_config import get_logger, mask_url
from app.infra.providers.base import EnhancementProviderError

logger = get_logger(__name__)

_USER_AGENT = "ReminiEnhanceAPI/1.0"
_NESTED_KEYS = ("result", "data")


class ReminiApiProvider:
    """Remote Remini enhancement API."""

    def __init__(
        self,
        api_url: str,
        api_key: str | None = None,
        result_field: str = "url",
        timeout: int = 60,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_url = api_url
        self._api_key = api_key
        self._result_field = result_field
        self._timeout = timeout
        self._transport = transport

    async def enhance(self, url: str) -> str:
        params = {"url": url}
        if self._api_key:
            params["apikey"] = self._api_key

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                resp = await client.get(
                    self._api_url,
                    params=params,
                    headers={"User-Agent": _USER_AGENT, "Accept": "application/json"},
                )
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("Remini API returned HTTP %d for %s", status, mask_url(url))
            raise EnhancementProviderError(
                f"Remini API returned HTTP {status}", status_code=status,
            ) from exc
        except httpx.TimeoutException as exc:
            raise EnhancementProviderError(
                f"Remini API timed out after {self._timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise EnhancementProviderError(
                f"Remini API request failed: {type(exc).__name__}"
            ) from exc
        except ValueError as exc:
            raise EnhancementProviderError("Remini API returned a non-JSON body") from exc

        return self._extract_url(payload)

    def _extract_url(self, payload: Any) -> str:
        if not isinstance(payload, dict):
            raise EnhancementProviderError("Remini API returned an unexpected payload")

        if payload.get("status") is False:
            detail = payload.get("message") or payload.get("error") or "unknown error"
            raise EnhancementProviderError(f"Remini API reported failure: {detail}")

        value = payload.get(self._result_field)
        if value is None:
            for key in _NESTED_KEYS:
                nested = payload.get(key)
                if isinstance(nested, dict):
                    value = nested.get(self._result_field)
                elif isinstance(nested, str):
                    value = nested
                if value is not None:
                    break

        if value is None:
            raise EnhancementProviderError(
                f"Remini API response has no '{self._result_field}' field"
            )

        # Returned as-is: the pipeline decides whether it is a usable URL
        return value
