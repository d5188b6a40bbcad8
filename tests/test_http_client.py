# tests/test_http_client.py
"""Tests for shared aiohttp session lifecycle."""
from __future__ import annotations

import pytest

from app.infra.http_client import close_all_sessions, get_probe_session


class TestProbeSession:
    @pytest.mark.asyncio
    async def test_session_is_reused_until_closed(self):
        first = get_probe_session()
        assert get_probe_session() is first

        await close_all_sessions()
        assert first.closed

        second = get_probe_session()
        assert second is not first
        await close_all_sessions()

    @pytest.mark.asyncio
    async def test_default_timeout_matches_probe_budget(self):
        session = get_probe_session()
        try:
            assert session.timeout.total == 5
        finally:
            await close_all_sessions()
