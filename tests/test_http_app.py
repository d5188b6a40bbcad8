# tests/test_http_app.py
"""Tests for the HTTP surface: routes, body parsing, error mapping."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.core.enhancement import EnhancementPipeline, ValidationMode
from app.transport.http_app import app, get_pipeline
from fakes import FakeProber, FakeProvider

SOURCE = "https://images.example.com/cat.jpg"
ENHANCED = "https://cdn.example.com/out.png"


@pytest.fixture
def use_pipeline():
    """Install a pipeline built from doubles; returns the installer."""
    def _install(provider=None, prober=None, mode=ValidationMode.STRICT):
        pipeline = EnhancementPipeline(
            provider=provider or FakeProvider(result=ENHANCED),
            prober=prober or FakeProber(size_label="200.00 KB"),
            mode=mode,
        )
        app.dependency_overrides[get_pipeline] = lambda: pipeline
        return pipeline

    yield _install
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app, raise_server_exceptions=False)


# ============================================================================
# Liveness
# ============================================================================

class TestLiveness:
    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "OK"
        assert data["message"] == "Remini Enhancement API is running"
        assert data["timestamp"].endswith("Z")

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy"}


# ============================================================================
# Success paths
# ============================================================================

class TestEnhanceSuccess:
    def test_post_json(self, client, use_pipeline):
        use_pipeline()
        resp = client.post("/enhance-image", json={"url": SOURCE})

        assert resp.status_code == 200
        assert resp.json() == {
            "original_url": SOURCE,
            "image_data": ENHANCED,
            "image_size": "200.00 KB",
        }

    def test_get_query(self, client, use_pipeline):
        use_pipeline()
        resp = client.get("/enhance-image", params={"url": SOURCE})

        assert resp.status_code == 200
        assert resp.json()["image_data"] == ENHANCED

    def test_post_form_encoded(self, client, use_pipeline):
        provider = FakeProvider(result=ENHANCED)
        use_pipeline(provider=provider)
        resp = client.post("/enhance-image", data={"url": SOURCE})

        assert resp.status_code == 200
        assert provider.calls == [SOURCE]

    def test_basic_mode_omits_original_url(self, client, use_pipeline):
        use_pipeline(mode=ValidationMode.BASIC)
        resp = client.post("/enhance-image", json={"url": SOURCE})

        assert resp.status_code == 200
        assert resp.json() == {"image_data": ENHANCED, "image_size": "200.00 KB"}

    def test_unknown_size_still_succeeds(self, client, use_pipeline):
        use_pipeline(prober=FakeProber(size_label="Unknown"))
        resp = client.get("/enhance-image", params={"url": SOURCE})

        assert resp.status_code == 200
        assert resp.json()["image_size"] == "Unknown"


# ============================================================================
# Failure mapping
# ============================================================================

def _assert_failed(resp, message: str):
    assert resp.status_code == 400
    assert resp.json() == {"error": "ENHANCEMENT_FAILED", "message": message}


class TestEnhanceFailures:
    def test_missing_url_post(self, client, use_pipeline):
        use_pipeline()
        _assert_failed(client.post("/enhance-image", json={}), "URL is required")

    def test_empty_body_post(self, client, use_pipeline):
        use_pipeline()
        _assert_failed(client.post("/enhance-image"), "URL is required")

    def test_missing_url_get(self, client, use_pipeline):
        use_pipeline()
        _assert_failed(client.get("/enhance-image"), "URL is required")

    def test_empty_url_get(self, client, use_pipeline):
        use_pipeline()
        _assert_failed(client.get("/enhance-image?url="), "URL is required")

    def test_invalid_url(self, client, use_pipeline):
        use_pipeline()
        _assert_failed(
            client.post("/enhance-image", json={"url": "not a url"}),
            "Invalid URL format",
        )

    def test_non_string_url(self, client, use_pipeline):
        use_pipeline()
        _assert_failed(
            client.post("/enhance-image", json={"url": 123}),
            "Invalid URL format",
        )

    def test_malformed_json(self, client, use_pipeline):
        use_pipeline()
        resp = client.post(
            "/enhance-image",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        _assert_failed(resp, "Invalid URL format")

    def test_not_an_image(self, client, use_pipeline):
        use_pipeline(prober=FakeProber(content_type="text/html"))
        _assert_failed(
            client.post("/enhance-image", json={"url": SOURCE}),
            "URL does not point to an image",
        )

    def test_provider_failure_does_not_leak_cause(self, client, use_pipeline):
        use_pipeline(provider=FakeProvider(error=RuntimeError("internal token xyz expired")))
        resp = client.post("/enhance-image", json={"url": SOURCE})

        _assert_failed(resp, "Failed to enhance the image")
        assert "xyz" not in resp.text

    def test_invalid_provider_result(self, client, use_pipeline):
        use_pipeline(provider=FakeProvider(result=""))
        _assert_failed(
            client.get("/enhance-image", params={"url": SOURCE}),
            "Enhanced image URL is invalid",
        )

    def test_fault_outside_pipeline_is_500(self, client):
        class Exploding:
            is_strict = True

            async def enhance(self, url):
                raise RuntimeError("boundary bug")

        app.dependency_overrides[get_pipeline] = lambda: Exploding()
        try:
            resp = client.get("/enhance-image", params={"url": SOURCE})
        finally:
            app.dependency_overrides.clear()

        assert resp.status_code == 500
        data = resp.json()
        assert data["error"] == "INTERNAL_SERVER_ERROR"
        assert "boundary bug" not in resp.text

    def test_unknown_route_is_404(self, client):
        resp = client.get("/nope")
        assert resp.status_code == 404
        assert resp.json()["error"] == "NOT_FOUND"


class TestResponseHeaders:
    def test_request_id_and_security_headers(self, client):
        resp = client.get("/")
        assert "X-Request-ID" in resp.headers
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["Referrer-Policy"] == "no-referrer"


# ============================================================================
# Lifespan
# ============================================================================

class TestLifespan:
    @pytest.mark.asyncio
    async def test_echo_provider_refused_in_prod(self, monkeypatch):
        from app.config import Settings
        from app.transport import http_app

        prod_echo = Settings(_env_file=None, app_env="prod", enhancement_provider="echo")
        monkeypatch.setattr(http_app, "settings", prod_echo)

        with pytest.raises(RuntimeError, match="Echo provider"):
            async with http_app.lifespan(app):
                pass

    @pytest.mark.asyncio
    async def test_startup_installs_pipeline(self, monkeypatch):
        from app.config import Settings
        from app.transport import http_app

        dev_echo = Settings(_env_file=None, app_env="dev", enhancement_provider="echo")
        monkeypatch.setattr(http_app, "settings", dev_echo)

        async with http_app.lifespan(app):
            assert isinstance(app.state.pipeline, EnhancementPipeline)
