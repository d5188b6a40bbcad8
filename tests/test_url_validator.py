# tests/test_url_validator.py
"""Tests for app/core/enhancement/url_validator.py"""
from __future__ import annotations

import pytest

from app.core.enhancement.url_validator import is_valid_url


class TestValidUrls:
    @pytest.mark.parametrize("url", [
        "http://example.com",
        "https://example.com/image.png",
        "https://cdn.example.com:8443/a/b.jpg?size=large#top",
        "http://127.0.0.1/img.gif",
        "http://[::1]:8080/img.webp",
        "HTTPS://EXAMPLE.COM/UPPER.PNG",
    ])
    def test_accepts_http_urls_with_host(self, url):
        assert is_valid_url(url) is True

    def test_surrounding_whitespace_is_trimmed(self):
        assert is_valid_url("   https://example.com/a.png \n") is True


class TestInvalidUrls:
    @pytest.mark.parametrize("url", ["", "   ", "\t\n"])
    def test_empty_or_whitespace(self, url):
        assert is_valid_url(url) is False

    def test_none(self):
        assert is_valid_url(None) is False

    @pytest.mark.parametrize("url", [
        "ftp://example.com/file.png",
        "file:///etc/passwd",
        "data:image/png;base64,AAAA",
        "javascript:alert(1)",
        "mailto:someone@example.com",
    ])
    def test_rejects_other_schemes(self, url):
        assert is_valid_url(url) is False

    @pytest.mark.parametrize("url", [
        "http://",
        "https:///path/only",
        "https://:8080/x",
    ])
    def test_rejects_missing_host(self, url):
        assert is_valid_url(url) is False

    @pytest.mark.parametrize("url", [
        "not a url",
        "example.com/image.png",
        "/relative/path.png",
        "https://exa mple.com/x.png",
        "http://example.com:notaport/",
        "http://[::1/broken",
    ])
    def test_rejects_malformed(self, url):
        assert is_valid_url(url) is False

    def test_non_string_input_does_not_raise(self):
        assert is_valid_url(12345) is False
