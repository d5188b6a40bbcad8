# tests/conftest.py
"""Pytest configuration and fixtures"""
import pytest
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.core.enhancement.domain import ProbeError  # noqa: E402
from fakes import FakeProber, FakeProvider  # noqa: E402


@pytest.fixture
def source_url():
    """A well-formed image URL"""
    return "https://images.example.com/photos/cat.jpg"


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def fake_prober():
    return FakeProber()


@pytest.fixture
def unreachable_prober():
    return FakeProber(head_error=ProbeError("HTTP 404", status=404))
