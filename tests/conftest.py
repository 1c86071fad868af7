"""Shared pytest fixtures."""

from unittest.mock import MagicMock

import pytest
import requests

from mad_client.infrastructure.config import settings as settings_module


@pytest.fixture
def mock_session():
    """A requests session whose responses are set per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def mock_sleep():
    """Sleep replacement recording every wait."""
    return MagicMock()


@pytest.fixture
def mad_env(monkeypatch):
    """Environment for a fully configured client."""
    monkeypatch.setenv("MAD_SUBSCRIPTION_KEY", "test-key")
    monkeypatch.setenv("MAD_LOCATION", "westus2")
    for key in ("MAD_ENDPOINT", "MAD_BACKOFF_MS", "MAD_REQUEST_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Drop the cached global settings between tests."""
    monkeypatch.setattr(settings_module, "settings", None)
    yield
