"""
Test Configuration and Fixtures
===============================

Shared fixtures for the unit tests. No test talks to a real provider:
HTTP goes through a patched ``httpx.AsyncClient``.
"""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from universal_developer.adapters import ClaudeAdapter, OpenAIAdapter, QwenAdapter
from universal_developer.config import get_settings

ENV_VARS = ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "QWEN_API_KEY")


def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "integration: requires a real provider")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep developer .env files and API keys out of the tests"""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("UD_") or name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("UD_CONFIG_DIR", str(tmp_path / "ud-config"))

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_async_client():
    """Patched httpx.AsyncClient; returns the client used inside ``async with``"""
    with patch("httpx.AsyncClient") as mock_client:
        mock_instance = AsyncMock()
        mock_client.return_value.__aenter__.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def json_response():
    """Factory for a successful httpx response carrying a JSON body"""

    def _make(data):
        return MagicMock(json=lambda: data, raise_for_status=lambda: None)

    return _make


@pytest.fixture
def claude_adapter():
    return ClaudeAdapter("test-api-key")


@pytest.fixture
def openai_adapter():
    return OpenAIAdapter("test-api-key")


@pytest.fixture
def qwen_adapter():
    return QwenAdapter("test-api-key")


@pytest.fixture(params=[ClaudeAdapter, OpenAIAdapter, QwenAdapter], ids=["claude", "openai", "qwen"])
def adapter_class(request):
    return request.param
