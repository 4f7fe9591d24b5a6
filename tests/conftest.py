"""Shared fixtures."""

from unittest.mock import patch

import pytest

from askengine import settings
from askengine.transport import CompletionTransport


class FakeTransport(CompletionTransport):
    """Transport that returns canned responses and records every request."""

    def __init__(self, responses=None, default=None):
        self._responses = list(responses or [])
        self._default = default
        self.calls = []
        self.closed = False

    async def complete(self, params):
        self.calls.append(params)
        if self._responses:
            response = self._responses.pop(0)
        elif self._default is not None:
            response = self._default
        else:
            response = {"completion": f" answer {len(self.calls)}", "stop_reason": "stop_sequence"}
        if callable(response):
            return response(params)
        return response

    async def aclose(self):
        self.closed = True


@pytest.fixture(autouse=True)
def temp_config_dir(tmp_path):
    """Point the config file at a temporary directory for every test."""
    config_dir = tmp_path / ".askengine"
    config_file = config_dir / "config.json"

    with patch.object(settings, "CONFIG_DIR", config_dir), \
         patch.object(settings, "CONFIG_FILE", config_file):
        yield config_dir, config_file


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real credentials and flags out of tests."""
    monkeypatch.delenv(settings.API_KEY_ENV, raising=False)
    monkeypatch.delenv(settings.LOG_PROMPTS_ENV, raising=False)
    monkeypatch.delenv("ANTHROPIC_BASE_URL", raising=False)
