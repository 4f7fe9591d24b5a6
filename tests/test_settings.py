"""Tests for settings and credential resolution."""

import stat

import pytest

from askengine import settings
from askengine.errors import ConfigurationError


def test_save_and_load_config(temp_config_dir):
    """Test saving and loading configuration."""
    config_dir, config_file = temp_config_dir

    test_config = {"anthropic_api_key": "sk-ant-123", "log_prompts": True}
    settings.save_config(test_config)

    assert config_file.exists()
    assert settings.load_config() == test_config


def test_config_file_permissions(temp_config_dir):
    """Config file is readable only by its owner."""
    config_dir, config_file = temp_config_dir
    settings.save_config({"model": "claude-2"})

    assert stat.S_IMODE(config_file.stat().st_mode) == 0o600
    assert stat.S_IMODE(config_dir.stat().st_mode) == 0o700


def test_load_config_nonexistent(temp_config_dir):
    assert settings.load_config() is None


def test_load_config_invalid_json(temp_config_dir):
    config_dir, config_file = temp_config_dir
    config_dir.mkdir(parents=True, exist_ok=True)
    config_file.write_text("invalid json{")

    assert settings.load_config() is None


def test_update_config_preserves_other_keys(temp_config_dir):
    settings.save_config({"model": "claude-2.1"})
    settings.update_config("log_prompts", True)

    assert settings.load_config() == {"model": "claude-2.1", "log_prompts": True}


def test_get_setting_default(temp_config_dir):
    assert settings.get_setting("model", "fallback") == "fallback"
    settings.save_config({"model": "claude-2.1"})
    assert settings.get_setting("model", "fallback") == "claude-2.1"


def test_resolve_api_key_prefers_override(temp_config_dir, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")
    settings.save_config({"anthropic_api_key": "sk-ant-file"})

    assert settings.resolve_api_key(anthropic_api_key="sk-ant-arg") == "sk-ant-arg"


def test_resolve_api_key_env_before_file(temp_config_dir, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-env")
    settings.save_config({"anthropic_api_key": "sk-ant-file"})

    assert settings.resolve_api_key() == "sk-ant-env"


def test_resolve_api_key_from_file(temp_config_dir):
    settings.save_config({"anthropic_api_key": "sk-ant-file"})

    assert settings.resolve_api_key(temperature=0.5) == "sk-ant-file"


def test_resolve_api_key_missing(temp_config_dir):
    with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY not set"):
        settings.resolve_api_key()


@pytest.mark.parametrize("value,expected", [("1", True), ("true", True), ("0", False), ("no", False)])
def test_log_prompts_env(temp_config_dir, monkeypatch, value, expected):
    monkeypatch.setenv("ASKENGINE_LOG_PROMPTS", value)
    assert settings.log_prompts_enabled() is expected


def test_log_prompts_from_file(temp_config_dir):
    assert settings.log_prompts_enabled() is False
    settings.save_config({"log_prompts": True})
    assert settings.log_prompts_enabled() is True
