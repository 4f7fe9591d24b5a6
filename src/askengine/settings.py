"""User configuration file and credential resolution."""

import json
import os
import stat
from pathlib import Path
from typing import Any

from askengine.errors import ConfigurationError

CONFIG_DIR = Path.home() / ".askengine"
CONFIG_FILE = CONFIG_DIR / "config.json"

API_KEY_ENV = "ANTHROPIC_API_KEY"
LOG_PROMPTS_ENV = "ASKENGINE_LOG_PROMPTS"

_TRUTHY = {"1", "true", "yes", "on"}


def load_config() -> dict | None:
    """Load user config."""
    if not CONFIG_FILE.exists():
        return None
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (json.JSONDecodeError, OSError):
        return None


def save_config(config: dict) -> None:
    """Save user config with restricted permissions."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    CONFIG_DIR.chmod(stat.S_IRWXU)  # 0o700, owner only
    CONFIG_FILE.write_text(json.dumps(config, indent=2))
    CONFIG_FILE.chmod(stat.S_IRUSR | stat.S_IWUSR)  # 0o600, owner read/write


def update_config(key: str, value: Any) -> None:
    """Merge a single key into existing config (preserves other keys)."""
    config = load_config() or {}
    config[key] = value
    save_config(config)


def get_setting(key: str, default: Any = None) -> Any:
    """Read a single key from the config file."""
    config = load_config()
    if not config:
        return default
    return config.get(key, default)


def resolve_api_key(anthropic_api_key: str | None = None, **_: Any) -> str:
    """Find the API key to use for a request.

    Order: explicit override, ANTHROPIC_API_KEY, then the config file.
    Extra keyword arguments (other request overrides) are ignored.

    Raises:
        ConfigurationError: If no key is available anywhere.
    """
    api_key = anthropic_api_key or os.getenv(API_KEY_ENV) or get_setting("anthropic_api_key")
    if not api_key:
        raise ConfigurationError(
            f"{API_KEY_ENV} not set. Export it or run 'askengine config --set-key'."
        )
    return api_key


def log_prompts_enabled() -> bool:
    """Whether formatted prompts should be logged before sending."""
    env = os.getenv(LOG_PROMPTS_ENV)
    if env is not None:
        return env.strip().lower() in _TRUTHY
    return bool(get_setting("log_prompts", False))
