"""Data model shared by engines, transports and callers."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

# Legacy parameter names accepted from callers
_ALIASES = {"stop": "stop_sequences"}


class EngineConfig(BaseModel):
    """Provider parameters for an engine.

    Frozen, ``extras`` included: every override produces a new config via
    ``merge_config``.
    """

    model_config = ConfigDict(frozen=True)

    model: str | None = None
    max_tokens_to_sample: int | None = None
    temperature: float | None = None
    stop_sequences: tuple[str, ...] | None = None
    extras: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)  # provider-specific passthrough

    @field_validator("stop_sequences", mode="before")
    @classmethod
    def _wrap_single_stop(cls, value: Any) -> Any:
        # A bare string is one stop sequence, not one per character
        if isinstance(value, str):
            return (value,)
        return value

    @field_validator("extras", mode="after")
    @classmethod
    def _freeze_extras(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("extras")
    def _serialize_extras(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)

    def to_params(self) -> dict[str, Any]:
        """Return a fresh outbound parameter mapping, omitting unset fields."""
        params: dict[str, Any] = {}
        for name in _FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            params[name] = list(value) if name == "stop_sequences" else value
        params.update(self.extras)
        return params


_FIELDS = ("model", "max_tokens_to_sample", "temperature", "stop_sequences")

DEFAULT_CONFIG = EngineConfig(
    model="claude-2",
    max_tokens_to_sample=8096,
    temperature=0.2,
)


def merge_config(base: EngineConfig, overrides: Mapping[str, Any] | None = None) -> EngineConfig:
    """Shallow-merge caller overrides onto ``base``; caller keys always win.

    Unknown keys land in ``extras``. Neither input is modified.
    """
    if not overrides:
        return base

    fields = {name: getattr(base, name) for name in _FIELDS}
    extras = dict(base.extras)
    for key, value in overrides.items():
        key = _ALIASES.get(key, key)
        if key in _FIELDS:
            fields[key] = value
        elif key == "extras":
            extras.update(value or {})
        else:
            extras[key] = value

    return EngineConfig(**fields, extras=extras)


class Generation(BaseModel):
    """One normalized completion choice."""

    text: str
    finish_reason: str | None = None
    logprobs: Any | None = None


class EngineResult(BaseModel):
    """Complete output of a ``generate`` call."""

    generations: list[list[Generation]]
    engine_output: dict[str, Any] = Field(default_factory=dict)
