"""Completion engines."""

from askengine.engines.anthropic import AnthropicEngine
from askengine.engines.base import BATCH_SIZE, Engine

__all__ = ["AnthropicEngine", "BATCH_SIZE", "Engine"]
