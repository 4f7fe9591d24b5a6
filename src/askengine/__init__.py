"""askengine: a uniform ask/generate facade over hosted LLM completion APIs."""

__version__ = "0.1.0"

from askengine.engines import AnthropicEngine, Engine
from askengine.errors import (
    ConfigurationError,
    CredentialError,
    EngineError,
    MalformedResponseError,
    NoResponseError,
    ProviderError,
)
from askengine.prompts import ConversationPrompt, Message, Prompt
from askengine.protocol import DEFAULT_CONFIG, EngineConfig, EngineResult, Generation

__all__ = [
    "AnthropicEngine",
    "ConfigurationError",
    "ConversationPrompt",
    "CredentialError",
    "DEFAULT_CONFIG",
    "Engine",
    "EngineConfig",
    "EngineError",
    "EngineResult",
    "Generation",
    "MalformedResponseError",
    "Message",
    "NoResponseError",
    "Prompt",
    "ProviderError",
    "__version__",
]
