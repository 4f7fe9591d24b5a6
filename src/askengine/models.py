"""Static model registry: aliases and context window sizes."""

from typing import Dict

# Context size used for unknown or placeholder model names
DEFAULT_CONTEXT_SIZE = 100000

# Maximum context (prompt + completion tokens) per model
CONTEXT_SIZES: Dict[str, int] = {
    "claude-2": 100000,
    "claude-2.0": 100000,
    "claude-2.1": 200000,
    "claude-instant-1": 100000,
    "claude-instant-1.2": 100000,
    "claude-3-haiku-20240307": 200000,
    "claude-3-sonnet-20240229": 200000,
    "claude-3-opus-20240229": 200000,
}

# Short names accepted on the command line
MODEL_ALIASES: Dict[str, str] = {
    "claude": "claude-2",
    "claude-2-latest": "claude-2.1",
    "instant": "claude-instant-1.2",
    "haiku": "claude-3-haiku-20240307",
    "sonnet": "claude-3-sonnet-20240229",
    "opus": "claude-3-opus-20240229",
}


def resolve_alias(model_id: str) -> str:
    """Map a short alias to its full model ID; other names pass through."""
    return MODEL_ALIASES.get(model_id, model_id)


def context_size(model_id: str | None) -> int:
    """
    Look up the maximum context window for a model.

    Args:
        model_id: Model identifier or alias

    Returns:
        Context size in tokens, DEFAULT_CONTEXT_SIZE if the model is unknown
    """
    if not model_id:
        return DEFAULT_CONTEXT_SIZE
    return CONTEXT_SIZES.get(resolve_alias(model_id), DEFAULT_CONTEXT_SIZE)
