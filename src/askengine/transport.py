"""Provider transports: one request in, one raw response mapping out."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import anthropic
import httpx
from anthropic import AsyncAnthropic

logger = logging.getLogger(__name__)

# Parameters the text completion endpoint takes as named arguments
_DIRECT_PARAMS = frozenset({
    "model",
    "prompt",
    "max_tokens_to_sample",
    "temperature",
    "stop_sequences",
    "top_k",
    "top_p",
    "metadata",
})


class CompletionTransport(ABC):
    """Base class for provider transports."""

    @abstractmethod
    async def complete(self, params: dict[str, Any]) -> dict[str, Any] | None:
        """Send one completion request.

        Returns the raw response mapping (possibly carrying an ``error``
        entry), or None if the provider returned nothing.
        """
        ...

    async def aclose(self) -> None:
        """Release connections held by this transport."""
        pass


class AnthropicTransport(CompletionTransport):
    """Anthropic text completion transport."""

    def __init__(self, api_key: str, timeout: float = 60.0):
        self.client = AsyncAnthropic(
            api_key=api_key,
            max_retries=0,  # retry policy belongs to callers
            http_client=httpx.AsyncClient(
                timeout=httpx.Timeout(timeout),
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            ),
        )

    async def complete(self, params: dict[str, Any]) -> dict[str, Any] | None:
        """Execute completion."""
        kwargs = {k: v for k, v in params.items() if k in _DIRECT_PARAMS}
        extra = {k: v for k, v in params.items() if k not in _DIRECT_PARAMS}
        if extra:
            kwargs["extra_body"] = extra

        try:
            response = await self.client.completions.create(**kwargs)
        except anthropic.APIStatusError as exc:
            logger.debug("Anthropic returned HTTP %s: %s", exc.status_code, exc.body)
            return {"error": _error_payload(exc)}

        return response.model_dump()

    async def aclose(self) -> None:
        await self.client.close()


def _error_payload(exc: anthropic.APIStatusError) -> dict[str, Any]:
    """Extract ``{code, message}`` from an Anthropic error body."""
    body = exc.body if isinstance(exc.body, dict) else {}
    error = body.get("error") if isinstance(body.get("error"), dict) else body
    return {
        "code": error.get("code") or error.get("type"),
        "message": error.get("message") or exc.message,
    }
