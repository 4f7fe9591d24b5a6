"""Anthropic text completion engine."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from askengine import settings
from askengine.engines.base import Engine
from askengine.models import context_size, resolve_alias
from askengine.prompts import HISTORY, Prompt
from askengine.protocol import merge_config
from askengine.transport import AnthropicTransport, CompletionTransport

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Anthropic engine"
DEFAULT_DESCRIPTION = (
    "useful for when you need to use Anthropic AI to answer questions. "
    "You should ask targeted questions"
)

# The completion grammar requires the prompt to open with a blank line
PROMPT_SEPARATOR = "\n\n"

_PREFIXES = MappingProxyType({
    "system": "Human: ",
    "user": "Human: ",
    "assistant": "Assistant: ",
    "history": HISTORY,
})


class AnthropicEngine(Engine):
    """Engine driving Anthropic's text completion API."""

    provider_label = "Anthropic"

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        description: str = DEFAULT_DESCRIPTION,
        prompts: Sequence[Prompt] | None = None,
        transport: CompletionTransport | None = None,
        token_counter: Callable[[str], int] | None = None,
        **kwargs: Any,
    ):
        super().__init__(
            name=name,
            description=description,
            prompts=prompts,
            token_counter=token_counter,
            **kwargs,
        )
        self._transport = transport
        self._owned: tuple[str, CompletionTransport] | None = None

    @property
    def engine_type(self) -> str:
        return "claude"

    @property
    def default_prefixes(self) -> Mapping[str, str]:
        return _PREFIXES

    def modelname_to_contextsize(self, model_name: str | None) -> int:
        return context_size(model_name)

    @property
    def model_name(self) -> str | None:
        return resolve_alias(self.config.model) if self.config.model else None

    async def transport_for(self, **kwargs: Any) -> CompletionTransport:
        """Return the injected transport or one built from resolved credentials.

        The engine owns at most one built transport; a request resolving to a
        different key closes it and opens a new one.
        """
        if self._transport is not None:
            return self._transport
        api_key = settings.resolve_api_key(**kwargs)
        if self._owned is not None:
            owned_key, owned = self._owned
            if owned_key == api_key:
                return owned
            self._owned = None
            await owned.aclose()
        transport = AnthropicTransport(api_key=api_key)
        self._owned = (api_key, transport)
        return transport

    async def aclose(self) -> None:
        """Close the built transport. An injected transport is left to its owner."""
        if self._owned is not None:
            _, owned = self._owned
            self._owned = None
            await owned.aclose()

    async def client(
        self,
        prompt: Prompt,
        inputs: Mapping[str, Any] | None = None,
        *,
        log_prompts: bool | None = None,
        **kwargs: Any,
    ) -> dict[str, Any] | None:
        """Render one prompt and send it."""
        api_key = kwargs.pop("anthropic_api_key", None)
        transport = await self.transport_for(anthropic_api_key=api_key)

        rendered = prompt.as_prompt(inputs=inputs, prefixes=self.default_prefixes, show_roles=True)
        text = rendered.pop("prompt")
        if not text.startswith(PROMPT_SEPARATOR):
            text = f"{PROMPT_SEPARATOR}{text}"

        params = merge_config(self.config, {**rendered, **kwargs}).to_params()
        if params.get("model"):
            params["model"] = resolve_alias(params["model"])
        params["prompt"] = text

        if log_prompts is None:
            log_prompts = settings.log_prompts_enabled()
        if log_prompts:
            logger.debug("Prompt after formatting:%s", text)

        return await transport.complete(params)
