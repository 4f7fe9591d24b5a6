"""Abstract engine: the contract a provider-specific driver satisfies."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from askengine import settings
from askengine.batching import choices_of, chunked, group_choices
from askengine.errors import MalformedResponseError, NoResponseError, ProviderError
from askengine.prompts import Prompt
from askengine.protocol import DEFAULT_CONFIG, EngineConfig, EngineResult, merge_config
from askengine.responses import check_response, generation_info

logger = logging.getLogger(__name__)

# Requests dispatched per batch in ``generate``
BATCH_SIZE = 20


def count_words(text: str) -> int:
    """Whitespace word count, a monotonic proxy for token count."""
    return len(text.split())


class Engine(ABC):
    """Base class for completion engines.

    Subclasses implement the request path (``client``) and the model
    metadata; batching, validation and normalization live here.
    """

    provider_label = "Engine"
    default_config: EngineConfig = DEFAULT_CONFIG

    def __init__(
        self,
        name: str,
        description: str,
        prompts: Sequence[Prompt] | None = None,
        token_counter: Callable[[str], int] | None = None,
        **kwargs: Any,
    ):
        self.name = name
        self.description = description
        self.prompts = list(prompts or [])
        self.config = merge_config(self.default_config, kwargs)
        self._token_counter = token_counter or count_words
        self._batch_size = BATCH_SIZE

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @abstractmethod
    async def client(
        self,
        prompt: Prompt,
        inputs: Mapping[str, Any] | None = None,
        *,
        log_prompts: bool | None = None,
        **kwargs: Any,
    ) -> dict[str, Any] | None:
        """Render ``prompt`` and send exactly one request; return the raw response.

        ``log_prompts`` None means read the setting for this request.
        """
        ...

    @property
    @abstractmethod
    def default_prefixes(self) -> Mapping[str, str]:
        """Role -> text prefix used when rendering role-tagged prompts."""
        ...

    @abstractmethod
    def modelname_to_contextsize(self, model_name: str | None) -> int:
        """Maximum context window for a model."""
        ...

    @property
    @abstractmethod
    def engine_type(self) -> str:
        ...

    async def aclose(self) -> None:
        """Release transports this engine opened itself."""
        pass

    async def __aenter__(self) -> Engine:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def conversation_model(self, model_name: str | None) -> bool:
        return False

    @property
    def model_name(self) -> str | None:
        return self.config.model

    @property
    def default_params(self) -> dict[str, Any]:
        return self.config.to_params()

    @property
    def identifying_params(self) -> dict[str, Any]:
        """Model name plus default params, for callers' cache and log keys."""
        return {"model_name": self.model_name, **self.default_params}

    async def run(self, question: str, **kwargs: Any) -> str:
        """Get an answer from the engine for a single question."""
        response = await self.client(
            Prompt(template=question), log_prompts=settings.log_prompts_enabled(), **kwargs
        )

        if not response:
            raise NoResponseError(f"{self.provider_label}: No response from API")
        error = response.get("error")
        if error:
            code = None
            if isinstance(error, Mapping):
                code = error.get("code") or error.get("type")
                error = error.get("message") or "unknown error"
            raise ProviderError(f"{self.provider_label}: {error}", code=code)
        if "completion" not in response:
            raise MalformedResponseError("completion")

        logger.debug("%s response: %s", self.provider_label, response)
        return response["completion"]

    async def generate(
        self,
        prompts: Sequence[tuple[Prompt, Mapping[str, Any] | None]],
        stop: str | Sequence[str] | None = None,
        n: int = 1,
    ) -> EngineResult:
        """Call out to the provider once per prompt, in batches.

        Args:
            prompts: ``(prompt, inputs)`` pairs.
            stop: Optional stop sequences applied to every request.
            n: Completions expected per prompt.

        Returns:
            EngineResult whose i-th generation list belongs to the i-th prompt.

        Raises:
            EngineError: On the first failed request; nothing partial is returned.
        """
        params: dict[str, Any] = {}
        if isinstance(stop, str):
            params["stop"] = [stop]
        elif stop is not None:
            params["stop"] = list(stop)
        log_prompts = settings.log_prompts_enabled()

        tagged: list[tuple[int, dict[str, Any]]] = []
        index = 0
        for batch_no, batch in enumerate(chunked(prompts, self.batch_size)):
            logger.debug(
                "%s batch %d: %d prompt(s)", self.provider_label, batch_no, len(batch)
            )
            for prompt, inputs in batch:
                response = await self.client(
                    prompt, inputs=inputs, log_prompts=log_prompts, **params
                )
                if not response:
                    raise NoResponseError(
                        f"{self.provider_label}: No response from API for prompt {index}"
                    )
                # Errors are top-level; required keys live on each choice
                check_response(response, must_haves=())
                for choice in choices_of(response):
                    check_response(choice)
                tagged.append((index, response))
                index += 1

        generations = [
            generation_info(choices)
            for choices in group_choices(tagged, len(prompts), n)
        ]
        return EngineResult(generations=generations, engine_output={"token_usage": {}})

    def get_num_tokens(self, text: str) -> int:
        return self._token_counter(text)

    def max_tokens_for_prompt(self, prompt_text: str) -> int:
        """Tokens left for generation; negative if the prompt already overflows."""
        num_tokens = self.get_num_tokens(prompt_text)
        max_size = self.modelname_to_contextsize(self.model_name)
        return max_size - num_tokens
