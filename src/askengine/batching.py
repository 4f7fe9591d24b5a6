"""Batch partitioning and per-prompt response grouping."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, TypeVar

from askengine.errors import MalformedResponseError

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield contiguous slices of at most ``size`` items, in order."""
    if size < 1:
        raise ValueError(f"batch size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def choices_of(response: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Return the completion choices carried by one response.

    Providers that return several completions per request put them under
    ``choices``; single-completion responses are their own only choice.
    """
    choices = response.get("choices")
    if isinstance(choices, list):
        return choices
    return [response]


def group_choices(
    tagged: Sequence[tuple[int, Mapping[str, Any]]],
    count: int,
    n: int = 1,
) -> list[list[Mapping[str, Any]]]:
    """Group responses by originating prompt index.

    Args:
        tagged: ``(prompt_index, response)`` pairs.
        count: Number of prompts submitted.
        n: Completions requested per prompt.

    Raises:
        MalformedResponseError: A prompt did not get exactly ``n`` choices.
    """
    groups: list[list[Mapping[str, Any]]] = [[] for _ in range(count)]
    for index, response in tagged:
        groups[index].extend(choices_of(response))

    for index, group in enumerate(groups):
        if len(group) != n:
            raise MalformedResponseError(
                "completion",
                f"Expected {n} choice(s) for prompt {index}, got {len(group)}",
            )
    return groups
