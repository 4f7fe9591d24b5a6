"""Prompt templates rendered into request-ready text."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, Field

# Prefix value marking where conversation history is spliced in
HISTORY = "history"

Role = Literal["system", "user", "assistant", "history"]


class Message(BaseModel):
    """A single role-tagged message template."""

    role: Role
    content: str = ""


class Prompt(BaseModel):
    """A single text template with ``str.format`` placeholders."""

    template: str

    def format(self, inputs: Mapping[str, Any] | None = None) -> str:
        """Substitute inputs into the template. Missing inputs raise KeyError."""
        return self.template.format_map(dict(inputs or {}))

    def as_prompt(
        self,
        inputs: Mapping[str, Any] | None = None,
        prefixes: Mapping[str, str] | None = None,
        show_roles: bool = False,
    ) -> dict[str, Any]:
        """Render to a request fragment. Plain prompts carry no roles."""
        return {"prompt": self.format(inputs)}


class ConversationPrompt(Prompt):
    """A sequence of role-tagged messages rendered as one transcript.

    A message with role ``history`` is replaced by the messages passed in
    ``inputs["history"]`` (``Message`` objects or ``{"role", "content"}`` dicts).
    """

    template: str = ""
    messages: list[Message] = Field(default_factory=list)

    def as_prompt(
        self,
        inputs: Mapping[str, Any] | None = None,
        prefixes: Mapping[str, str] | None = None,
        show_roles: bool = False,
    ) -> dict[str, Any]:
        inputs = dict(inputs or {})
        prefixes = prefixes or {}
        lines = []
        for message, is_template in self._expand(inputs):
            text = message.content.format_map(inputs) if is_template else message.content
            if show_roles:
                text = f"{prefixes.get(message.role, '')}{text}"
            lines.append(text)
        return {"prompt": "\n\n".join(lines)}

    def _expand(self, inputs: dict[str, Any]) -> list[tuple[Message, bool]]:
        # History entries are inserted verbatim, never formatted
        expanded = []
        for message in self.messages:
            if message.role != HISTORY:
                expanded.append((message, True))
                continue
            for item in inputs.get(HISTORY) or []:
                item = item if isinstance(item, Message) else Message(**item)
                if item.role == HISTORY:
                    raise ValueError("history entries cannot themselves be history")
                expanded.append((item, False))
        return expanded
