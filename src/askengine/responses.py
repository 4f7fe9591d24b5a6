"""Validation and normalization of raw provider responses."""

from collections.abc import Iterable, Mapping
from typing import Any

from askengine.errors import CredentialError, MalformedResponseError, ProviderError
from askengine.protocol import Generation

# Error codes that mean the access token itself was rejected
CREDENTIAL_ERROR_CODES = frozenset({"invalid_api_key", "authentication_error"})


def check_response(
    response: Mapping[str, Any],
    must_haves: Iterable[str] = ("completion",),
) -> None:
    """Make sure we got a valid response.

    Args:
        response: Raw provider response.
        must_haves: Top-level keys that must be present.

    Raises:
        CredentialError: The provider rejected the API key.
        ProviderError: The provider returned any other error.
        MalformedResponseError: A required key is missing.
    """
    error = response.get("error")
    if error:
        if isinstance(error, Mapping):
            code = error.get("code") or error.get("type")
            msg = error.get("message") or "unknown error"
        else:
            code, msg = None, str(error)
        if code in CREDENTIAL_ERROR_CODES:
            raise CredentialError("ANTHROPIC_API_KEY not valid", code=code)
        raise ProviderError(f"Anthropic error: {msg}", code=code)

    for key in must_haves:
        if key not in response:
            raise MalformedResponseError(key)


def generation_info(choices: Iterable[Mapping[str, Any]]) -> list[Generation]:
    """Normalize provider choices into ``Generation`` records, preserving order."""
    return [
        Generation(
            text=choice["completion"],
            finish_reason=choice.get("stop_reason"),
            logprobs=choice.get("logprobs"),
        )
        for choice in choices
    ]
