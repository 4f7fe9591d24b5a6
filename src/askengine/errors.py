"""Engine-specific exceptions."""


class EngineError(Exception):
    """Base exception for engine errors."""

    pass


class ConfigurationError(EngineError):
    """Raised when required configuration (e.g. an API key) is missing."""

    pass


class CredentialError(EngineError):
    """Raised when the provider rejects the access token."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


class ProviderError(EngineError):
    """Raised when the provider returns a structured, non-credential error."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


class MalformedResponseError(EngineError):
    """Raised when a provider response is missing a required field."""

    def __init__(self, key: str, message: str | None = None):
        super().__init__(message or f"Expecting key {key} in response")
        self.key = key


class NoResponseError(ProviderError):
    """Raised when the transport returns nothing at all."""

    pass
