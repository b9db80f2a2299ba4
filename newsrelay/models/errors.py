from __future__ import annotations


class ProviderError(Exception):
    """A search/generation provider call could not produce results."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ConfigurationError(ProviderError):
    """Credentials or required settings are missing for a provider."""


class UpstreamError(ProviderError):
    """Non-success response or network failure from an upstream service."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        super().__init__(provider, message)
        self.status_code = status_code


class ParseError(ValueError):
    """Model output did not contain a usable JSON list of items."""


class ItemNotFound(LookupError):
    pass


class AlreadySent(RuntimeError):
    pass
