"""Domain-specific exceptions for the provider bridge.

Messages are written to be shown to the user verbatim: they name the
missing configuration key, the provider, or the HTTP status code.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import ValidationError

RATE_LIMIT_STATUS_CODES: frozenset[int] = frozenset({429, 503})


class BridgeError(Exception):
    """Base class for failures raised by the provider bridge."""


class UnknownProviderError(BridgeError):
    """Requested provider is absent from the endpoint registry."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"Unknown provider: {provider}")


class MissingApiKeyError(BridgeError):
    """API key for a direct provider is not configured."""

    def __init__(self, provider: str, key_name: str) -> None:
        self.provider = provider
        self.key_name = key_name
        super().__init__(
            f"API Key for {provider} ({key_name}) is missing. Check your .env file."
        )


class ProviderHttpError(BridgeError):
    """Direct provider answered with a non-2xx HTTP status.

    Attributes:
        provider: Provider identifier from the endpoint registry.
        status_code: HTTP status returned by the provider.
    """

    def __init__(self, provider: str, status_code: int, message: str) -> None:
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


class EmptyProviderOutputError(BridgeError):
    """Managed gateway returned no structured output."""

    def __init__(self) -> None:
        super().__init__("Provider returned empty output.")


class MissingPromptParametersError(BridgeError):
    """Non-gateway provider requested without system/user prompts."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(
            f"Provider {provider} requires prompt parameters for direct bridge."
        )


class UnknownCapabilityError(BridgeError):
    """No capability is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown capability: '{name}'")


class StructuredOutputError(BridgeError):
    """Raised when a provider response cannot be parsed into expected schema.

    Attributes:
        provider: Name of the provider that returned invalid output.
        schema_name: Name of the expected Pydantic model.
    """

    def __init__(
        self,
        provider: str,
        schema_name: str,
        cause: ValidationError,
    ) -> None:
        self.provider = provider
        self.schema_name = schema_name
        super().__init__(f"{provider}: failed to parse response as {schema_name}")
        self.__cause__ = cause


def is_rate_limited(exc: BaseException, markers: Iterable[str]) -> bool:
    """Classify an exception as rate-limit / quota / overload.

    Matches on the message first. Falls back to duck typing on
    ``status_code`` (httpx-style, ProviderHttpError) and ``code``
    (google-genai APIError) so SDK exception classes are not imported.
    """
    message = str(exc)
    if any(marker in message for marker in markers):
        return True

    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and value in RATE_LIMIT_STATUS_CODES:
            return True
    return False


def attach_rescue_failure(original: BaseException, rescue_exc: BaseException) -> None:
    """Record a swallowed rescue failure on the error that will be re-raised."""
    original.add_note(f"Rescue attempt failed: {rescue_exc!r}")
    try:
        original.rescue_error = rescue_exc  # type: ignore[attr-defined]
    except AttributeError:
        pass
