"""Shared schemas for the provider bridge."""

from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

# Structured output as returned by a provider: a JSON object for every
# capability, or a bare list when a direct provider answers with one.
ProviderResponse = dict[str, Any] | list[Any]


class GatewayCall(Protocol):
    """Capability-supplied managed-gateway invocation.

    Receives the capability input and the namespaced model identifier;
    returns the structured output, or None when the gateway produced none.
    """

    def __call__(
        self, capability_input: Any, *, model: str
    ) -> Awaitable[ProviderResponse | None]: ...


class NormalizationTier(StrEnum):
    """How many fallback keys the normalizer synthesizes."""

    FULL = "full"  # primary direct-provider fallback
    REDUCED = "reduced"  # rescue fallback


# capability shape synthesis: (raw_text, tier) -> output-shaped dict
ShapeAdapter = Callable[[str, NormalizationTier], dict[str, Any]]


class ProviderRequest(BaseModel):
    """Input for one bridge call.

    ``preferred_provider``/``preferred_model`` left as None resolve to the
    gateway identifier and its default model.
    """

    model_config = ConfigDict(frozen=True)

    capability_input: Any = None
    preferred_provider: str | None = None
    preferred_model: str | None = None
    system_prompt: str | None = None
    user_prompt: str | None = None
    capability: str | None = None  # selects the normalizer shape adapter

    @property
    def has_prompts(self) -> bool:
        return bool(self.system_prompt) and bool(self.user_prompt)


class ChatMessage(BaseModel):
    """One message of an OpenAI-compatible chat-completions body."""

    role: str
    content: str


class ChatCompletionBody(BaseModel):
    """Request body sent to direct providers."""

    model: str
    messages: list[ChatMessage]
    temperature: float
