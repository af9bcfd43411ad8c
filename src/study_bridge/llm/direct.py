"""Direct client for OpenAI-compatible chat-completions endpoints.

One request/response cycle per call: no retries, no schema validation
beyond pulling ``choices[0].message.content``. Fallback policy lives in
ProviderBridge.
"""

import time
from collections.abc import Callable
from types import TracebackType
from typing import Any

import httpx
import structlog

from study_bridge.errors import (
    MissingApiKeyError,
    ProviderHttpError,
    UnknownProviderError,
)
from study_bridge.llm.registry import BridgeConfig
from study_bridge.llm.schemas import ChatCompletionBody, ChatMessage

logger = structlog.get_logger()

# key name (e.g. "GROQ_API_KEY") -> secret or None
KeyLookup = Callable[[str], str | None]

DEFAULT_TIMEOUT_SECONDS = 60.0


def api_key_name(provider: str) -> str:
    """Configuration key holding the API key for *provider*."""
    return f"{provider.upper()}_API_KEY"


class DirectProviderClient:
    """Calls registered direct providers over HTTPS.

    Args:
        config: Bridge configuration with the endpoint registry.
        key_lookup: Resolves ``<PROVIDER>_API_KEY`` names to secrets.
        http_client: Shared client; when omitted the instance creates
            one and closes it in :meth:`aclose`.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        config: BridgeConfig,
        key_lookup: KeyLookup,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._config = config
        self._key_lookup = key_lookup
        self._timeout = httpx.Timeout(timeout)
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self._timeout)

    async def call_direct(
        self,
        provider: str,
        model: str,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """POST a two-message chat completion and return the reply text.

        Raises:
            UnknownProviderError: provider not in the endpoint registry.
            MissingApiKeyError: ``<PROVIDER>_API_KEY`` unset or empty.
            ProviderHttpError: non-2xx response.
        """
        url = self._config.endpoint_for(provider)
        if url is None:
            raise UnknownProviderError(provider)

        key_name = api_key_name(provider)
        key = self._key_lookup(key_name)
        if not key:
            raise MissingApiKeyError(provider, key_name)

        body = ChatCompletionBody(
            model=model,
            messages=[
                ChatMessage(role="system", content=system_prompt),
                ChatMessage(role="user", content=user_prompt),
            ],
            temperature=self._config.temperature,
        )

        start = time.perf_counter()
        response = await self._client.post(
            url,
            json=body.model_dump(),
            headers={"Authorization": f"Bearer {key}"},
            timeout=self._timeout,
        )
        latency_ms = int((time.perf_counter() - start) * 1000)

        if not response.is_success:
            message = _error_message(response, provider)
            logger.warning(
                "direct_provider_http_error",
                provider=provider,
                model=model,
                status_code=response.status_code,
                latency_ms=latency_ms,
            )
            raise ProviderHttpError(provider, response.status_code, message)

        data = response.json()
        content: str = data["choices"][0]["message"]["content"]
        logger.info(
            "direct_provider_call_completed",
            provider=provider,
            model=model,
            latency_ms=latency_ms,
            content_chars=len(content),
        )
        return content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "DirectProviderClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def _error_message(response: httpx.Response, provider: str) -> str:
    """Best-effort human-readable message from a provider error body."""
    fallback = f"API call to {provider} failed ({response.status_code})."
    try:
        payload: Any = response.json()
    except ValueError:
        return fallback
    if not isinstance(payload, dict):
        return fallback
    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return fallback
