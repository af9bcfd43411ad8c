"""Managed gateway: Google Gemini via google-genai SDK.

Gemini enforces the capability's output model natively
(response_mime_type="application/json" + response_schema), so results on
this path need no normalization.
"""

import json
from typing import Any

import structlog
from google import genai
from google.genai import types
from pydantic import BaseModel

from study_bridge.llm.registry import GatewayPolicy

logger = structlog.get_logger()


class GeminiGateway:
    """Structured and free-form generation through the managed gateway.

    Model identifiers arrive namespaced (``googleai/gemini-1.5-flash``);
    the namespace is stripped before calling the SDK.
    """

    def __init__(
        self,
        api_key: str | None,
        policy: GatewayPolicy | None = None,
        *,
        client: genai.Client | None = None,
    ) -> None:
        self._policy = policy or GatewayPolicy()
        self._api_key = api_key
        self._client = client

    @property
    def policy(self) -> GatewayPolicy:
        return self._policy

    def _get_client(self) -> genai.Client:
        """Create the SDK client on first use (it validates the key eagerly)."""
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def generate_structured(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        response_schema: type[BaseModel],
        model: str,
        temperature: float | None = None,
    ) -> dict[str, Any] | None:
        """Generate output constrained to *response_schema*.

        Returns:
            Parsed JSON object, or None when the gateway returned no text.
        """
        config = types.GenerateContentConfig(
            temperature=temperature,
            system_instruction=system_prompt,
            response_mime_type="application/json",
            response_schema=response_schema,
        )
        model_id = self._policy.strip_namespace(model)

        response = await self._get_client().aio.models.generate_content(
            model=model_id,
            contents=user_prompt,
            config=config,
        )

        text = response.text
        usage = response.usage_metadata
        logger.info(
            "gateway_call_completed",
            model=model_id,
            schema=response_schema.__name__,
            tokens_in=usage.prompt_token_count if usage else None,
            tokens_out=usage.candidates_token_count if usage else None,
            empty=not text,
        )
        if not text:
            return None
        parsed: dict[str, Any] = json.loads(text)
        return parsed

    async def generate_text(self, prompt: str, *, model: str) -> str:
        """Free-form generation, used by connectivity diagnostics."""
        response = await self._get_client().aio.models.generate_content(
            model=self._policy.strip_namespace(model),
            contents=prompt,
        )
        return response.text or ""
