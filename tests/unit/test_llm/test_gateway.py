"""Tests for GeminiGateway with a mocked google-genai client."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types

from study_bridge.capabilities.models import SummarizerOutput
from study_bridge.llm.gateway import GeminiGateway


def _client(text: str | None) -> MagicMock:
    response = MagicMock()
    response.text = text
    response.usage_metadata = MagicMock(
        prompt_token_count=12, candidates_token_count=7
    )
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=response)
    return client


async def _structured(gateway: GeminiGateway, model: str = "googleai/gemini-1.5-flash"):
    return await gateway.generate_structured(
        system_prompt="You summarize.",
        user_prompt="Summarize: cells",
        response_schema=SummarizerOutput,
        model=model,
    )


class TestGenerateStructured:
    async def test_returns_parsed_json(self) -> None:
        gateway = GeminiGateway("key", client=_client('{"summary": "cells divide"}'))
        assert await _structured(gateway) == {"summary": "cells divide"}

    async def test_namespace_stripped_before_sdk_call(self) -> None:
        client = _client('{"summary": "x"}')
        await _structured(GeminiGateway("key", client=client))
        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-1.5-flash"
        assert kwargs["contents"] == "Summarize: cells"

    async def test_schema_and_mime_type_configured(self) -> None:
        client = _client('{"summary": "x"}')
        await _structured(GeminiGateway("key", client=client))
        config = client.aio.models.generate_content.call_args.kwargs["config"]
        assert isinstance(config, types.GenerateContentConfig)
        assert config.response_mime_type == "application/json"
        assert config.response_schema is SummarizerOutput
        assert config.system_instruction == "You summarize."

    @pytest.mark.parametrize("text", [None, ""])
    async def test_empty_text_returns_none(self, text: str | None) -> None:
        gateway = GeminiGateway("key", client=_client(text))
        assert await _structured(gateway) is None

    async def test_sdk_error_propagates(self) -> None:
        client = _client(None)
        client.aio.models.generate_content = AsyncMock(
            side_effect=RuntimeError("429 RESOURCE_EXHAUSTED")
        )
        with pytest.raises(RuntimeError, match="RESOURCE_EXHAUSTED"):
            await _structured(GeminiGateway("key", client=client))


class TestGenerateText:
    async def test_returns_text(self) -> None:
        client = _client("pong")
        gateway = GeminiGateway("key", client=client)
        assert await gateway.generate_text("ping", model="googleai/gemini-2.0") == "pong"
        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.0"

    async def test_none_text_becomes_empty_string(self) -> None:
        gateway = GeminiGateway("key", client=_client(None))
        assert await gateway.generate_text("ping", model="gemini-2.0") == ""
