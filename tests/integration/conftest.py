"""Shared fixtures for integration tests against live providers."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import httpx
import pytest

from study_bridge.config import get_settings
from study_bridge.llm import DirectProviderClient, load_bridge_config


@pytest.fixture()
async def direct_client() -> AsyncGenerator[DirectProviderClient]:
    """DirectProviderClient wired to the real registry and .env keys."""
    settings = get_settings()
    async with httpx.AsyncClient() as http:
        yield DirectProviderClient(
            load_bridge_config(settings.bridge_config_path),
            settings.provider_api_key,
            http_client=http,
            timeout=settings.request_timeout_seconds,
        )


@pytest.fixture()
def groq_key() -> str:
    """GROQ_API_KEY from settings; skips the test when unset."""
    key = get_settings().provider_api_key("GROQ_API_KEY")
    if not key:
        pytest.skip("GROQ_API_KEY not set")
    return key
