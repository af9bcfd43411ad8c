"""FastAPI dependency injection."""

from __future__ import annotations

from typing import cast

from fastapi import Request

from study_bridge.capabilities.runner import CapabilityRunner
from study_bridge.llm.bridge import ProviderBridge
from study_bridge.llm.gateway import GeminiGateway

__all__ = ["get_bridge", "get_capability_runner", "get_gateway"]


async def get_bridge(request: Request) -> ProviderBridge:
    """Retrieve ProviderBridge from app state.

    Initialized during lifespan startup.
    """
    return cast(ProviderBridge, request.app.state.bridge)


async def get_gateway(request: Request) -> GeminiGateway:
    return cast(GeminiGateway, request.app.state.gateway)


async def get_capability_runner(request: Request) -> CapabilityRunner:
    return cast(CapabilityRunner, request.app.state.capability_runner)
