"""One-stop factory for assembling the provider bridge.

Usage::

    from study_bridge.config import get_settings
    from study_bridge.llm import create_bridge

    bridge = create_bridge(get_settings())
    output = await bridge.execute(gateway_call, request)
"""

import httpx
import structlog

from study_bridge.config import Settings
from study_bridge.llm.bridge import ProviderBridge
from study_bridge.llm.direct import DirectProviderClient
from study_bridge.llm.gateway import GeminiGateway
from study_bridge.llm.registry import BridgeConfig, load_bridge_config

logger = structlog.get_logger()


def create_bridge(
    settings: Settings,
    *,
    config: BridgeConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> ProviderBridge:
    """Assemble ProviderBridge with registry and direct client.

    Args:
        settings: Application settings with API keys and timeouts.
        config: Pre-built registry; loaded from
            settings.bridge_config_path when omitted.
        http_client: Shared HTTP client for direct providers.

    Returns:
        Configured ProviderBridge ready for use.
    """
    config = config or load_bridge_config(settings.bridge_config_path)
    direct_client = DirectProviderClient(
        config,
        settings.provider_api_key,
        http_client=http_client,
        timeout=settings.request_timeout_seconds,
    )
    bridge = ProviderBridge(
        config,
        direct_client,
        rescue_on_empty_output=settings.rescue_on_empty_output,
    )
    logger.info(
        "provider_bridge_created",
        gateway=config.gateway.provider,
        direct_providers=config.direct_providers,
        rescue=f"{config.rescue.provider}/{config.rescue.model}",
        timeout_s=settings.request_timeout_seconds,
    )
    return bridge


def create_gateway(settings: Settings, config: BridgeConfig) -> GeminiGateway:
    """Gemini gateway keyed by ``GOOGLE_API_KEY``."""
    api_key = settings.provider_api_key(f"{config.gateway.provider.upper()}_API_KEY")
    return GeminiGateway(api_key, config.gateway)
