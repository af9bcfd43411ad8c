"""Provider bridge: gateway, direct providers, normalization, rescue.

Quick start::

    from study_bridge.config import get_settings
    from study_bridge.llm import ProviderRequest, create_bridge

    bridge = create_bridge(get_settings())
    output = await bridge.execute(gateway_call, ProviderRequest(...))
"""

from study_bridge.llm.bridge import ProviderBridge
from study_bridge.llm.direct import DirectProviderClient
from study_bridge.llm.normalizer import ResponseNormalizer, normalize
from study_bridge.llm.registry import BridgeConfig, RescuePolicy, load_bridge_config
from study_bridge.llm.schemas import NormalizationTier, ProviderRequest
from study_bridge.llm.setup import create_bridge, create_gateway

__all__ = [
    "BridgeConfig",
    "DirectProviderClient",
    "NormalizationTier",
    "ProviderBridge",
    "ProviderRequest",
    "RescuePolicy",
    "ResponseNormalizer",
    "create_bridge",
    "create_gateway",
    "load_bridge_config",
    "normalize",
]
