"""Provider registry: direct endpoints, gateway identity, rescue policy.

Loaded from config/providers.yaml at startup when present, validated by
Pydantic; otherwise the built-in defaults below apply. The resulting
BridgeConfig is immutable and injected into ProviderBridge.
"""

from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = structlog.get_logger()

DEFAULT_ENDPOINTS: dict[str, str] = {
    "groq": "https://api.groq.com/openai/v1/chat/completions",
    "mistral": "https://api.mistral.ai/v1/chat/completions",
    "cerebras": "https://api.cerebras.ai/v1/chat/completions",
    "openai": "https://api.openai.com/v1/chat/completions",
}

DEFAULT_RATE_LIMIT_MARKERS: tuple[str, ...] = (
    "429",
    "quota",
    "RESOURCE_EXHAUSTED",
    "503",
)


class GatewayPolicy(BaseModel):
    """Identity of the managed gateway and its model namespace."""

    model_config = ConfigDict(frozen=True)

    provider: str = "google"
    namespace: str = "googleai"
    default_model: str = "gemini-1.5-flash"

    def namespaced(self, model: str) -> str:
        """Prefix model with the gateway namespace unless already namespaced."""
        return model if "/" in model else f"{self.namespace}/{model}"

    def strip_namespace(self, model: str) -> str:
        prefix = f"{self.namespace}/"
        return model[len(prefix) :] if model.startswith(prefix) else model


class RescuePolicy(BaseModel):
    """Fixed direct provider used when the gateway is rate limited."""

    model_config = ConfigDict(frozen=True)

    provider: str = "groq"
    model: str = "llama-3.3-70b-versatile"


class BridgeConfig(BaseModel):
    """Top-level bridge configuration.

    Validates that:
    - Every endpoint URL uses https
    - The rescue provider is a registered direct endpoint
    - The gateway identifier does not shadow a direct endpoint
    """

    model_config = ConfigDict(frozen=True)

    endpoints: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_ENDPOINTS))
    gateway: GatewayPolicy = GatewayPolicy()
    rescue: RescuePolicy = RescuePolicy()
    rate_limit_markers: tuple[str, ...] = DEFAULT_RATE_LIMIT_MARKERS
    temperature: float = 0.7

    @model_validator(mode="after")
    def validate_registry(self) -> "BridgeConfig":
        errors: list[str] = []

        for provider, url in self.endpoints.items():
            if not url.startswith("https://"):
                errors.append(f"Endpoint for '{provider}' must use https: '{url}'")

        if self.rescue.provider not in self.endpoints:
            errors.append(
                f"Rescue provider '{self.rescue.provider}' has no registered endpoint"
            )

        if self.gateway.provider in self.endpoints:
            errors.append(
                f"Gateway identifier '{self.gateway.provider}' "
                "must not be a direct endpoint"
            )

        if errors:
            raise ValueError(
                "Bridge registry validation failed:\n"
                + "\n".join(f"  - {e}" for e in errors)
            )
        return self

    def endpoint_for(self, provider: str) -> str | None:
        return self.endpoints.get(provider)

    @property
    def direct_providers(self) -> list[str]:
        return sorted(self.endpoints)


def load_bridge_config(config_path: Path | None = None) -> BridgeConfig:
    """Load and validate bridge configuration from YAML.

    Args:
        config_path: Path to providers.yaml. Typically comes from
            Settings.bridge_config_path. A missing file yields the
            built-in defaults.

    Raises:
        ValueError: if YAML parsing or validation fails.
    """
    if config_path is None or not config_path.exists():
        logger.info("bridge_config_defaults", path=str(config_path))
        return BridgeConfig()

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse bridge config '{config_path}': {e}") from e
    return BridgeConfig.model_validate(raw or {})
