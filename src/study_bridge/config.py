"""Centralized application configuration via environment variables."""

import os
from enum import StrEnum
from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Provider API keys follow the ``<PROVIDER>_API_KEY`` convention and
    use SecretStr to prevent accidental logging. Providers added to the
    registry YAML without a field here are resolved from the process
    environment by :meth:`provider_api_key`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- App ---
    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "DEBUG"
    # --- CORS ---
    cors_allowed_origins: list[str] = []
    cors_allow_credentials: bool = False
    cors_allowed_methods: list[str] = ["GET", "POST"]
    cors_allowed_headers: list[str] = ["Content-Type"]

    # --- Managed gateway (Gemini) ---
    google_api_key: SecretStr | None = None

    # --- Direct providers ---
    groq_api_key: SecretStr | None = None
    mistral_api_key: SecretStr | None = None
    cerebras_api_key: SecretStr | None = None
    openai_api_key: SecretStr | None = None

    # --- Bridge ---
    # Optional YAML override; built-in defaults apply when the file is absent.
    bridge_config_path: Path = Path("config/providers.yaml")
    request_timeout_seconds: float = 60.0
    rescue_on_empty_output: bool = False

    def provider_api_key(self, key_name: str) -> str | None:
        """Resolve ``<PROVIDER>_API_KEY`` from settings, then the environment.

        Returns None for unset or empty values.
        """
        secret = getattr(self, key_name.lower(), None)
        if isinstance(secret, SecretStr):
            value = secret.get_secret_value()
        else:
            value = os.environ.get(key_name, "")
        return value or None

    # --- Convenience properties ---
    @property
    def is_dev(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_prod(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton.

    Usage::

        from study_bridge.config import get_settings
        settings = get_settings()
    """
    return Settings()


settings = get_settings()
