"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Resolver settings loaded from FUSION_* environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FUSION_",
        extra="ignore",
    )

    # ======================
    # Aggregator API
    # ======================
    aggregator_base_url: str = Field(
        default="https://api.3route.io", description="DEX aggregator API base URL"
    )
    aggregator_api_key: Optional[str] = Field(
        default=None, description="Aggregator API key (sent as apikey query parameter)"
    )
    aggregator_timeout: float = Field(
        default=30.0, gt=0, description="HTTP timeout for aggregator requests in seconds"
    )

    # ======================
    # Swaps
    # ======================
    default_slippage_bps: int = Field(
        default=100, gt=0, le=5000, description="Default slippage tolerance (100 = 1%)"
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "aggregator": {
                "base_url": self.aggregator_base_url,
                "api_key": "***" if self.aggregator_api_key else "(not set)",
                "timeout": self.aggregator_timeout,
            },
            "default_slippage_bps": self.default_slippage_bps,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
