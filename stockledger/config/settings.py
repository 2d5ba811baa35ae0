"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Hosted language-model configuration (OpenAI-compatible API)."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    api_key: str = ""
    base_url: str = "https://api.openai.com/v1"
    model_name: str = "gpt-4o"
    model_mini: str = "gpt-4o-mini"
    timeout: int = 60
    max_tokens: int = 2000
    temperature: float = 0.3  # forecasts want low variance
    report_temperature: float = 0.5

    # Circuit breaker settings
    failure_threshold: int = 3
    cooldown_seconds: int = 60

    # Retry settings
    max_retries: int = 3
    retry_delay: float = 1.0
    retry_multiplier: float = 2.0

    @property
    def enabled(self) -> bool:
        return bool(self.api_key) and self.api_key.startswith("sk-")


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "stockledger.db"
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class ReconcileSettings(BaseSettings):
    """Rollup, reconciliation and forecast tuning."""

    model_config = SettingsConfigDict(env_prefix="RECONCILE_")

    unknown_label: str = "unknown"
    tax_rate: float = 0.1  # consumption tax, applied as 1 + tax_rate

    # Free-text note matching for claim / factory-use quantities
    claim_keywords: list[str] = ["クレーム", "claim"]
    factory_keywords: list[str] = ["工場", "調整", "factory"]

    # Demand forecast
    forecast_weeks: int = 12
    forecast_recent_weeks: int = 4
    forecast_batch_size: int = 20
    report_top_products: int = 5


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "stockledger"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    reconcile: ReconcileSettings = Field(default_factory=ReconcileSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
