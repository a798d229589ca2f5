"""
ScamFusion Configuration

Configuration management using pydantic-settings.
Every tunable threshold of the fusion pipeline lives here so that it can be
adjusted per deployment through environment variables (prefix ``SCAMFUSION_``).
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Values can be set via:
    1. Environment variables (``SCAMFUSION_SCAM_THRESHOLD=0.55``)
    2. .env file (local development)
    3. Default values defined here
    """

    model_config = SettingsConfigDict(
        env_prefix="SCAMFUSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = "ScamFusion"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # =========================================================================
    # Lexical scoring
    # =========================================================================
    critical_weight: float = Field(default=0.4, ge=0.0, le=1.0)
    high_weight: float = Field(default=0.25, ge=0.0, le=1.0)
    medium_weight: float = Field(default=0.15, ge=0.0, le=1.0)
    lexical_combo_bonus: float = Field(default=0.2, ge=0.0, le=1.0)

    # =========================================================================
    # Fusion thresholds
    # =========================================================================
    scam_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    early_return_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    medium_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    url_fusion_factor: float = Field(default=0.3, ge=0.0, le=1.0)
    fusion_combo_bonus: float = Field(default=0.15, ge=0.0, le=1.0)
    registry_hit_factor: float = Field(default=0.15, ge=0.0, le=1.0)
    registry_prefix_factor: float = Field(default=0.1, ge=0.0, le=1.0)
    display_threshold: float = Field(default=0.5, ge=0.0, le=1.0)

    # =========================================================================
    # Secondary model escalation
    # =========================================================================
    model_enabled: bool = True
    model_band_low: float = Field(default=0.3, ge=0.0, le=1.0)
    model_band_high: float = Field(default=0.7, ge=0.0, le=1.0)
    rule_weight: float = Field(default=0.4, ge=0.0, le=1.0)
    model_weight: float = Field(default=0.6, ge=0.0, le=1.0)
    model_daily_quota: int = Field(default=50, ge=0)
    model_path: Optional[str] = Field(default=None, description="Local model artifact; absence disables the model")
    model_server_url: str = "http://127.0.0.1:8080"
    model_timeout: float = Field(default=30.0, gt=0)
    model_max_tokens: int = 256
    model_temperature: float = 0.7

    # =========================================================================
    # External registries
    # =========================================================================
    registry_enabled: bool = True
    phone_registry_url: str = "https://www.counterscam112.go.kr"
    account_registry_url: str = "https://www.police.go.kr"
    remote_timeout: float = Field(default=5.0, gt=0, description="Bound on every remote call in seconds")
    cache_max_entries: int = Field(default=100, gt=0)
    cache_ttl_seconds: float = Field(default=15 * 60, gt=0)
    session_ttl_seconds: float = Field(default=30 * 60, gt=0)

    @model_validator(mode="after")
    def _check_model_band(self) -> "Settings":
        if self.model_band_low > self.model_band_high:
            raise ValueError("model_band_low must not exceed model_band_high")
        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are cached to avoid re-reading environment on every access.
    Use get_settings.cache_clear() to reload settings.
    """
    return Settings()
