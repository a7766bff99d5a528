"""
CarbonTrack – Central Configuration
====================================
All application settings are loaded from environment variables (via .env).
Pydantic-Settings validates & types every value at startup.

The AI gateway credential is optional here so the app can be imported
without it; the prediction service refuses to start when it is missing.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# ─────────────────────────────────────────────────────────────────────────────
class AppSettings(BaseSettings):
    """Core application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── App ──────────────────────────────────────────────────────────────────
    app_name: str = Field("CarbonTrack", description="Human-readable application name")
    app_env: str = Field("development", description="Environment: development|staging|production")
    app_debug: bool = Field(False)
    app_host: str = Field("0.0.0.0")
    app_port: int = Field(8000, ge=1, le=65535)

    # ── AI gateway (OpenAI-compatible chat completions) ──────────────────────
    ai_api_key: str = Field(
        "",
        validation_alias=AliasChoices("ai_api_key", "lovable_api_key"),
        description="Bearer credential for the chat-completion gateway",
    )
    ai_base_url: str = Field("https://ai.gateway.lovable.dev/v1")
    ai_model: str = Field("google/gemini-3-flash-preview")
    ai_temperature: float = Field(0.3, ge=0.0, le=2.0)

    # ── Logging ──────────────────────────────────────────────────────────────
    log_level: str = Field("INFO")
    log_file: str = Field("logs/carbontrack.log")
    log_rotation: str = Field("10 MB")
    log_retention: str = Field("7 days")

    # ── CORS ─────────────────────────────────────────────────────────────────
    allowed_origins: str = Field(
        "*",
        description="Comma-separated list of allowed CORS origins, or * for any",
    )

    # ── Computed helpers ─────────────────────────────────────────────────────
    @property
    def cors_origins(self) -> list[str]:
        """Return CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def ai_configured(self) -> bool:
        return bool(self.ai_api_key.strip())

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"log_level must be one of {valid}")
        return v.upper()

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        valid = {"development", "staging", "production"}
        if v.lower() not in valid:
            raise ValueError(f"app_env must be one of {valid}")
        return v.lower()

    @field_validator("log_file", mode="before")
    @classmethod
    def validate_log_file(cls, v: str) -> str:
        # Loguru creates missing parent directories when the sink is added
        if not Path(v).is_absolute():
            return str((Path.cwd() / v).resolve())
        return v


# ── Singleton accessor (cached after first call) ──────────────────────────────
@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return the application settings singleton.  Import and call this everywhere."""
    return AppSettings()


# Convenience module-level alias so callers can do:  from carbontrack.config import settings
settings: AppSettings = get_settings()
