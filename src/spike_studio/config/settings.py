"""Application settings loaded from environment and .env file."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from spike_studio.config.constants import Limits, Scoring
from spike_studio.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Runtime configuration for the spike catalog and matcher.

    Every value has a small default so the engine works with zero
    configuration. Override with ``SPIKE_STUDIO_*`` environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="SPIKE_STUDIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    spikes_dir: Path = Field(
        default=Path.home() / ".spike-studio" / "spikes",
        description="Directory holding hand-authored spike definitions",
    )
    generated_limit: int = Field(
        default=Limits.GENERATED_LIMIT,
        ge=0,
        description="Cap on enumerated generated ids (0 = whole identifier space)",
    )
    list_limit: int = Field(
        default=0, ge=0, description="Cap on ids returned by catalog listing (0 = no cap)"
    )
    auto_top: int = Field(default=Limits.AUTO_TOP, ge=1, le=100, description="Shortlist size")
    auto_batch_multiplier: int = Field(
        default=Limits.AUTO_BATCH_MULTIPLIER,
        ge=1,
        le=1000,
        description="Metadata batch size as a multiple of the shortlist size",
    )
    alias_boost: float = Field(
        default=Scoring.ALIAS_BOOST, ge=0.0, description="Score added to alias-matched ids"
    )
    confidence_threshold: float = Field(
        default=Scoring.CONFIDENCE_THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Below this score auto-selection asks clarifying questions",
    )
    aliases_enabled: bool = Field(default=True, description="Enable the alias shortcut layer")
    cache_max_size: int = Field(default=Limits.CACHE_MAX_SIZE, ge=1)
    cache_ttl_seconds: float = Field(default=Limits.CACHE_TTL_SECONDS, gt=0)
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("spikes_dir")
    @classmethod
    def _expand_spikes_dir(cls, v: Path) -> Path:
        return v.expanduser()

    @property
    def generated_cap(self) -> int | None:
        """Enumeration cap as used by the identifier space (None = unbounded)."""
        return self.generated_limit or None

    @property
    def metadata_batch_size(self) -> int:
        return self.auto_top * self.auto_batch_multiplier


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Raises:
        ConfigurationError: If an environment or .env value fails validation.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError("Invalid spike-studio configuration", details=str(e)) from e


def clear_settings_cache() -> None:
    """Clear the settings cache (mainly for tests)."""
    get_settings.cache_clear()
