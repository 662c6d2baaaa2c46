"""
Configuration management for Kickabout.

Uses Pydantic Settings to load configuration from environment variables
with sensible defaults. Nothing here is secret - the values tune how
strictly names are matched and how squads are filled.

Usage:
    from kickabout.config import settings
    print(settings.fuzzy_match_threshold)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via a .env file
    in the project root directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Player Matching Configuration
    # ==========================================================================

    # Distances are 0.0 for identical strings and grow towards 1.0.
    # See players/identity.py for the matching stages.
    fuzzy_match_threshold: float = Field(
        default=0.4,
        description="Accept a fuzzy best match at or below this distance",
    )
    fuzzy_suggestion_threshold: float = Field(
        default=0.6,
        description="Include ranked suggestions at or below this distance",
    )
    fuzzy_suggestion_limit: int = Field(
        default=5,
        description="Maximum number of ranked suggestions returned",
    )
    alias_match_weight: float = Field(
        default=0.8,
        description="Weight applied to alias similarity relative to name similarity",
    )

    # ==========================================================================
    # Team Balancing Configuration
    # ==========================================================================

    default_player_rating: int = Field(
        default=70,
        description="Rating given to names that don't match anyone on the roster",
    )
    squad_size: int = Field(
        default=6,
        description="Players per side before the other team is filled first",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator(
        "fuzzy_match_threshold",
        "fuzzy_suggestion_threshold",
        "alias_match_weight",
    )
    @classmethod
    def validate_unit_interval(cls, v: float) -> float:
        """Distances and weights live between 0 and 1."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("must be between 0.0 and 1.0")
        return v

    @field_validator("default_player_rating")
    @classmethod
    def validate_rating(cls, v: int) -> int:
        """Ratings use the same 0-100 scale as the roster."""
        if not 0 <= v <= 100:
            raise ValueError("default_player_rating must be between 0 and 100")
        return v

    @field_validator("squad_size", "fuzzy_suggestion_limit")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Level names accepted by logging.basicConfig in the driver script."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v


@lru_cache
def get_settings() -> Settings:
    """
    Settings read once per process.

    The resolver and balancer fall back to these thresholds, squad size
    and default rating whenever a caller leaves them unset.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()
