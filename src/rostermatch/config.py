"""
Configuration management for rostermatch.

Uses Pydantic Settings to load configuration from environment variables
with sensible defaults for development. The database URL and matching
thresholds can be overridden via environment variables or a .env file.

Usage:
    from rostermatch.config import settings
    print(settings.similar_threshold)
"""

from functools import lru_cache

from pydantic import Field, field_validator, model_validator
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
    )

    # ==========================================================================
    # Database Configuration
    # ==========================================================================

    # Backing database for stored roster snapshots
    database_url: str = Field(
        default="sqlite:///rostermatch.db",
        description="SQLAlchemy URL of the database holding roster snapshots",
    )
    db_echo: bool = Field(
        default=False,
        description="Echo SQL statements (useful when debugging the snapshot store)",
    )

    # ==========================================================================
    # Roster Matching Configuration
    # ==========================================================================

    # See roster/reconciler.py for how the two thresholds are applied
    similar_threshold: float = Field(
        default=0.75,
        description="Flag a live entity as similar to a stored one at or above this score",
    )
    dedupe_threshold: float = Field(
        default=0.85,
        description="Treat a stored entity as already present at or above this score",
    )
    max_roster_size: int = Field(
        default=1000,
        description="Refuse to reconcile rosters larger than this many entities",
    )

    # ==========================================================================
    # Snapshot Configuration
    # ==========================================================================

    snapshot_key: str = Field(
        default="target_roster",
        description="Key the target roster snapshot is saved under",
    )
    reference_base_url: str = Field(
        default="https://www.transfermarkt.us",
        description="Prefix for relative reference links when filling empty slots",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_format: str = Field(
        default="%(asctime)s [%(levelname)s] %(message)s",
        description="Format string passed to logging.basicConfig by the scripts",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("similar_threshold", "dedupe_threshold")
    @classmethod
    def validate_threshold_range(cls, v: float) -> float:
        """Thresholds are similarity scores, so they live in [0, 1]."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("thresholds must be between 0.0 and 1.0")
        return v

    @field_validator("max_roster_size")
    @classmethod
    def validate_max_roster_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_roster_size must be positive")
        return v

    @model_validator(mode="after")
    def validate_threshold_order(self) -> "Settings":
        """The dedupe threshold may never be looser than the similar threshold."""
        if self.dedupe_threshold < self.similar_threshold:
            raise ValueError(
                "dedupe_threshold must be >= similar_threshold "
                f"(got {self.dedupe_threshold} < {self.similar_threshold})"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once,
    which is important because loading from .env can be slow.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()
