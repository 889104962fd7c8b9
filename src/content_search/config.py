"""Centralized configuration for content-search using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Every knob has a default that matches the documented ranking policy, so
    an empty environment yields a fully working engine.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Result limits
    search_default_limit: int = Field(default=20, ge=1, description="Results returned when no limit is given")
    search_max_limit: int = Field(default=200, ge=1, description="Upper bound applied to caller-supplied limits")
    suggest_default_limit: int = Field(default=8, ge=1, description="Suggestions returned when no limit is given")
    suggest_min_prefix_length: int = Field(
        default=2, ge=1, description="Shortest normalized prefix that produces suggestions"
    )
    related_default_limit: int = Field(default=5, ge=1, description="Related items returned when no limit is given")

    # Field weights (relative importance, normalized to sum to 1.0)
    title_weight: float = Field(default=0.45, ge=0.0, description="Weight of title matches")
    tags_weight: float = Field(default=0.25, ge=0.0, description="Weight of tag matches")
    category_weight: float = Field(default=0.15, ge=0.0, description="Weight of category matches")
    content_weight: float = Field(default=0.15, ge=0.0, description="Weight of body content matches")

    # Relatedness
    related_category_bonus: float = Field(
        default=0.2, ge=0.0, le=1.0, description="Bonus added when two items share a category"
    )
    related_difficulty_penalty: float = Field(
        default=0.05, ge=0.0, le=1.0, description="Penalty per step of difficulty distance"
    )

    # Corpus assembly
    excerpt_max_length: int = Field(default=150, ge=10, description="Maximum generated excerpt length")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @model_validator(mode="after")
    def _check_limits(self) -> "Settings":
        if self.search_default_limit > self.search_max_limit:
            raise ValueError(
                "SEARCH_DEFAULT_LIMIT must not exceed SEARCH_MAX_LIMIT "
                f"({self.search_default_limit} > {self.search_max_limit})"
            )
        if not any((self.title_weight, self.tags_weight, self.category_weight, self.content_weight)):
            raise ValueError("At least one of TITLE_WEIGHT, TAGS_WEIGHT, CATEGORY_WEIGHT, CONTENT_WEIGHT must be > 0")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
