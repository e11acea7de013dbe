# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Skill router settings.

Configuration is read from environment variables, optionally seeded from a
``.env`` file found by walking up from the package directory.

    # Registry source (file or directory)
    SKILL_REGISTRY_PATH=/path/to/skills

    # Scoring weights (non-negative; 0 disables a signal)
    SKILL_ROUTER_EXACT_WEIGHT=3.0
    SKILL_ROUTER_PARTIAL_WEIGHT=1.0
    SKILL_ROUTER_DESCRIPTION_WEIGHT=0.5

    # Selection defaults
    SKILL_ROUTER_DEFAULT_LIMIT=3
    SKILL_ROUTER_DEFAULT_THRESHOLD=0.0

    # Logging
    SKILL_ROUTER_LOG_LEVEL=WARNING
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from skill_router.models import ScoringWeights


def _find_and_load_env() -> None:
    """Load .env file from project root."""
    from dotenv import load_dotenv

    current = Path(__file__).resolve().parent
    for _ in range(10):
        env_file = current / ".env"
        if env_file.exists():
            load_dotenv(env_file, override=False)
            return
        parent = current.parent
        if parent == current:
            break
        current = parent


_find_and_load_env()


class Settings(BaseSettings):
    """Settings for the skill router and its CLI."""

    model_config = SettingsConfigDict(
        env_prefix="SKILL_ROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # =========================================================================
    # REGISTRY SOURCE
    # =========================================================================
    skill_registry_path: str = Field(
        default="",
        validation_alias=AliasChoices(
            "skill_registry_path",
            "SKILL_REGISTRY_PATH",
            "SKILL_ROUTER_REGISTRY_PATH",
        ),
        description=(
            "Registry file (YAML/JSON) or directory of SKILL.md documents. "
            "Empty means unconfigured; the CLI then requires --registry."
        ),
    )

    # =========================================================================
    # SCORING
    # =========================================================================
    exact_weight: float = Field(
        default=3.0,
        ge=0.0,
        description="Score added when a query token equals a trigger",
    )
    partial_weight: float = Field(
        default=1.0,
        ge=0.0,
        description="Score added per trigger partially matched by a query token",
    )
    description_weight: float = Field(
        default=0.5,
        ge=0.0,
        description="Score added once when a query token appears in the description",
    )
    min_partial_length: int = Field(
        default=3,
        ge=1,
        le=64,
        description="Shortest token/trigger length allowed in a partial match",
    )

    # =========================================================================
    # SELECTION DEFAULTS
    # =========================================================================
    default_limit: int = Field(
        default=3,
        ge=1,
        le=1000,
        description="Number of results returned when --limit is not given",
    )
    default_threshold: float = Field(
        default=0.0,
        ge=0.0,
        description="Minimum score when --threshold is not given",
    )

    # =========================================================================
    # LOGGING
    # =========================================================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level for the CLI (logs go to stderr)",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    def scoring_weights(self) -> ScoringWeights:
        """Build the scorer weights from these settings."""
        return ScoringWeights(
            exact_weight=self.exact_weight,
            partial_weight=self.partial_weight,
            description_weight=self.description_weight,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get singleton settings instance.

    Note:
        For test isolation, use `clear_settings_cache()` to reset the
        singleton before each test that needs fresh settings.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings singleton cache for test isolation."""
    get_settings.cache_clear()
