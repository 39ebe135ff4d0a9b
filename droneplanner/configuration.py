"""Mini README: Centralised configuration models and helpers for droneplanner.

Structure:
    * PlannerSettings - Pydantic model describing runtime configuration.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` to read ``DRONEPLANNER_*`` environment variables
    (or a local ``.env`` file): which domain description to load, default
    search limits, and where the HTTP interface listens. The configuration
    is cached so validation runs once per process.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .search import SearchStrategy


class PlannerSettings(BaseSettings):
    """Runtime configuration for the planning service and CLI."""

    model_config = SettingsConfigDict(
        env_prefix="DRONEPLANNER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    domain_path: Optional[Path] = Field(
        None,
        description="JSON domain description to plan against. Unset uses the bundled Horn map.",
    )
    default_max_depth: int = Field(
        15,
        description="Depth bound applied when a query does not specify one.",
        ge=0,
        le=200,
    )
    search_strategy: SearchStrategy = Field(
        SearchStrategy.ITERATIVE_DEEPENING,
        description="Pass schedule used by the search engine.",
    )
    timeout_seconds: Optional[float] = Field(
        None,
        description="Wall-clock limit per query; unset means no limit.",
        gt=0,
    )
    max_expansions: Optional[int] = Field(
        None,
        description="Node expansion limit per query; unset means no limit.",
        ge=1,
    )
    request_timeout_seconds: float = Field(
        30.0,
        description="Wall-clock limit for HTTP plan requests when no query timeout is set.",
        gt=0,
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Default port the HTTP service exposes.",
        ge=1,
        le=65535,
    )
    log_level: str = Field("INFO", description="Root logging level.")

    @field_validator("domain_path", mode="before")
    @classmethod
    def _expand_path(cls, value: Optional[str | Path]) -> Optional[Path]:
        """Expand user directories; the loader reports missing files."""

        if value in (None, ""):
            return None
        return Path(value).expanduser()

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"unknown log level '{value}'")
        return level


@lru_cache()
def get_settings() -> PlannerSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return PlannerSettings()
