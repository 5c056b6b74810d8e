"""Environment-driven configuration helpers for Golazo."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_KNOCKOUT_TOURNAMENTS = ["cv", "izoro", "izplata", "cd2", "cd3"]


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: AnyUrl | str = Field(default="sqlite:///./golazo.db")
    log_level: str = Field(default="INFO")

    default_balance: float = Field(default=1000.0, ge=0.0)
    knockout_tournaments: list[str] = Field(default_factory=lambda: list(DEFAULT_KNOCKOUT_TOURNAMENTS))
    regular_margin: float = Field(default=0.08, ge=0.0, lt=1.0)
    cup_margin: float = Field(default=0.03, ge=0.0, lt=1.0)
    simulation_seed: int | None = Field(default=None)

    admin_ids: list[str] = Field(default_factory=list)
    golazo_api_key: str = Field(default="", validation_alias="GOLAZO_API_KEY")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]


def get_api_access_key() -> str:
    key = os.getenv("GOLAZO_API_KEY") or get_settings().golazo_api_key
    if not key:
        raise RuntimeError(
            "GOLAZO_API_KEY is not configured. Set it in .env for local dev or in the host environment."
        )
    return key
