"""Configuration helpers for server constants."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rowdycup.scoring.formats import DEFAULT_ALLOWANCES, MatchFormat


class _Settings(BaseSettings):
    admin_password: str | None = Field(default=None, alias="ROWDYCUP_ADMIN_PASSWORD")
    session_secret: str | None = Field(default=None, alias="ROWDYCUP_SESSION_SECRET")
    session_ttl_seconds: int = Field(
        default=12 * 60 * 60, alias="ROWDYCUP_SESSION_TTL_SECONDS", ge=1
    )

    score_min: int = Field(default=1, alias="ROWDYCUP_SCORE_MIN")
    score_max: int = Field(default=15, alias="ROWDYCUP_SCORE_MAX")

    allowance_best_ball: int = Field(
        default=DEFAULT_ALLOWANCES[MatchFormat.BEST_BALL],
        alias="ROWDYCUP_ALLOWANCE_BEST_BALL",
    )
    allowance_shamble: int = Field(
        default=DEFAULT_ALLOWANCES[MatchFormat.SHAMBLE],
        alias="ROWDYCUP_ALLOWANCE_SHAMBLE",
    )
    allowance_scramble: int = Field(
        default=DEFAULT_ALLOWANCES[MatchFormat.SCRAMBLE],
        alias="ROWDYCUP_ALLOWANCE_SCRAMBLE",
    )
    allowance_scramble_4v4: int = Field(
        default=DEFAULT_ALLOWANCES[MatchFormat.SCRAMBLE_4V4],
        alias="ROWDYCUP_ALLOWANCE_SCRAMBLE_4V4",
    )
    allowance_singles: int = Field(
        default=DEFAULT_ALLOWANCES[MatchFormat.SINGLES],
        alias="ROWDYCUP_ALLOWANCE_SINGLES",
    )

    seed_demo: bool = Field(default=False, alias="ROWDYCUP_SEED_DEMO")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def allowances(self) -> Dict[MatchFormat, int]:
        return {
            MatchFormat.BEST_BALL: self.allowance_best_ball,
            MatchFormat.SHAMBLE: self.allowance_shamble,
            MatchFormat.SCRAMBLE: self.allowance_scramble,
            MatchFormat.SCRAMBLE_4V4: self.allowance_scramble_4v4,
            MatchFormat.SINGLES: self.allowance_singles,
        }


@lru_cache(maxsize=1)
def get_settings() -> _Settings:
    """Return cached application settings."""

    return _Settings()  # type: ignore[call-arg]


def reset_settings_cache() -> None:
    """Clear cached settings (primarily for tests)."""

    get_settings.cache_clear()


def env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


__all__ = ["env_bool", "get_settings", "reset_settings_cache"]
