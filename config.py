"""
Centralised settings loader.

Values come from the environment (or a local ``.env``) through
pydantic-settings; anything not set falls back to the defaults below.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / storage ───────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///fitness_tracker.db"

    # ─── Gemini ──────────────────────────────────────────────────────
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.0-flash-exp"

    # ─── tracker limits ─────────────────────────────────────────────
    target_calories: int = Field(2000, gt=0)
    max_diet_plans: int = Field(3, ge=1)
    catalog_result_limit: int = Field(10, ge=1)

    # allow other env-vars without crashing
    model_config = {"extra": "ignore", "env_file": ".env", "env_file_encoding": "utf-8"}


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
