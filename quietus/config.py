# quietus/config.py
"""Runtime settings, read from the environment (and a local .env file)."""
from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


DEFAULT_INACTIVITY_PERIOD_DAYS = 7
DEFAULT_USER_AGENT = "Quietus/1.0"
DEFAULT_FETCH_TIMEOUT_S = 10.0
# Upper bound on characters produced by entity substitution in a feed body
DEFAULT_MAX_ENTITY_CHARS = 1024


class Settings(BaseModel):
    registry_path: str = "company_feeds.txt"
    default_inactivity_days: int = Field(DEFAULT_INACTIVITY_PERIOD_DAYS, ge=0)
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1)
    fetch_timeout_s: float = Field(DEFAULT_FETCH_TIMEOUT_S, gt=0)
    max_entity_chars: int = Field(DEFAULT_MAX_ENTITY_CHARS, ge=0)


def get_settings() -> Settings:
    """Build Settings from QUIETUS_* environment variables, falling back to defaults."""
    return Settings(
        registry_path=os.environ.get("QUIETUS_REGISTRY_PATH", "company_feeds.txt"),
        default_inactivity_days=os.environ.get(
            "QUIETUS_DEFAULT_INACTIVITY_DAYS", str(DEFAULT_INACTIVITY_PERIOD_DAYS)
        ),
        user_agent=os.environ.get("QUIETUS_USER_AGENT", DEFAULT_USER_AGENT),
        fetch_timeout_s=os.environ.get("QUIETUS_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)),
        max_entity_chars=os.environ.get("QUIETUS_MAX_ENTITY_CHARS", str(DEFAULT_MAX_ENTITY_CHARS)),
    )
