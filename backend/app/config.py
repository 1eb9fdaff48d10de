"""
Runtime settings for the TripCraft backend.

Values come from the process environment; a local .env file is loaded first
so development setups work without exporting anything.
"""

import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if not value:
        return None
    return float(value)


class Settings(BaseModel):
    llm_provider: Literal["openai", "gemini"] = "openai"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    llm_timeout_seconds: Optional[float] = None

    google_places_api_key: Optional[str] = None

    cache_ttl_seconds: float = 30 * 60
    cache_max_entries: int = 100
    coalesce_requests: bool = True

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", "openai").strip().lower(),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            gemini_api_key=os.getenv("GOOGLE_GEMINI_AI_API_KEY") or os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
            llm_timeout_seconds=_env_float("LLM_TIMEOUT_SECONDS"),
            google_places_api_key=os.getenv("GOOGLE_PLACES_API_KEY") or None,
            cache_ttl_seconds=float(os.getenv("TRIP_CACHE_TTL_SECONDS", 30 * 60)),
            cache_max_entries=int(os.getenv("TRIP_CACHE_MAX_ENTRIES", 100)),
            coalesce_requests=_env_bool("TRIP_COALESCE_REQUESTS", True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
