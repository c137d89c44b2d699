from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- Identifiers ---
    strict_generated_ids: bool = False  # Require the 24-char alphanumeric shape for generated IDs

    # --- Async projects ---
    require_normalized_periods: bool = True  # Report entries whose period is not start-of-day/week

    # --- Import / export ---
    root_types: List[str] = ["AsyncProject", "RealtimeProject"]  # Accepted whole-document roots
    json_indent: Optional[int] = None  # None emits compact JSON

    # --- CLI ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="DESIGN_AWARENESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra='ignore'
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, loaded once and read-only afterwards."""
    return Settings()
