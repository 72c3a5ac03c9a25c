"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """wellcore configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Logging
    wellcore_log_level: str = "info"

    # Daily check-in
    # Empty means the questionnaire bundled with the package.
    checkin_schema_path: str = ""

    # Protocol item-type policy (tier -> item type).
    # Provisional: only the immediate tier gets its own type today.
    immediate_item_type: str = "habit"
    default_item_type: str = "supplement"


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
