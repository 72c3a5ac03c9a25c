"""Process-wide logging configuration for hosts embedding wellcore."""

from __future__ import annotations

import logging

from wellcore.core.config.settings import Settings, get_settings


def resolve_log_level(name: str) -> int:
    """Map a level name like ``"debug"`` to a logging constant (INFO if unknown)."""
    level = getattr(logging, name.upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Settings | None = None) -> int:
    """Configure root logging from settings and return the level applied."""
    settings = settings or get_settings()
    level = resolve_log_level(settings.wellcore_log_level)
    logging.basicConfig(level=level)
    logging.getLogger(__name__).debug("Logging configured at %s", logging.getLevelName(level))
    return level
