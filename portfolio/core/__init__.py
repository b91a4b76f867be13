"""Core app configuration, database and security primitives."""

from portfolio.core.config import get_settings, settings
from portfolio.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
