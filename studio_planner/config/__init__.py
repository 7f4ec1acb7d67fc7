"""Application configuration module.

- **settings.py**: Environment-based settings (Pydantic BaseSettings)
  - Database URL, studio operations API endpoint, overuse policy thresholds
  - Loaded from .env file via pydantic-settings (``PLANNER_`` prefix)
"""
from studio_planner.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
