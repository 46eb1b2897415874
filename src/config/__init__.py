"""
Configuration package for snapsite

Tool-level settings read from SNAPSITE_* environment variables (or .env)
through pydantic-settings. Site-level options come from the project file.
"""

from .settings import appsettings, AppSettings

__all__ = ["appsettings", "AppSettings"]
