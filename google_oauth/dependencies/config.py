"""FastAPI dependency returning the validated application settings."""

from fastapi import Depends

from google_oauth.core.config import AppSettings, get_settings


def get_app_settings() -> AppSettings:
    """Settings dependency; tests override it to swap configuration."""
    return get_settings()


SettingsDependency = Depends(get_app_settings)

__all__ = ["SettingsDependency", "get_app_settings"]
