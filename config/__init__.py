"""
Configuration module.

Exports:
    settings: Application settings instance
    get_settings: Function to get settings (for dependency injection)
    DEFAULT_INDIAMART_URL: Catalogue endpoint used when none is configured
"""

from config.settings import settings, get_settings, Settings, DEFAULT_INDIAMART_URL

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "DEFAULT_INDIAMART_URL",
]
