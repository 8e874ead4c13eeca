"""FileDB configuration."""

from filedb.config.settings import FileDBSettings, get_settings, load_settings

__all__ = [
    "FileDBSettings",
    "get_settings",
    "load_settings",
]
