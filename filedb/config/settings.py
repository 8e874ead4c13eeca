"""Centralized settings for FileDB.

Settings come from three layers, later layers winning:
built-in defaults, an optional YAML file, and environment variables.

Usage:
    from filedb.config.settings import get_settings, load_settings
    settings = get_settings()                  # defaults + env
    settings = load_settings("filedb.yaml")    # defaults + file + env
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

_ENV_PREFIX = "FILEDB_"

# YAML key -> settings attribute
_FILE_KEYS = {
    "base-path": "base_path",
    "upload-path": "upload_path",
    "image-url-prefix": "image_url_prefix",
    "log-level": "log_level",
    "log-json": "log_json",
}


@dataclass(frozen=True)
class FileDBSettings:
    """Immutable application settings."""

    # Storage
    base_path: Path = Path("data")
    upload_path: Path = Path("uploads")

    # Public URL prefix the static-file layer serves uploads under
    image_url_prefix: str = "/images"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @property
    def posts_dir(self) -> Path:
        return self.base_path / "posts"

    @property
    def sequence_file(self) -> Path:
        return self.base_path / "sequences.json"

    @property
    def editor_image_dir(self) -> Path:
        return self.upload_path / "editor"


def _parse_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    val = str(value).strip().lower()
    if val in ("1", "true", "yes"):
        return True
    if val in ("0", "false", "no"):
        return False
    return default


def _coerce(settings: FileDBSettings, raw: dict[str, Any]) -> FileDBSettings:
    """Apply attribute-keyed raw values onto settings with type coercion."""
    changes: dict[str, Any] = {}
    for attr, value in raw.items():
        if value is None:
            continue
        if attr in ("base_path", "upload_path"):
            changes[attr] = Path(value)
        elif attr == "log_level":
            changes[attr] = str(value).upper()
        elif attr == "log_json":
            changes[attr] = _parse_bool(value, settings.log_json)
        else:
            changes[attr] = str(value)
    return replace(settings, **changes)


def _from_env(settings: FileDBSettings) -> FileDBSettings:
    raw = {
        attr: os.environ.get(_ENV_PREFIX + attr.upper())
        for attr in _FILE_KEYS.values()
    }
    return _coerce(settings, raw)


def get_settings() -> FileDBSettings:
    """Load settings from environment variables.

    Environment variables (all optional):
        FILEDB_BASE_PATH: Directory holding posts/ and sequences.json (default: data)
        FILEDB_UPLOAD_PATH: Directory holding uploaded images (default: uploads)
        FILEDB_IMAGE_URL_PREFIX: Public URL prefix for uploads (default: /images)
        FILEDB_LOG_LEVEL: Logging level (default: INFO)
        FILEDB_LOG_JSON: Render logs as JSON (default: true)
    """
    return _from_env(FileDBSettings())


def load_settings(path: str | Path | None = None) -> FileDBSettings:
    """Load settings from an optional YAML file, then apply env overrides.

    Expected YAML structure:
        filedb:
          base-path: ./data
          upload-path: ./uploads
          image-url-prefix: /images
          log-level: DEBUG
          log-json: false

    A missing file is not an error; defaults and environment apply.
    """
    if path is None or not Path(path).exists():
        return get_settings()

    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    section: dict[str, Any] = raw.get("filedb", {}) or {}
    unknown = set(section) - set(_FILE_KEYS)
    if unknown:
        raise ValueError(f"Unknown filedb settings: {', '.join(sorted(unknown))}")

    settings = _coerce(
        FileDBSettings(),
        {_FILE_KEYS[key]: value for key, value in section.items()},
    )

    return _from_env(settings)
