"""Configuration domain primitives for visual-fingerprint."""

from __future__ import annotations

from pathlib import Path

from .paths import AppPaths
from .schema import FingerprintSettings
from .service import SettingsService

_APP_PATHS = AppPaths()
_SERVICE = SettingsService(_APP_PATHS)


def configure(app_paths: AppPaths) -> None:
    """Replace the default :class:`SettingsService` dependencies."""

    global _APP_PATHS, _SERVICE
    _APP_PATHS = app_paths
    _SERVICE = SettingsService(_APP_PATHS)


def get_app_paths() -> AppPaths:
    """Return the current :class:`AppPaths` instance."""

    return _APP_PATHS


def config_path() -> Path:
    """Return the path to the configuration file."""

    return _SERVICE.config_path


def load_settings(path: str | Path | None = None) -> FingerprintSettings:
    """Load fingerprint settings using the shared service."""

    return _SERVICE.load(path)


def save_settings(settings: FingerprintSettings, path: str | Path | None = None) -> Path:
    """Persist fingerprint settings using the shared service."""

    return _SERVICE.save(settings, path)


__all__ = [
    "AppPaths",
    "FingerprintSettings",
    "SettingsService",
    "config_path",
    "configure",
    "get_app_paths",
    "load_settings",
    "save_settings",
]
