"""Services for loading and persisting fingerprint configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .paths import AppPaths
from .schema import FingerprintSettings

logger = logging.getLogger(__name__)


class SettingsService:
    """Load, validate and persist :class:`FingerprintSettings`."""

    def __init__(self, app_paths: AppPaths, *, filename: str = "config.yaml") -> None:
        self._app_paths = app_paths
        self._filename = filename

    @property
    def config_path(self) -> Path:
        """Path to the configuration file."""

        return self._app_paths.config_path(self._filename)

    def load(self, path: str | Path | None = None) -> FingerprintSettings:
        """Load the configuration from disk with graceful fallbacks."""

        path = Path(path) if path is not None else self.config_path
        if not path.exists():
            return FingerprintSettings()

        try:
            raw_text = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Unable to read settings from %s: %s", path, exc)
            return FingerprintSettings()

        try:
            raw_data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            logger.warning("Invalid YAML in %s: %s", path, exc)
            return FingerprintSettings()

        return FingerprintSettings.from_mapping(raw_data)

    def save(self, settings: FingerprintSettings, path: str | Path | None = None) -> Path:
        """Persist the configuration to disk."""

        path = Path(path) if path is not None else self.config_path
        payload = settings.to_mapping()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write settings to %s: %s", path, exc)
            raise
        return path


__all__ = ["SettingsService"]
