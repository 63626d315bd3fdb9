"""Path resolution helpers for visual-fingerprint configuration and logs."""

from __future__ import annotations

import os
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Mapping

from platformdirs import PlatformDirs


class AppPaths:
    """Resolve application directories with support for dependency injection."""

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        *,
        app_name: str = "visual-fingerprint",
        env_var: str = "VFP_DATA_DIR",
        platform_dirs_factory: Callable[[str], PlatformDirs] | None = None,
    ) -> None:
        self._env = MappingProxyType(dict(env) if env is not None else dict(os.environ))
        self._app_name = app_name
        self._env_var = env_var
        self._platform_dirs_factory = platform_dirs_factory or self._default_platform_dirs

    @staticmethod
    def _default_platform_dirs(app_name: str) -> PlatformDirs:
        return PlatformDirs(appname=app_name, appauthor=False, roaming=True)

    def _platform_dirs(self) -> PlatformDirs:
        return self._platform_dirs_factory(self._app_name)

    def data_dir(self) -> Path:
        """Return the directory used to persist application data."""

        override = self._env.get(self._env_var)
        if override:
            return Path(override).expanduser()
        return Path(self._platform_dirs().user_data_dir)

    def config_dir(self) -> Path:
        """Return the directory used to persist configuration files."""

        return Path(self._platform_dirs().user_config_dir)

    def config_path(self, filename: str = "config.yaml") -> Path:
        """Return the full path to the configuration file."""

        return self.config_dir() / filename

    def log_dir(self) -> Path:
        """Return the directory used to store log files."""

        return self.data_dir() / "logs"

    def ensure_data_dirs(self) -> None:
        """Create the data and log directories if they do not exist."""

        for directory in (self.data_dir(), self.log_dir()):
            directory.mkdir(parents=True, exist_ok=True)


__all__ = ["AppPaths"]
