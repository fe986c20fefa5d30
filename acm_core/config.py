"""Layered configuration for the ACM runtime."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Callable, Mapping

import tomllib
from platformdirs import user_config_dir, user_data_dir

CONFIG_FILE_NAME = "config.toml"
STORE_FILE_NAME = "ledgers.json"

_ENV_KEY_MAP: dict[str, str] = {
    "fs_root": "ACM_FS_ROOT",
    "log_ledger": "ACM_LOG_LEDGER",
    "settings_prefix": "ACM_SETTINGS_PREFIX",
    "signal_prefix": "ACM_SIGNAL_PREFIX",
    "store_path": "ACM_STORE",
}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserDirs:
    """Where ACM keeps its config file and persisted ledgers on this platform."""

    app_name: str = "acm"
    app_author: str = "Voxel Lab Studios"
    config_dir_override: Path | None = None
    data_dir_override: Path | None = None

    def _locate(self, override: Path | None, finder: Callable[..., str]) -> Path:
        if override is not None:
            return override
        return Path(finder(self.app_name, appauthor=self.app_author))

    def config_dir(self) -> Path:
        return self._locate(self.config_dir_override, user_config_dir)

    def data_dir(self) -> Path:
        return self._locate(self.data_dir_override, user_data_dir)


def _load_config_from_file(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    section = data.get("acm", data)
    return {key: str(value) for key, value in section.items() if not isinstance(value, dict)}


def default_config_path(user_dirs: UserDirs | None = None) -> Path:
    return (user_dirs or UserDirs()).config_dir() / CONFIG_FILE_NAME


@dataclass(frozen=True)
class AcmConfig:
    """Namespace constants and the location of the persistent ledger file."""

    fs_root: str = "ACM:FS"
    log_ledger: str = "ACM:LOG"
    settings_prefix: str = "ACM:"
    signal_prefix: str = "ACM:SIGNAL"
    store_path: Path | None = None

    @classmethod
    def resolve(
        cls,
        *,
        overrides: Mapping[str, str] | None = None,
        env: Mapping[str, str] | None = None,
        user_dirs: UserDirs | None = None,
        config_path: Path | None = None,
    ) -> "AcmConfig":
        """Build a config using overrides, env, config file, defaults order."""

        user_dirs = user_dirs or UserDirs()
        env = os.environ if env is None else env
        overrides = dict(overrides or {})
        file_layer = _load_config_from_file(config_path or default_config_path(user_dirs))

        values: dict[str, str] = {}
        for item in fields(cls):
            key = item.name
            if value := overrides.get(key):
                values[key] = value
            elif value := env.get(_ENV_KEY_MAP[key], ""):
                values[key] = value
            elif value := file_layer.get(key):
                values[key] = value

        store_path = values.pop("store_path", None)
        return cls(
            **values,
            store_path=(
                Path(store_path).expanduser()
                if store_path
                else user_dirs.data_dir() / STORE_FILE_NAME
            ),
        )
