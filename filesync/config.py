"""Configuration for filesync.

Values are read from environment variables first, then from a ``KEY=VALUE``
config file at ``~/.config/filesync/config`` (or the path in
``FILESYNC_CONFIG``). Command line options override both.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "FILESYNC_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "filesync" / "config"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class Config:
    """Settings shared by the CLI and the storage backends."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        self._config_path = config_path
        self._file_values: dict[str, str] = {}
        self.reload()

    def get_config_path(self) -> Path:
        """Return the config file location."""
        if self._config_path is not None:
            return self._config_path
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            return Path(env_path).expanduser()
        return DEFAULT_CONFIG_PATH

    def reload(self) -> None:
        """Re-read the config file."""
        self._file_values = self._read_file(self.get_config_path())

    def _read_file(self, path: Path) -> dict[str, str]:
        if not path.is_file():
            return {}

        values: dict[str, str] = {}
        with open(path, encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    raise ConfigError(
                        f"Invalid line {line_number} in {path}: expected KEY=VALUE"
                    )
                key, value = line.split("=", 1)
                values[key.strip()] = value.strip().strip("\"'")

        logger.debug(f"Loaded {len(values)} setting(s) from {path}")
        return values

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a raw setting, environment first."""
        value = os.environ.get(key)
        if value is not None:
            return value
        return self._file_values.get(key, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get a boolean setting.

        Raises:
            ConfigError: If the value is not a recognizable boolean
        """
        value = self.get(key)
        if value is None:
            return default
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        raise ConfigError(f"Invalid boolean for {key}: {value!r}")

    @property
    def use_hashes(self) -> bool:
        """Whether to compare content hashes by default."""
        return self.get_bool("FILESYNC_HASH", default=False)

    @property
    def s3_endpoint_url(self) -> Optional[str]:
        return self.get("FILESYNC_S3_ENDPOINT_URL")

    @property
    def s3_region(self) -> Optional[str]:
        return self.get("FILESYNC_S3_REGION") or self.get("AWS_DEFAULT_REGION")

    @property
    def access_key(self) -> Optional[str]:
        return self.get("AWS_ACCESS_KEY_ID")

    @property
    def secret_key(self) -> Optional[str]:
        return self.get("AWS_SECRET_ACCESS_KEY")


config = Config()
