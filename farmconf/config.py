r"""Settings loading.

Settings come from a YAML file (default ``~/.config/farmconf/config.yaml``)
with ``FARMCONF_*`` environment variables taking precedence::

    node_name: srv01
    topology_path: /etc/farmconf/topology.yaml
    config_filename: web.config
    path_separator: "\\"
    logging:
      level: INFO
      json_format: false
"""

from dataclasses import dataclass, field
from datetime import datetime
import os
from pathlib import Path
import shutil
import socket
from typing import Any, Dict, Mapping, Optional

import yaml

from .domain.exceptions import ConfigurationError

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "farmconf"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.yaml"
DEFAULT_TOPOLOGY_PATH = DEFAULT_CONFIG_DIR / "topology.yaml"

ENV_PREFIX = "FARMCONF_"
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_node_name() -> str:
    """Current machine name, without any domain suffix."""
    return socket.gethostname().split(".")[0]


@dataclass(frozen=True)
class FarmconfSettings:
    """Validated runtime settings.

    Attributes:
        node_name: Name of the node whose instances are discovered.
        topology_path: Farm topology file read by the YAML directories.
        config_filename: Name of the config file inside each instance root.
        path_separator: Separator used to join instance roots and the filename.
        log_level: Root log level name.
        json_logs: Emit JSON log lines instead of console output.
        parameters: Defaults for the install parameters, keyed by name.
    """

    node_name: str = field(default_factory=default_node_name)
    topology_path: Path = DEFAULT_TOPOLOGY_PATH
    config_filename: str = "web.config"
    path_separator: str = os.sep
    log_level: str = "INFO"
    json_logs: bool = False
    parameters: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.node_name or not self.node_name.strip():
            raise ConfigurationError("node_name cannot be empty")
        if not self.config_filename or any(sep in self.config_filename for sep in ("/", "\\")):
            raise ConfigurationError(
                "config_filename must be a plain file name",
                {"config_filename": self.config_filename},
            )
        if self.path_separator not in ("/", "\\"):
            raise ConfigurationError(
                "path_separator must be '/' or '\\'",
                {"path_separator": self.path_separator},
            )
        if self.log_level.upper() not in _VALID_LOG_LEVELS:
            raise ConfigurationError(f"log_level must be one of {', '.join(_VALID_LOG_LEVELS)}")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FarmconfSettings":
        """Create settings from a parsed settings file.

        Raises:
            ConfigurationError: If values are missing or invalid.
        """
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationError("Settings file must contain a mapping")

        logging_section = data.get("logging") or {}
        if not isinstance(logging_section, Mapping):
            raise ConfigurationError("logging must be a mapping with level and json_format")
        parameters = data.get("parameters") or {}
        if not isinstance(parameters, Mapping):
            raise ConfigurationError("parameters must be a mapping of name to default value")

        return cls(
            node_name=str(data.get("node_name") or default_node_name()),
            topology_path=Path(data.get("topology_path") or DEFAULT_TOPOLOGY_PATH).expanduser(),
            config_filename=str(data.get("config_filename", "web.config")),
            path_separator=str(data.get("path_separator", os.sep)),
            log_level=str(logging_section.get("level", "INFO")).upper(),
            json_logs=bool(logging_section.get("json_format", False)),
            parameters={str(k): str(v) for k, v in parameters.items()},
        )


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for key in ("node_name", "topology_path", "config_filename", "path_separator"):
        value = environ.get(f"{ENV_PREFIX}{key.upper()}")
        if value:
            overrides[key] = value

    logging_overrides: Dict[str, Any] = {}
    if environ.get(f"{ENV_PREFIX}LOG_LEVEL"):
        logging_overrides["level"] = environ[f"{ENV_PREFIX}LOG_LEVEL"]
    if environ.get(f"{ENV_PREFIX}JSON_LOGS"):
        logging_overrides["json_format"] = environ[f"{ENV_PREFIX}JSON_LOGS"].strip().lower() in ("1", "true", "yes")
    if logging_overrides:
        overrides["logging"] = logging_overrides
    return overrides


class SettingsFileManager:
    """Manages the farmconf settings file."""

    def __init__(self, config_path: Path | None = None):
        """Initialize with optional custom settings path."""
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    def exists(self) -> bool:
        return self.config_path.exists()

    def load(self) -> dict:
        """Load raw settings from file.

        Returns:
            Settings dictionary, or empty dict if the file doesn't exist.

        Raises:
            ConfigurationError: The file is not valid YAML.
        """
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

    def save(self, config: dict) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)

    def backup(self) -> Path | None:
        """Create a timestamped backup of the settings file.

        Returns:
            Path to backup file, or None if file doesn't exist.
        """
        if not self.config_path.exists():
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = self.config_path.with_suffix(f".backup.{timestamp}.yaml")
        shutil.copy2(self.config_path, backup_path)
        return backup_path


def _merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def load_settings(
    config_path: Path | None = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> FarmconfSettings:
    """Load settings from file, environment and explicit overrides (in that order).

    Keyword overrides with a None value are ignored, so CLI options can be
    passed through unconditionally.
    """
    environ = os.environ if environ is None else environ
    data = SettingsFileManager(config_path).load()
    if not isinstance(data, dict):
        raise ConfigurationError("Settings file must contain a mapping")

    data = _merge(data, _env_overrides(environ))
    data = _merge(data, {k: v for k, v in overrides.items() if v is not None})
    return FarmconfSettings.from_dict(data)
