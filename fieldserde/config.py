"""
Configuration
fieldserde

YAML configuration loader with environment variable substitution, and the
engine settings it populates.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from fieldserde.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "FIELDSERDE_CONFIG_DIR"
CONFIG_NAME = "fieldserde"

# each nesting level costs several interpreter frames
MAX_DEPTH_LIMIT = 128


class Config:
    """Configuration loader with environment variable substitution."""

    def __init__(self, config_path: str = "config"):
        self.config_path = Path(config_path)
        self._cache: dict[str, dict] = {}

    def load(self, name: str) -> dict:
        """Load configuration file by name."""
        if name in self._cache:
            return self._cache[name]

        # Try with .yaml extension
        path = self.config_path / f"{name}.yaml"
        if not path.exists():
            path = self.config_path / f"{name}.yml"

        if not path.exists():
            logger.debug(f"No config file for {name} in {self.config_path}")
            return {}

        with open(path, encoding="utf-8") as f:
            content = f.read()

        content = self._substitute_env(content)

        try:
            config = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}", path=str(path)) from e

        self._cache[name] = config

        return config

    def _substitute_env(self, content: str) -> str:
        """Substitute ${VAR} and ${VAR:default} with environment variables."""
        pattern = r'\$\{([^}]+)\}'

        def replacer(match):
            var_name = match.group(1)
            default = None

            if ":" in var_name:
                var_name, default = var_name.split(":", 1)

            return os.getenv(var_name, default or "")

        return re.sub(pattern, replacer, content)

    def get(self, key: str, default: Any = None) -> Any:
        """Get nested config value using dot notation (``file.section.key``)."""
        parts = key.split(".")

        config = self.load(parts[0])
        for part in parts[1:]:
            if isinstance(config, dict):
                config = config.get(part)
            else:
                return default
        return config if config is not None else default


class SerializerSettings(BaseModel):
    """Engine settings, read from the ``serializer`` section."""

    max_depth: int = Field(
        default=32, ge=1, le=MAX_DEPTH_LIMIT,
        description="Deepest allowed nesting of serializers",
    )
    log_level: str = Field(default="INFO")
    json_log_dir: str | None = Field(default=None, description="Rotating JSON log directory")
    metrics_enabled: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {v!r}")
        return level


def load_settings(config_path: str = "config", name: str = CONFIG_NAME) -> SerializerSettings:
    """
    Load SerializerSettings from ``<config_path>/<name>.yaml``.

    Raises:
        ConfigError: If the file is malformed or a setting is invalid
    """
    source = str(Path(config_path) / f"{name}.yaml")
    section = Config(config_path).get(f"{name}.serializer", {}) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"serializer section in {source} must be a mapping", path=source)

    try:
        return SerializerSettings(**section)
    except ValidationError as e:
        first = e.errors()[0]
        setting = ".".join(str(part) for part in first["loc"])
        raise ConfigError(f"Invalid setting {setting} in {source}: {first['msg']}", path=source) from e


# Global settings instance
_settings: SerializerSettings | None = None


def get_settings() -> SerializerSettings:
    """
    Get the process-wide settings.

    Loaded from the directory in FIELDSERDE_CONFIG_DIR when that is set,
    built-in defaults otherwise.
    """
    global _settings
    if _settings is None:
        config_dir = os.environ.get(CONFIG_DIR_ENV)
        _settings = load_settings(config_dir) if config_dir else SerializerSettings()
    return _settings


def configure(settings: SerializerSettings) -> None:
    """Replace the process-wide settings."""
    global _settings
    _settings = settings


def _reset_settings() -> None:
    global _settings
    _settings = None
