"""Engine settings.

Read from ``~/.obey/config.yaml`` (or the file named by ``OBEY_CONFIG``).
A rule file's ``settings:`` block and CLI flags override these values.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path.home() / ".obey" / "config.yaml"
CONFIG_ENV_VAR = "OBEY_CONFIG"


class ConfigError(Exception):
    """Raised when a settings file exists but cannot be used."""


class EngineSettings(BaseModel):
    """Knobs for one evaluation pass."""

    concurrent: bool = False
    action_timeout: Optional[float] = Field(default=None, gt=0, description="Seconds per async action")

    model_config = ConfigDict(extra="forbid")

    def merged(self, overrides: Optional[dict[str, Any]] = None) -> "EngineSettings":
        """Return a copy with non-None ``overrides`` applied."""
        if not overrides:
            return self
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return EngineSettings.model_validate(data)


def config_path() -> Path:
    """Return the settings file location, honoring OBEY_CONFIG."""
    env = os.environ.get(CONFIG_ENV_VAR, "").strip()
    return Path(env).expanduser() if env else _DEFAULT_CONFIG_PATH


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    """Load settings from YAML; defaults when the file does not exist.

    Raises:
        ConfigError: If the file is not valid YAML or has unknown/invalid keys.
    """
    path = path or config_path()
    if not path.exists():
        logger.debug("No settings file at %s, using defaults", path)
        return EngineSettings()

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"YAML parse error in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(raw).__name__}")

    try:
        settings = EngineSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {path}: {exc}") from exc
    logger.debug("Loaded settings from %s: %s", path, settings)
    return settings
