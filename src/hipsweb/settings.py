"""
User-tunable settings.

Settings are read from a YAML file with one optional section per layout:

    bundling:
      tension: 0.7
    orbital:
      edge_threshold: 25
    cascade:
      default_depth: 2

Lookup order: an explicit path, then $HIPSWEB_CONFIG, then
.hipsweb/config.yaml. A missing file means defaults.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .analysis.cascade import CascadeConfig
from .config import CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH
from .core.exceptions import ConfigError
from .layout.hierarchy import BundlingConfig
from .layout.orbital import OrbitalConfig

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    bundling: BundlingConfig = Field(default_factory=BundlingConfig)
    orbital: OrbitalConfig = Field(default_factory=OrbitalConfig)
    cascade: CascadeConfig = Field(default_factory=CascadeConfig)

    model_config = ConfigDict(extra="forbid")


def resolve_config_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from YAML, falling back to defaults when no file exists."""
    config_path = resolve_config_path(path)
    if not config_path.exists():
        logger.debug(f"No config at {config_path}, using defaults")
        return Settings()

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e

    logger.debug(f"Loaded settings from {config_path}")
    return settings
