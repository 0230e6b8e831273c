"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  -- static defaults checked into the repo
  2. .env file           -- local developer overrides (not committed)
  3. Environment vars    -- set at deploy time

Only the ``sciorag:`` section of the YAML file is read, and only keys that
name a :class:`Settings` field are applied.
"""

from pathlib import Path
from typing import Any

import structlog
import yaml

from sciorag.config.settings import Settings
from sciorag.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


def load_yaml_section(path: str | Path, section: str = "sciorag") -> dict[str, Any]:
    """Read one top-level mapping from a YAML file; missing file -> ``{}``.

    Raises:
        ConfigurationError: If the file is not valid YAML or its top level
            is not a mapping.
    """
    config_path = Path(path)
    if not config_path.exists():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(message=f"Malformed YAML in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(message=f"Expected a mapping at the top of {config_path}")
    values = data.get(section) or {}
    if not isinstance(values, dict):
        logger.warning("config_section_not_mapping", path=str(config_path), section=section)
        return {}
    return values


def load_settings(path: str | Path = "config/config.yaml") -> Settings:
    """Build :class:`Settings` from YAML defaults with env/.env on top.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Fully resolved settings.
    """
    env_settings = Settings()
    yaml_values = load_yaml_section(path)

    known = set(Settings.model_fields)
    unknown = sorted(k for k in yaml_values if k not in known)
    if unknown:
        logger.warning("config_unknown_keys", path=str(path), keys=unknown)

    merged = {k: v for k, v in yaml_values.items() if k in known}
    # Values that came from the environment win over the YAML file.
    for field in env_settings.model_fields_set:
        merged[field] = getattr(env_settings, field)

    return Settings(**merged)
