"""Configuration loading from an optional YAML file overlaid by env vars."""

import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    log_dir: str = "/Library/Logs/Microsoft"
    log_suffix: str = ".log"
    log_level: str = "INFO"
    stop_timeout: float = 5.0   # seconds to wait for watch/worker threads


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path or file missing."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, using defaults", path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(yaml_data: dict | None = None) -> Config:
    """Build Config: environment variables override YAML, YAML overrides defaults."""
    yaml_data = yaml_data or {}

    def pick(env_key: str, yaml_key: str, default):
        return os.environ.get(env_key, yaml_data.get(yaml_key, default))

    return Config(
        log_dir=str(pick("MAU_LOG_DIR", "log_dir", Config.log_dir)),
        log_suffix=str(pick("MAU_LOG_SUFFIX", "log_suffix", Config.log_suffix)),
        log_level=str(pick("MAU_LOG_LEVEL", "log_level", Config.log_level)).upper(),
        stop_timeout=float(pick("MAU_STOP_TIMEOUT", "stop_timeout", Config.stop_timeout)),
    )
