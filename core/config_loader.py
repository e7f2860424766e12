"""Configuration loader for the broker."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

import yaml
from dotenv import load_dotenv

from core.config_models import AppConfig

DEFAULT_CONFIG_NAME = "config.yaml"

# environment variable -> (section, key)
ENV_OVERRIDES: Dict[str, tuple[str, str]] = {
    "BROKER_TOKEN_PREFIX": ("broker", "token_prefix"),
    "BROKER_TOKEN_START": ("broker", "token_start"),
    "BROKER_LOG_LEVEL": ("logging", "level"),
}


def _apply_env_overrides(data: Dict[str, object]) -> Dict[str, object]:
    merged: Dict[str, object] = {key: dict(value or {}) for key, value in data.items()}
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is None:
            continue
        merged.setdefault(section, {})[key] = value
    return merged


def load_config(
    config_path: Optional[Path] = None,
    env_path: Optional[Path] = None,
) -> AppConfig:
    """Load configuration from YAML and environment variables.

    A missing config file is not an error: defaults are used and only the
    environment overrides apply.
    """

    base_path = Path(__file__).resolve().parents[1]
    if config_path is None:
        config_path = base_path / DEFAULT_CONFIG_NAME
    if env_path is None:
        default_env = base_path / ".env"
        if default_env.exists():
            env_path = default_env

    if env_path is not None:
        load_dotenv(dotenv_path=env_path, override=False)

    data: Dict[str, object] = {}
    config_path = Path(config_path)
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{config_path} must contain a mapping at the top level")

    return AppConfig.from_dict(_apply_env_overrides(data))


__all__ = ["load_config", "ENV_OVERRIDES"]
