"""Config loader: reads YAML, applies PNL_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from pnl_core.config.schema import AppConfig


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        PNL_DATA_API_URL  -> data_api.base_url
        PNL_LOG_LEVEL     -> logging.level
        PNL_LOG_FORMAT    -> logging.format
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    overrides = {
        "PNL_DATA_API_URL": ("data_api", "base_url"),
        "PNL_LOG_LEVEL": ("logging", "level"),
        "PNL_LOG_FORMAT": ("logging", "format"),
    }
    for env_name, (section, field) in overrides.items():
        value = os.environ.get(env_name)
        if value:
            data.setdefault(section, {})[field] = value

    return AppConfig.model_validate(data)
