"""Configuration system."""

from pnl_core.config.loader import load_config
from pnl_core.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
