"""Configuration module for nanosearch."""

from nanosearch.config.loader import get_config_path, load_config, save_config
from nanosearch.config.schema import Config, WebSearchConfig

__all__ = ["Config", "WebSearchConfig", "get_config_path", "load_config", "save_config"]
