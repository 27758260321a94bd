"""Configuration loading utilities."""

import json
import os
import re
from pathlib import Path
from typing import Any

from loguru import logger

from nanosearch.config.schema import Config

_ENV_API_KEYS = {
    "perplexity": "PERPLEXITY_API_KEY",
}

_DEFAULT_BASE_URLS = {
    "perplexity": "https://api.perplexity.ai",
    "duckduckgo": "https://html.duckduckgo.com",
}


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".nanosearch" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Provider API keys left empty in the file are filled from the environment
    (e.g. ``PERPLEXITY_API_KEY``).

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()
    config = Config()

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            data = _migrate_config(data)
            config = Config.model_validate(convert_keys(data))
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to load config from {}: {}. Using default configuration.", path, e)

    return _apply_env_api_keys(config)


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = convert_to_camel(config.model_dump())

    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def _apply_env_api_keys(config: Config, environ: dict[str, str] | None = None) -> Config:
    env = os.environ if environ is None else environ
    providers = config.search.providers
    for name, env_key in _ENV_API_KEYS.items():
        provider_cfg = getattr(providers, name)
        if not provider_cfg.api_key and env.get(env_key):
            provider_cfg.api_key = env[env_key]
    return config


def _migrate_config(data: dict) -> dict:
    """Migrate old config formats to current."""
    if not isinstance(data, dict):
        raise ValueError(f"config root must be an object, got {type(data).__name__}")
    search_cfg = _section(data, "search")

    # Move legacy search.apiKey -> search.providers.perplexity.apiKey
    legacy_api_key = search_cfg.pop("apiKey", None)
    providers_cfg = _section(search_cfg, "providers")
    if legacy_api_key:
        perplexity_cfg = _section(providers_cfg, "perplexity")
        if not perplexity_cfg.get("apiKey"):
            perplexity_cfg["apiKey"] = legacy_api_key

    # Fill default provider base URLs when missing/empty
    for name, base_url in _DEFAULT_BASE_URLS.items():
        provider_cfg = _section(providers_cfg, name)
        if not provider_cfg.get("baseUrl"):
            provider_cfg["baseUrl"] = base_url

    return data


def _section(parent: dict, key: str) -> dict:
    # null or missing sections become empty objects; other non-objects are rejected
    value = parent.get(key)
    if value is None:
        value = parent[key] = {}
    if not isinstance(value, dict):
        raise ValueError(f"config section '{key}' must be an object")
    return value


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def snake_to_camel(name: str) -> str:
    first, *rest = name.split("_")
    return first + "".join(word.capitalize() for word in rest)
