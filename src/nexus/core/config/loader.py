"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import NexusConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per session
_config_cache: NexusConfig | None = None

_TRUE_VALUES = ("1", "true", "yes", "on")


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """Path to ~/.config/nexus/config.json (or XDG equivalent)."""
    return get_xdg_config_home() / "nexus" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Project root (defaults to current directory)

    Returns:
        Path to .nexus.json in the project root
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".nexus.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`. Nested
    dicts are merged, not replaced.

    Example:
        >>> deep_merge({"llm": {"model": "a", "max_tokens": 10}}, {"llm": {"model": "b"}})
        {'llm': {'model': 'b', 'max_tokens': 10}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    A broken config file is logged and skipped rather than aborting the
    command.
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None

    if isinstance(data, dict):
        return data
    logger.warning("Ignoring config at %s: top level must be an object", path)
    return None


def _set_nested(config_dict: dict[str, Any], section: str, key: str, value: Any) -> None:
    config_dict.setdefault(section, {})
    config_dict[section] = {**config_dict[section], key: value}


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        NEXUS_LLM_MODEL - overrides llm.model
        NEXUS_LLM_PROVIDER - overrides llm.provider
        NEXUS_SHOW_REASONING - overrides catalyst.show_reasoning
        NEXUS_PLANNING_DIR - overrides structure.planning_dir

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if model := os.environ.get("NEXUS_LLM_MODEL"):
        _set_nested(result, "llm", "model", model)

    if provider := os.environ.get("NEXUS_LLM_PROVIDER"):
        provider = provider.strip().lower()
        if provider in ("openrouter", "openai"):
            _set_nested(result, "llm", "provider", provider)
        else:
            logger.warning("Invalid NEXUS_LLM_PROVIDER value '%s', ignoring", provider)

    if (reasoning := os.environ.get("NEXUS_SHOW_REASONING")) is not None:
        _set_nested(
            result, "catalyst", "show_reasoning", reasoning.strip().lower() in _TRUE_VALUES
        )

    if planning_dir := os.environ.get("NEXUS_PLANNING_DIR"):
        _set_nested(result, "structure", "planning_dir", planning_dir)

    return result


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> NexusConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (NEXUS_*)
        2. Project config (.nexus.json)
        3. User config (~/.config/nexus/config.json)
        4. Model defaults

    Args:
        project_dir: Project directory to load .nexus.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated NexusConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged: dict[str, Any] = {}

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = NexusConfig(**merged)
    _config_cache = config
    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
