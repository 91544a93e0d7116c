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

from .models import BoardConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = ".clock-kanban.json"

# Cache keyed by project directory so several vaults can be loaded in one session
_config_cache: dict[Path, BoardConfig] = {}


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
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/clock-kanban/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "clock-kanban" / "config.json"


def get_project_config_path(project_dir: Path | None = None) -> Path:
    """
    Get path to project (vault) configuration file.

    Args:
        project_dir: Vault root (defaults to current directory)

    Returns:
        Path to .clock-kanban.json in the vault root
    """
    if project_dir is None:
        project_dir = Path.cwd()
    return project_dir / PROJECT_CONFIG_NAME


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`. Nested dicts
    are merged; lists (such as `columns`) are replaced wholesale.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 1}}, {"b": {"y": 2}})
        {'a': 1, 'b': {'x': 1, 'y': 2}}
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

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning(f"Ignoring config at {path}: expected a JSON object")
            return None
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None


def _parse_bool(value: str) -> bool:
    return value.lower() not in ("false", "0", "no", "off", "")


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        CLOCK_KANBAN_CLOCK_COLUMN - overrides clock_column
        CLOCK_KANBAN_AUTO_CLOCK - overrides auto_clock
        CLOCK_KANBAN_SHOW_COMPLETED - overrides show_completed_tasks
        CLOCK_KANBAN_DEBUG - overrides debug_messages
        CLOCK_KANBAN_FOLDER_FILTER - overrides folder_filter

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if clock_column := os.environ.get("CLOCK_KANBAN_CLOCK_COLUMN"):
        result["clock_column"] = clock_column

    if (auto_clock := os.environ.get("CLOCK_KANBAN_AUTO_CLOCK")) is not None:
        result["auto_clock"] = _parse_bool(auto_clock)

    if (show_completed := os.environ.get("CLOCK_KANBAN_SHOW_COMPLETED")) is not None:
        result["show_completed_tasks"] = _parse_bool(show_completed)

    if (debug := os.environ.get("CLOCK_KANBAN_DEBUG")) is not None:
        result["debug_messages"] = _parse_bool(debug)

    if (folder_filter := os.environ.get("CLOCK_KANBAN_FOLDER_FILTER")) is not None:
        result["folder_filter"] = folder_filter

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return BoardConfig().model_dump()


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> BoardConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (CLOCK_KANBAN_*)
        2. Project config (<vault>/.clock-kanban.json)
        3. User config (~/.config/clock-kanban/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Vault root to load .clock-kanban.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated BoardConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation

    Example:
        >>> config = load_config()
        >>> config.clock_column
        'Working'
    """
    cache_key = (project_dir or Path.cwd()).resolve()

    if use_cache and cache_key in _config_cache:
        return _config_cache[cache_key]

    merged = get_default_config()

    user_config_path = get_user_config_path()
    if user_config := load_json_file(user_config_path):
        merged = deep_merge(merged, user_config)

    project_config_path = get_project_config_path(project_dir)
    if project_config := load_json_file(project_config_path):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = BoardConfig(**merged)
    logger.debug(
        f"Loaded config for {cache_key}: {len(config.columns)} column(s), "
        f"clock column '{config.clock_column}'"
    )

    _config_cache[cache_key] = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    _config_cache.clear()
