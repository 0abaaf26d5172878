"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import TodoSyncConfig

logger = logging.getLogger(__name__)

# Avoid re-reading config files more than once per process
_config_cache: TodoSyncConfig | None = None

ENV_DB_PATH = "TODOSYNC_DB_PATH"
ENV_API_URL = "TODOSYNC_API_URL"
ENV_TIMEOUT = "TODOSYNC_TIMEOUT"
ENV_MAX_RETRIES = "TODOSYNC_MAX_RETRIES"
ENV_CONCURRENCY = "TODOSYNC_CONCURRENCY"


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
    """Path to ~/.config/todosync/config.json (or XDG equivalent)."""
    return get_xdg_config_home() / "todosync" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .todosync.json in that directory
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".todosync.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`. Nested dicts
    are merged, not replaced.

    Example:
        >>> base = {"fetch": {"timeout": 30, "base_delay": 0.1}}
        >>> deep_merge(base, {"fetch": {"timeout": 5}})
        {'fetch': {'timeout': 5, 'base_delay': 0.1}}
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
        Parsed JSON object, or None if the file is missing or unreadable
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning(f"Ignoring config at {path}: top level is not an object")
            return None
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None


def _parse_env_number(name: str, convert: type, *, allow_zero: bool) -> Any:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        value = convert(raw)
    except ValueError:
        logger.warning(f"Invalid {name} value '{raw}', ignoring")
        return None
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        logger.warning(f"{name} must be {bound}, got {raw}, ignoring")
        return None
    return value


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        TODOSYNC_DB_PATH - overrides database.path
        TODOSYNC_API_URL - overrides fetch.base_url
        TODOSYNC_TIMEOUT - overrides fetch.timeout
        TODOSYNC_MAX_RETRIES - overrides fetch.max_retries
        TODOSYNC_CONCURRENCY - overrides sync.default_concurrency

    Invalid numeric values are ignored with a warning.
    """
    result = copy.deepcopy(config_dict)

    if db_path := os.environ.get(ENV_DB_PATH):
        result.setdefault("database", {})["path"] = db_path

    if api_url := os.environ.get(ENV_API_URL):
        result.setdefault("fetch", {})["base_url"] = api_url

    timeout = _parse_env_number(ENV_TIMEOUT, float, allow_zero=False)
    if timeout is not None:
        result.setdefault("fetch", {})["timeout"] = timeout

    max_retries = _parse_env_number(ENV_MAX_RETRIES, int, allow_zero=True)
    if max_retries is not None:
        result.setdefault("fetch", {})["max_retries"] = max_retries

    if concurrency := os.environ.get(ENV_CONCURRENCY):
        result.setdefault("sync", {})["default_concurrency"] = concurrency

    return result


def get_default_config() -> dict[str, Any]:
    """Hard-coded defaults, as a plain dictionary."""
    return TodoSyncConfig().model_dump()


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> TodoSyncConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (TODOSYNC_*)
        2. Project config (.todosync.json)
        3. User config (~/.config/todosync/config.json)
        4. Hard-coded defaults

    Args:
        project_dir: Directory to load .todosync.json from (defaults to cwd)
        use_cache: If True, return cached config from a previous load

    Returns:
        Validated TodoSyncConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = TodoSyncConfig(**merged)
    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
