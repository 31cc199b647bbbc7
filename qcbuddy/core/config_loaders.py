"""
Configuration Loading and Management Functions.

Handles loading, saving, and applying environment overrides to the QC Buddy
configuration.

Configuration precedence: 1. Env vars, 2. YAML file, 3. Defaults

Environment Variables
---------------------
    GEMINI_KEY / GEMINI_API_KEY / GOOGLE_API_KEY   llm.api_key
    GEMINI_MODE                                    llm.mode (flash, pro, off)
    GEMINI_CACHE_TTL_MS                            llm.cache_ttl_sec
    GEMINI_MAX_CALLS_PER_MIN                       api.max_ai_calls_per_min
    PORT                                           api.port
    QCBUDDY_KNOWLEDGE_DIR                          prepended knowledge candidate dir
    QCBUDDY_RAW_DIR                                project.raw_dir
"""

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import yaml

from qcbuddy.core.env import GENERATION_MODES, get_env_int, get_env_str, get_env_whitelist
from qcbuddy.core.logging import get_logger

if TYPE_CHECKING:
    from qcbuddy.core.config import Config

logger = get_logger(__name__)

CONFIG_FILENAMES = ("config.yaml", "qcbuddy.yaml")


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Strings may use ${VAR_NAME} or ${VAR_NAME:default}. Dicts and lists are
    walked recursively; other primitives are returned unchanged.
    """
    if isinstance(value, str):
        pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

        def replace_env_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def _apply_env_overrides(config: "Config") -> "Config":
    """
    Apply environment variable overrides to configuration.

    Environment variables take precedence over config file values.
    """
    _apply_llm_overrides(config)
    _apply_api_server_overrides(config)
    _apply_path_overrides(config)
    return config


def _apply_llm_overrides(config: "Config") -> None:
    """Apply Gemini key, mode and cache TTL overrides."""
    api_key = get_env_str("GEMINI_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")
    if api_key:
        config.llm.api_key = api_key

    mode = get_env_whitelist("GEMINI_MODE", GENERATION_MODES)
    if mode:
        config.llm.mode = mode

    ttl_ms = get_env_int("GEMINI_CACHE_TTL_MS", min_value=0, max_value=86_400_000)
    if ttl_ms is not None:
        config.llm.cache_ttl_sec = ttl_ms / 1000.0


def _apply_api_server_overrides(config: "Config") -> None:
    """Apply API server overrides (port bounds 1-65535)."""
    port = get_env_int("PORT", min_value=1, max_value=65535)
    if port is not None:
        config.api.port = port

    max_calls = get_env_int("GEMINI_MAX_CALLS_PER_MIN", min_value=0, max_value=10_000)
    if max_calls is not None:
        config.api.max_ai_calls_per_min = max_calls


def _apply_path_overrides(config: "Config") -> None:
    """Apply raw and knowledge directory overrides."""
    raw_dir = os.environ.get("QCBUDDY_RAW_DIR")
    if raw_dir:
        config.project.raw_dir = raw_dir

    knowledge_dir = os.environ.get("QCBUDDY_KNOWLEDGE_DIR")
    if knowledge_dir and knowledge_dir not in config.knowledge.candidate_dirs:
        config.knowledge.candidate_dirs.insert(0, knowledge_dir)


def load_config(
    config_path: Optional[Path] = None, base_path: Optional[Path] = None
) -> "Config":
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to config.yaml or
            qcbuddy.yaml in base_path.
        base_path: Base path for the project. Defaults to current directory.

    Returns:
        Config object with all settings.
    """
    # Lazy import to avoid circular dependency
    from qcbuddy.core.config import Config

    base_path = base_path or Path.cwd()

    if config_path is None:
        for filename in CONFIG_FILENAMES:
            candidate = base_path / filename
            if candidate.exists():
                config_path = candidate
                break
        else:
            return _create_default_config(base_path)
    if not config_path.exists():
        return _create_default_config(base_path)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError("top-level YAML value must be a mapping")
        config = Config.from_dict(data, base_path)
        return _apply_env_overrides(config)

    except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
        logger.warning(
            "Could not load config, using defaults",
            path=str(config_path),
            error=str(e),
        )
        return _create_default_config(base_path)


def _create_default_config(base_path: Path) -> "Config":
    """Create default configuration with environment overrides."""
    from qcbuddy.core.config import Config

    config = Config()
    config._base_path = base_path
    return _apply_env_overrides(config)


def save_config(config: "Config", config_path: Optional[Path] = None) -> None:
    """Save configuration to YAML file."""
    if config_path is None:
        config_path = config.base_path / "config.yaml"

    config_dict = config.to_dict()
    # Never write secrets back to disk
    config_dict["llm"]["api_key"] = "${GEMINI_KEY}"

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
