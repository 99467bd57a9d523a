"""
================================================================================
Pagewalk Common Utilities
================================================================================

Shared configuration management and logging setup for the pagewalk
framework.

Exports:
    - GlobalConfig: Singleton configuration manager
    - get_config: Convenience function to get configuration values
    - init_logger: Function to initialize loguru logger with standard settings

Usage:
    from pagewalk.common import get_config, init_logger

    init_logger()
    first_timeout = get_config("wait.first_timeout", 10)

================================================================================
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


# Default configuration file, relative to the working directory
DEFAULT_CONFIG_PATH = Path("config") / "pagewalk.yaml"

# Prefix for environment overrides: PAGEWALK__WAIT__FIRST_TIMEOUT=5
ENV_PREFIX = "PAGEWALK__"


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""
    pass


# ============================================================
# Configuration Management
# ============================================================

def _get_defaults() -> Dict[str, Any]:
    """
    Returns default configuration values.
    """
    return {
        "logging": {
            "level": "INFO",
            "format": "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
        },
        "wait": {
            "first_timeout": 10,
            "other_timeout": 1,
            "poll_interval_ms": 100,
        },
        "pagination": {
            "max_page_iterations": 100,
        },
    }


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merges two dictionaries, with override taking precedence.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class GlobalConfig:
    """
    Singleton class to manage configuration for pagewalk.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (PAGEWALK__WAIT__FIRST_TIMEOUT)
        2. YAML configuration file (PAGEWALK_CONFIG or config/pagewalk.yaml)
        3. Built-in defaults
    """
    _instance: Optional["GlobalConfig"] = None

    def __new__(cls) -> "GlobalConfig":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._config: Dict[str, Any] = {}
        self._load_configs()
        self._initialized = True

    def _load_configs(self) -> None:
        """
        Loads configurations from defaults, the YAML file and environment variables.
        """
        self._config = _get_defaults()

        config_path = Path(os.getenv("PAGEWALK_CONFIG", str(DEFAULT_CONFIG_PATH)))
        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Invalid YAML in configuration file {config_path}: {e}"
                ) from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(
                    f"Configuration file {config_path} must contain a mapping"
                )
            self._config = _deep_merge(self._config, file_config)
            logger.debug(f"Loaded configuration from {config_path}")

        self._apply_env_overrides()

    def _apply_env_overrides(self) -> None:
        """
        Applies environment variable overrides to the configuration.

        Environment variable naming convention:
            - Prefix with PAGEWALK__
            - Use double underscore to separate nested keys
            - Example: PAGEWALK__LOGGING__LEVEL=DEBUG overrides logging.level
        """
        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            parts = [p.lower() for p in key[len(ENV_PREFIX):].split("__") if p]
            if parts:
                self._set_nested(".".join(parts), value)

    def _set_nested(self, key: str, value: Any) -> None:
        """
        Sets a nested configuration value using dot notation.
        """
        keys = key.split(".")
        current = self._config
        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                current[k] = {}
            current = current[k]
        current[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieves a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "wait.first_timeout")
            default: Default value if key is not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_int(self, key: str, default: int) -> int:
        """
        Retrieves an integer configuration value.

        Environment overrides always arrive as strings, so values are
        converted here.

        Raises:
            ConfigurationError: If the value cannot be converted
        """
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Configuration value {key}={value!r} is not an integer"
            ) from e

    def set(self, key: str, value: Any) -> None:
        """
        Sets a configuration value.

        Args:
            key: Configuration key (e.g., "wait.other_timeout")
            value: Value to set
        """
        self._set_nested(key, value)

    def get_all(self) -> Dict[str, Any]:
        """
        Returns the entire configuration dictionary.
        """
        return self._config.copy()

    @classmethod
    def reset(cls) -> None:
        """
        Reset singleton instance.

        Useful for testing when configuration needs to be reloaded
        with different settings.
        """
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """
    Convenience function to get a configuration value.

    Args:
        key: Configuration key using dot notation
        default: Default value if not found

    Returns:
        Configuration value or default

    Example:
        max_pages = get_config("pagination.max_page_iterations", 100)
    """
    return GlobalConfig().get(key, default)


def get_int_config(key: str, default: int) -> int:
    """Convenience function to get an integer configuration value."""
    return GlobalConfig().get_int(key, default)


def set_config(key: str, value: Any) -> None:
    """
    Convenience function to set a configuration value.

    Args:
        key: Configuration key using dot notation
        value: Value to set
    """
    GlobalConfig().set(key, value)


# ============================================================
# Logging Setup
# ============================================================

_logger_initialized = False


def init_logger(
    level: str = None,
    format_string: str = None,
    log_file: str = None
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to.

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/pagewalk.log")
    """
    global _logger_initialized

    if _logger_initialized:
        return

    # Remove default handler
    logger.remove()

    level = (level or get_config("logging.level", "INFO")).upper()
    format_string = format_string or get_config("logging.format")

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    log_file = log_file or get_config("logging.file")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=format_string.replace("{level: <8}", "{level}"),
            level=level,
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {level}")


# Export public API
__all__ = [
    "ConfigurationError",
    "GlobalConfig",
    "get_config",
    "get_int_config",
    "set_config",
    "init_logger",
]
