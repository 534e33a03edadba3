"""Validatar configuration management.

Configuration is loaded from multiple sources with the following priority
(highest to lowest):
1. CLI arguments and explicit overrides
2. Environment variables (with VALIDATAR_ prefix)
3. Configuration file (validatar.config.yaml)
4. Default values

Environment variable support:
    VALIDATAR_LOGGING__LEVEL=DEBUG
    VALIDATAR_STRICT_PARSERS=true
    VALIDATAR_PARAMETERS='{"table": "orders"}'
    VALIDATAR_LOGGING__JSON_OUTPUT=true
    VALIDATAR_LOGGING__MODULES='{"validatar.parse.registry": "WARNING"}'
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Default config file names to search for
CONFIG_FILE_NAMES = ["validatar.config.yaml", "validatar.config.yml"]

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by searching a directory and its parents.

    Args:
        start_dir: Directory to start search from.
            Defaults to current working directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()

    # Limit search depth
    for _ in range(10):
        for filename in CONFIG_FILE_NAMES:
            config_path = search_dir / filename
            if config_path.exists():
                return config_path

        parent = search_dir.parent
        if parent == search_dir:
            break
        search_dir = parent

    return None


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Unreadable or malformed files are logged and treated as empty.
    """
    try:
        with open(config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
            return config if isinstance(config, dict) else {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse config file %s: %s", config_path, e)
        return {}
    except OSError as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return {}


def _validate_level(v: str) -> str:
    upper_v = v.upper()
    if upper_v not in VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {v}. Must be one of {VALID_LOG_LEVELS}")
    return upper_v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="VALIDATAR_LOGGING__", extra="ignore")

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_output: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )
    file: str | None = Field(
        default=None,
        description="Log file path (optional)",
    )
    modules: dict[str, str] = Field(
        default_factory=dict,
        description='Per-module log levels, e.g. {"validatar.parse": "DEBUG"}',
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        return _validate_level(v)

    @field_validator("modules")
    @classmethod
    def validate_module_levels(cls, v: dict[str, str]) -> dict[str, str]:
        """Validate every per-module level."""
        return {module: _validate_level(level) for module, level in v.items()}


class ValidatarSettings(BaseSettings):
    """Main Validatar configuration settings.

    Example:
        settings = ValidatarSettings(strict_parsers=True)
        print(settings.parameters)
    """

    model_config = SettingsConfigDict(
        env_prefix="VALIDATAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    strict_parsers: bool = Field(
        default=False,
        description="Fail at startup when two parsers declare the same name",
    )
    parameters: dict[str, str] = Field(
        default_factory=dict,
        description="Default values for ${name} placeholders in queries",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @model_validator(mode="before")
    @classmethod
    def load_from_config_file(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Merge values from validatar.config.yaml under explicit values."""
        if data.get("_skip_file_loading"):
            data.pop("_skip_file_loading", None)
            return data

        config_path = _find_config_file()
        if config_path:
            file_config = _load_yaml_config(config_path)
            if file_config:
                logger.debug("Loaded configuration from %s", config_path)
                merged = {**file_config, **data}
                if isinstance(file_config.get("logging"), dict):
                    merged["logging"] = {
                        **file_config["logging"],
                        **(
                            data["logging"]
                            if isinstance(data.get("logging"), dict)
                            else {}
                        ),
                    }
                return merged

        return data


def get_settings(
    config_file: Path | None = None,
    **overrides: Any,
) -> ValidatarSettings:
    """Get Validatar settings instance.

    Args:
        config_file: Optional explicit path to configuration file. When given,
            the directory search for validatar.config.yaml is skipped.
        **overrides: Explicit configuration overrides.

    Returns:
        Configured ValidatarSettings instance.
    """
    if config_file and config_file.exists():
        file_config = _load_yaml_config(config_file)
        merged = {**file_config, **overrides, "_skip_file_loading": True}
        return ValidatarSettings(**merged)

    return ValidatarSettings(**overrides)

