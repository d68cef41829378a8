"""
Configuration loader module for postmeta.

This module provides utilities for loading and validating configuration files.
"""

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from postmeta.config.models import MainConfig
from postmeta.exceptions import ConfigurationError
from postmeta.utils import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# environment variable -> (section, key)
ENV_OVERRIDES = {
    "POSTMETA_CONTENT_ROOT": ("content", "root"),
    "POSTMETA_LOG_LEVEL": ("logging", "level"),
}


def apply_env_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Overlay ``POSTMETA_*`` environment variables onto a raw config mapping.

    Args:
        config_dict: Raw configuration as read from the file.

    Returns:
        A new mapping with overrides applied.
    """
    merged = {
        key: dict(value) if isinstance(value, dict) else value
        for key, value in config_dict.items()
    }
    for var, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value:
            merged.setdefault(section, {})[key] = value
    return merged


def load_config(
    config_path: Optional[str] = None, config_model: Type[ModelT] = MainConfig
) -> ModelT:
    """
    Load and validate configuration from a TOML file using a Pydantic model.

    A ``.env`` file in the working directory is loaded first so that its
    ``POSTMETA_*`` variables take part in the overrides.

    Args:
        config_path: Path to the configuration file. When None, only
            defaults and environment overrides are used.
        config_model: Pydantic model class to use for validation.

    Returns:
        Validated configuration object.

    Raises:
        ConfigurationError: If the configuration file doesn't exist or is invalid.
    """
    load_dotenv()

    config_dict: Dict[str, Any] = {}
    config_file: Optional[Path] = None
    if config_path is not None:
        config_file = Path(config_path).resolve()
        if not config_file.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                config_file=str(config_file),
            )
        try:
            with open(config_file, "rb") as f:
                config_dict = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            logger.error(
                "config_parse_failed", config_file=str(config_file), error=str(e)
            )
            raise ConfigurationError(
                f"Invalid configuration: {e}", config_file=str(config_file)
            ) from e

    try:
        return config_model(**apply_env_overrides(config_dict))
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            config_file=str(config_file) if config_file else None,
        ) from e
