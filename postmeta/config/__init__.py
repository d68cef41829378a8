"""
Configuration module for postmeta.

This module provides configuration models and utilities for loading and validating configuration.
"""

from postmeta.config.loader import apply_env_overrides, load_config
from postmeta.config.models import (
    ContentConfig,
    LoggingConfig,
    MainConfig,
    ParserConfig,
    PipelineConfig,
    ValidationConfig,
)

__all__ = [
    "ContentConfig",
    "LoggingConfig",
    "MainConfig",
    "ParserConfig",
    "PipelineConfig",
    "ValidationConfig",
    "apply_env_overrides",
    "load_config",
]
