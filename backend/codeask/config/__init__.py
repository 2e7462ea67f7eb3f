"""Configuration management for codeask."""

from .manager import (
    CODE_EXTENSIONS,
    CONFIG_FILE,
    DEFAULT_CONFIG,
    DEFAULT_MODELS,
    KEY_FILES,
    load_config,
    validate_config,
)

__all__ = [
    "CODE_EXTENSIONS",
    "CONFIG_FILE",
    "DEFAULT_CONFIG",
    "DEFAULT_MODELS",
    "KEY_FILES",
    "load_config",
    "validate_config",
]
