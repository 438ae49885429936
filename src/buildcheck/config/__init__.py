"""Configuration management for buildcheck."""

from .parser import (
    BuildCheckConfig,
    find_config_file,
    get_electron_version,
    load_app_metadata,
    load_config,
    load_environment,
)

__all__ = [
    "BuildCheckConfig",
    "load_config",
    "load_environment",
    "find_config_file",
    "load_app_metadata",
    "get_electron_version",
]
