"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, positive_int_env_var
from .errors import ConfigurationError, MissingConfigurationError
from .loader import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_PARTITIONS,
    LoaderConfig,
    WritePolicyKind,
    get_loader_config,
    parse_write_policy,
)
from .logging import configure_logging, level_for
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_MAX_WORKERS",
    "DEFAULT_PARTITIONS",
    "ConfigurationError",
    "DatabaseConfig",
    "LoaderConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "WritePolicyKind",
    "configure_logging",
    "get_database_config",
    "get_loader_config",
    "get_storage_config",
    "level_for",
    "optional_env_var",
    "parse_write_policy",
    "positive_int_env_var",
]
