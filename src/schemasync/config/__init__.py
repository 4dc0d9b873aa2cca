"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_vars, split_env_list
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging, resolve_log_level
from .reconciliation import (
    ReconciliationConfig,
    get_reconciliation_config,
    require_external_source_name,
)
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "ReconciliationConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_reconciliation_config",
    "get_storage_config",
    "require_env_vars",
    "require_external_source_name",
    "resolve_log_level",
    "split_env_list",
]
