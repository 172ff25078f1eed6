"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_flag, optional_float, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .index import IndexConfig, get_index_config
from .logging import configure_logging
from .storage import DatabaseConfig, default_data_dir, get_database_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "IndexConfig",
    "MissingConfigurationError",
    "configure_logging",
    "default_data_dir",
    "get_database_config",
    "get_index_config",
    "optional_flag",
    "optional_float",
    "require_env_var",
    "require_env_vars",
]
