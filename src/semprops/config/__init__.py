"""Application configuration helpers."""

from __future__ import annotations

from .api import ApiConfig, Backend, ClientConfig, get_api_config, get_client_config
from .env import env_flag, env_list, optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ApiConfig",
    "Backend",
    "ClientConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_list",
    "get_api_config",
    "get_client_config",
    "get_database_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
