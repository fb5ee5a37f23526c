"""Application configuration helpers."""

from __future__ import annotations

from .commit import CommitConfig, get_commit_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .object_storage import ObjectStorageConfig, get_object_storage_config
from .remote import RemoteConfig, get_remote_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheConfig",
    "CommitConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "ObjectStorageConfig",
    "RateLimit",
    "RemoteConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_commit_config",
    "get_database_config",
    "get_object_storage_config",
    "get_remote_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
