"""Application configuration helpers."""

from __future__ import annotations

from .actor import ACTING_USER_ENV, get_acting_user
from .env import optional_int_env, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .imports import ImportConfig, get_import_config
from .logging import configure_logging
from .storage import get_data_dir, get_database_uri

__all__ = [
    "ACTING_USER_ENV",
    "ConfigurationError",
    "ImportConfig",
    "MissingConfigurationError",
    "configure_logging",
    "get_acting_user",
    "get_data_dir",
    "get_database_uri",
    "get_import_config",
    "optional_int_env",
    "require_env_vars",
]
