"""
Configuration management for the Clawdis debug panel.

This package provides the typed config model, its loader, and the
persisted preference store.
"""

from .models import ClawdisConfig
from .loader import default_config, load_config_from_file
from .preferences import (
    MODEL_CATALOG_PATH_KEY,
    MODEL_CATALOG_RELOAD_KEY,
    RELAY_PROJECT_ROOT_KEY,
    PreferenceError,
    PreferenceStore,
)

__all__ = [
    "ClawdisConfig",
    "default_config",
    "load_config_from_file",
    "MODEL_CATALOG_PATH_KEY",
    "MODEL_CATALOG_RELOAD_KEY",
    "RELAY_PROJECT_ROOT_KEY",
    "PreferenceError",
    "PreferenceStore",
]
