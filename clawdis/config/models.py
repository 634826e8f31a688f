"""
Configuration data model for the Clawdis debug panel.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from clawdis.paths import (
    LEGACY_LOG_PATH,
    LOG_DIR,
    default_model_catalog_path,
    default_relay_root,
    get_config_folder,
    get_preferences_path,
)


# -----------------------------------------------------------------------------
# Default Values
# -----------------------------------------------------------------------------

DEFAULT_CATALOG_EXTENSION = "ts"
DEFAULT_NOTIFICATION_TITLE = "Clawdis"
DEFAULT_NOTIFICATION_BODY = "Test notification"
DEFAULT_RELAY_LOG_LIMIT = 20_000
DEFAULT_LOG_LEVEL = "INFO"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class ClawdisConfig:
    """
    Settings for the debug panel and its collaborators.

    Every path defaults to the conventional location so the panel runs with
    no config file at all.
    """

    config_path: Optional[Path] = None
    """File this config was loaded from, if any."""

    config_folder: Path = field(default_factory=get_config_folder)
    """Folder holding preferences and the default config file."""

    preferences_path: Optional[Path] = None
    """Persisted preference store. Defaults to <config_folder>/preferences.json."""

    log_dir: Path = LOG_DIR
    """Directory holding the dated rolling log files."""

    legacy_log_path: Path = LEGACY_LOG_PATH
    """Single-file log used when today's rolling log does not exist."""

    model_catalog_default: Path = field(default_factory=default_model_catalog_path)
    """Catalog file used until the user picks another one."""

    relay_root_default: Path = field(default_factory=default_relay_root)
    """Project root restored by the Reset button."""

    catalog_extension: str = DEFAULT_CATALOG_EXTENSION
    """File extension the catalog picker filters on (without the dot)."""

    notification_title: str = DEFAULT_NOTIFICATION_TITLE
    notification_body: str = DEFAULT_NOTIFICATION_BODY

    relay_log_limit: int = DEFAULT_RELAY_LOG_LIMIT
    """Characters of relay output kept in memory."""

    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        self.config_folder = Path(self.config_folder).expanduser()
        if self.preferences_path is None:
            self.preferences_path = get_preferences_path(self.config_folder)
        self.preferences_path = Path(self.preferences_path).expanduser()
        self.log_dir = Path(self.log_dir).expanduser()
        self.legacy_log_path = Path(self.legacy_log_path).expanduser()
        self.model_catalog_default = Path(self.model_catalog_default).expanduser()
        self.relay_root_default = Path(self.relay_root_default).expanduser()
        self.catalog_extension = str(self.catalog_extension or "").strip().lstrip(".")
        self.log_level = str(self.log_level or DEFAULT_LOG_LEVEL).strip().upper()

    def validate(self) -> None:
        if self.relay_log_limit <= 0:
            raise ValueError(f"relay_log_limit must be positive, got {self.relay_log_limit}")
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {self.log_level!r}"
            )
        if not self.notification_title.strip():
            raise ValueError("notification_title is required")
