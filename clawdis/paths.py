"""
Well-known path helpers for Clawdis.

Covers the gateway log file naming convention and the default locations of
the companion project, model catalog, and local preferences.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Callable, Optional


CONFIG_FOLDER_ENV_VAR = "CLAWDIS_CONFIG_FOLDER"

LOG_DIR = Path("/tmp/clawdis")
LEGACY_LOG_PATH = Path("/tmp/clawdis.log")
LOG_FILE_PREFIX = "clawdis"

RELAY_ROOT_RELATIVE = Path("Projects") / "clawdis"
MODEL_CATALOG_RELATIVE = Path("Projects") / "pi-mono" / "packages" / "ai" / "src" / "models.generated.ts"


def rolling_log_path(today: Optional[date] = None, log_dir: str | Path = LOG_DIR) -> Path:
    """Return the dated rolling log path, ``<log_dir>/clawdis-YYYY-MM-DD.log``."""
    day = today or date.today()
    return Path(log_dir) / f"{LOG_FILE_PREFIX}-{day.isoformat()}.log"


def resolve_log_path(
    today: Optional[date] = None,
    *,
    exists: Callable[[str | Path], bool] = os.path.exists,
    log_dir: str | Path = LOG_DIR,
    legacy_path: str | Path = LEGACY_LOG_PATH,
) -> Path:
    """
    Resolve the log file to show for today.

    The rolling file wins when it exists at call time; otherwise the legacy
    single-file path is returned.
    """
    rolling = rolling_log_path(today, log_dir)
    if exists(rolling):
        return rolling
    return Path(legacy_path)


def _home(home: Optional[str | Path]) -> Path:
    return Path(home).expanduser() if home is not None else Path.home()


def default_relay_root(home: Optional[str | Path] = None) -> Path:
    """Return ``<home>/Projects/clawdis``."""
    return _home(home) / RELAY_ROOT_RELATIVE


def default_model_catalog_path(home: Optional[str | Path] = None) -> Path:
    """Return the default location of ``models.generated.ts``."""
    return _home(home) / MODEL_CATALOG_RELATIVE


def get_config_folder(override: Optional[str | Path] = None) -> Path:
    """
    Resolve the Clawdis config folder.

    Priority:
    1. Explicit override argument
    2. CLAWDIS_CONFIG_FOLDER environment variable
    3. <home>/.clawdis
    """
    candidate: str | Path | None = override
    if candidate is None:
        candidate = os.environ.get(CONFIG_FOLDER_ENV_VAR)
    if candidate is None:
        candidate = Path.home() / ".clawdis"
    return Path(candidate).expanduser().resolve()


def get_preferences_path(config_folder: Optional[str | Path] = None) -> Path:
    """Return the persisted preferences file path."""
    return get_config_folder(config_folder) / "preferences.json"


def get_default_config_path(config_folder: Optional[str | Path] = None) -> Path:
    """Return the config file looked up when ``--config`` is not given."""
    return get_config_folder(config_folder) / "config.yaml"
