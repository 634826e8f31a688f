"""
Persisted key/value preferences.

A small process-wide store for panel preferences that must survive
restarts. Values are written through to a JSON file on every change.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Mapping, Optional

from clawdis.logging import get_logger

logger = get_logger(__name__)

MODEL_CATALOG_PATH_KEY = "model_catalog_path"
MODEL_CATALOG_RELOAD_KEY = "model_catalog_reload_bump"
RELAY_PROJECT_ROOT_KEY = "relay_project_root"


class PreferenceError(RuntimeError):
    """Raised when preferences cannot be written to disk."""


class PreferenceStore:
    """JSON-file backed preference store with registered defaults."""

    def __init__(self, path: Path | str, defaults: Optional[Mapping[str, Any]] = None) -> None:
        self._path = Path(path).expanduser()
        self._defaults: dict[str, Any] = dict(defaults or {})
        self._lock = threading.RLock()
        self._values: dict[str, Any] = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            logger.warning("Could not read preferences %s: %s", self._path, exc)
            return {}
        try:
            data = json.loads(content) if content.strip() else {}
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring corrupt preferences file %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: root is not an object", self._path)
            return {}
        return data

    def _write(self, values: Mapping[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".preferences-",
                suffix=".json",
                dir=str(self._path.parent),
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(values, handle, indent=2, sort_keys=True)
                os.replace(tmp_name, self._path)
            except BaseException:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
                raise
        except OSError as exc:
            raise PreferenceError(f"Failed to save preferences to {self._path}: {exc}") from exc

    def register_defaults(self, defaults: Mapping[str, Any]) -> None:
        with self._lock:
            self._defaults.update(defaults)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key in self._values:
                return self._values[key]
            return self._defaults.get(key, default)

    def get_str(self, key: str, default: str = "") -> str:
        value = self.get(key, default)
        return default if value is None else str(value)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            registered = self._defaults.get(key, default)
            try:
                return int(registered)
            except (TypeError, ValueError):
                return default

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            updated = dict(self._values)
            updated[key] = value
            self._write(updated)
            self._values = updated

    def increment(self, key: str, by: int = 1) -> int:
        with self._lock:
            value = self.get_int(key) + by
            self.set(key, value)
            return value

    def remove(self, key: str) -> None:
        with self._lock:
            if key not in self._values:
                return
            updated = {k: v for k, v in self._values.items() if k != key}
            self._write(updated)
            self._values = updated

    def as_dict(self) -> dict[str, Any]:
        """Effective values: registered defaults overlaid with stored values."""
        with self._lock:
            merged = dict(self._defaults)
            merged.update(self._values)
            return merged
