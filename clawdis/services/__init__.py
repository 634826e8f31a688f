"""
Collaborators consumed by the debug panel.

The panel depends only on the narrow protocols below; the concrete classes
in this package are the default implementations wired by the app.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional, Protocol, Sequence

from .model_catalog import ModelCatalogError, ModelCatalogLoader, ModelEntry
from .notifications import NotificationSender
from .relay import RelayProcessManager, RelayStatus
from .system import SystemServices


class RelayManager(Protocol):
    @property
    def status_label(self) -> str: ...

    @property
    def restart_count(self) -> int: ...

    @property
    def log(self) -> str: ...

    def project_root_path(self) -> str: ...

    def set_project_root(self, path: str) -> None: ...

    def subscribe(self, observer: Callable[[Any], None]) -> Callable[[], None]: ...


class CatalogLoader(Protocol):
    async def load(self, path: str | Path) -> Sequence[Any]: ...


class Notifier(Protocol):
    async def send(self, title: str, body: str, sound: Optional[str] = None) -> bool: ...


class SystemEnvironment(Protocol):
    def process_id(self) -> int: ...

    def bundle_path(self) -> Path: ...

    def open_path(self, path: str | Path) -> bool: ...

    def reveal_in_file_browser(self, path: str | Path) -> bool: ...

    def spawn_and_wait(self, argv: Sequence[str]) -> Optional[int]: ...

    def relaunch_command(self, bundle: str | Path) -> Optional[list[str]]: ...


__all__ = [
    "CatalogLoader",
    "ModelCatalogError",
    "ModelCatalogLoader",
    "ModelEntry",
    "NotificationSender",
    "Notifier",
    "RelayManager",
    "RelayProcessManager",
    "RelayStatus",
    "SystemEnvironment",
    "SystemServices",
]
