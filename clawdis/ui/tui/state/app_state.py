"""Global TUI application state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

Severity = Literal["info", "warning", "error"]


@dataclass(frozen=True)
class Notification:
    """Single UI notification event."""

    message: str
    severity: Severity = "info"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class AppStateSnapshot:
    """Immutable snapshot of app-wide UI state."""

    relaunch_requested: bool
    notifications: tuple[Notification, ...]


class AppState:
    """Typed mutable container for app-wide UI state."""

    def __init__(self) -> None:
        self._relaunch_requested = False
        self._notifications: list[Notification] = []

    @property
    def relaunch_requested(self) -> bool:
        return self._relaunch_requested

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return tuple(self._notifications)

    def snapshot(self) -> AppStateSnapshot:
        """Return an immutable snapshot of current app UI state."""
        return AppStateSnapshot(
            relaunch_requested=self._relaunch_requested,
            notifications=tuple(self._notifications),
        )

    def request_relaunch(self) -> None:
        self._relaunch_requested = True

    def push_notification(self, message: str, *, severity: Severity = "info") -> Notification:
        notification = Notification(message=message, severity=severity)
        self._notifications.append(notification)
        return notification

    def clear_notifications(self) -> None:
        self._notifications.clear()

    def drain_notifications(self) -> list[Notification]:
        items = list(self._notifications)
        self._notifications.clear()
        return items
