"""Observable relay process state shared between the supervisor and the UI."""

from __future__ import annotations

import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from clawdis.config.preferences import RELAY_PROJECT_ROOT_KEY, PreferenceStore
from clawdis.logging import get_logger

logger = get_logger(__name__)

RelayObserver = Callable[["RelayProcessManager"], None]


class RelayStatus(Enum):
    """Lifecycle states of the relay subprocess."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    RESTARTING = "restarting"
    FAILED = "failed"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    RelayStatus.STOPPED: "Stopped",
    RelayStatus.STARTING: "Starting…",
    RelayStatus.RUNNING: "Running",
    RelayStatus.RESTARTING: "Restarting…",
    RelayStatus.FAILED: "Failed",
}


class RelayProcessManager:
    """
    Holds relay status, restart count, rolling output, and the project root.

    The supervisor mutates this object from its own threads; observers are
    called synchronously after every change and must marshal to their own
    event loop if they touch UI state.
    """

    def __init__(
        self,
        preferences: PreferenceStore,
        *,
        default_root: str | Path,
        log_limit: int = 20_000,
    ) -> None:
        self._preferences = preferences
        self._default_root = str(default_root)
        self._log_limit = max(1, int(log_limit))
        self._lock = threading.RLock()
        self._status = RelayStatus.STOPPED
        self._failure_reason: Optional[str] = None
        self._restart_count = 0
        self._log = ""
        self._observers: list[RelayObserver] = []

    # ------------------------------------------------------------------
    # Observed state
    # ------------------------------------------------------------------

    @property
    def status(self) -> RelayStatus:
        return self._status

    @property
    def failure_reason(self) -> Optional[str]:
        return self._failure_reason

    @property
    def status_label(self) -> str:
        if self._status is RelayStatus.FAILED and self._failure_reason:
            return f"{self._status.label}: {self._failure_reason}"
        return self._status.label

    @property
    def restart_count(self) -> int:
        return self._restart_count

    @property
    def log(self) -> str:
        return self._log

    def project_root_path(self) -> str:
        stored = self._preferences.get(RELAY_PROJECT_ROOT_KEY)
        if stored is None:
            return self._default_root
        return str(stored)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_project_root(self, path: str) -> None:
        """Store the project root exactly as given."""
        with self._lock:
            self._preferences.set(RELAY_PROJECT_ROOT_KEY, path)
        logger.info("Relay project root set to %s", path)
        self._notify()

    def set_status(self, status: RelayStatus, reason: Optional[str] = None) -> None:
        with self._lock:
            self._status = status
            self._failure_reason = reason if status is RelayStatus.FAILED else None
        self._notify()

    def record_restart(self) -> int:
        with self._lock:
            self._restart_count += 1
            count = self._restart_count
        self._notify()
        return count

    def append_log(self, text: str) -> None:
        if not text:
            return
        with self._lock:
            combined = self._log + text
            if len(combined) > self._log_limit:
                combined = combined[-self._log_limit:]
            self._log = combined
        self._notify()

    def clear_log(self) -> None:
        with self._lock:
            self._log = ""
        self._notify()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, observer: RelayObserver) -> Callable[[], None]:
        """Register an observer; returns a callable that unsubscribes it."""
        with self._lock:
            self._observers.append(observer)

        def _unsubscribe() -> None:
            with self._lock:
                try:
                    self._observers.remove(observer)
                except ValueError:
                    return

        return _unsubscribe

    def _notify(self) -> None:
        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            try:
                observer(self)
            except Exception:
                logger.exception("Relay observer %r failed", observer)
