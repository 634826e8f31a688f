"""
Main Textual application for the Clawdis debug panel.

Hosts the debug settings screen, owns the managed worker registry used by
screens, and handles in-place relaunch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
import sys
import threading
import time
import traceback
from typing import Any, Callable, Literal, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from clawdis.config.models import ClawdisConfig
from clawdis.logging import exception_exc_info, format_exception_summary, get_logger
from clawdis.services import SystemServices
from clawdis.ui.tui.state import AppState, DebugSettingsViewModel, build_view_model

logger = get_logger(__name__)

RELAUNCH_EXIT_CODE = 75


@dataclass
class _ManagedWorker:
    """Lifecycle metadata for an app-managed worker object."""

    owner: str
    key: str
    worker: Any
    timeout_s: float
    started_at: float = field(default_factory=time.monotonic)


class ClawdisApp(App):
    """
    Clawdis debug panel TUI application.

    A single screen of diagnostics and developer actions.
    """

    TITLE = "Clawdis"
    SUB_TITLE = "Debug"

    CSS_PATH = "styles/debug.tcss"

    _NOTIFY_TIMEOUT_SECONDS = 5.0
    _NOTIFY_ERROR_TIMEOUT_SECONDS = 10.0
    _DEFAULT_WORKER_TIMEOUT_SECONDS = 3.0
    _UI_ERROR_SUMMARY_MAX_LENGTH = 180

    BINDINGS = [
        Binding("ctrl+r", "reload_models", "Reload models", show=True),
        Binding("ctrl+o", "open_log", "Open log", show=True),
        Binding("ctrl+q", "quit", "Quit", show=True),
        Binding("ctrl+c", "quit", "Quit", show=False),
    ]

    def __init__(
        self,
        config: ClawdisConfig,
        *args,
        view_model: Optional[DebugSettingsViewModel] = None,
        system: Optional[SystemServices] = None,
        **kwargs,
    ) -> None:
        """
        Initialize the Clawdis TUI application.

        Args:
            config: Clawdis configuration
            view_model: Pre-built view model (defaults wire real collaborators)
            system: Operating environment services
        """
        super().__init__(*args, **kwargs)
        self.config = config
        self.system = system or SystemServices()
        self.view_model = view_model or build_view_model(config, system=self.system)
        self.ui_state = AppState()
        self._ui_thread_id: int = threading.get_ident()
        self._managed_workers: dict[tuple[str, str], _ManagedWorker] = {}
        self._managed_workers_lock = threading.RLock()
        self._recovering_ui_error: bool = False
        self._ui_error_count: int = 0

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Header(show_clock=True, icon="")

        from clawdis.ui.tui.screens.debug import DebugSettingsScreen
        yield DebugSettingsScreen(self.view_model, id="debug-screen")

        yield Footer()

    def on_mount(self) -> None:
        self._ui_thread_id = threading.get_ident()
        self._setup_tui_logging()
        logger.info("Clawdis debug panel mounted (pid %s)", self.view_model.process_id)

    def _setup_tui_logging(self) -> None:
        """Detach console handlers so log lines do not draw over the TUI."""
        root_logger = logging.getLogger("clawdis")
        root_logger.propagate = False
        streams_to_remove = {sys.stdout, sys.stderr, sys.__stdout__, sys.__stderr__}
        for handler in list(root_logger.handlers):
            if isinstance(handler, logging.StreamHandler) and getattr(handler, "stream", None) in streams_to_remove:
                root_logger.removeHandler(handler)

    def run_on_ui_thread(self, callback: Callable[[], None]) -> None:
        """Run a callback on the app UI thread from either same or worker thread."""
        if threading.get_ident() == self._ui_thread_id:
            callback()
            return
        try:
            self.call_from_thread(callback)
        except RuntimeError as exc:
            # Textual raises this when already on the app thread.
            if "must run in a different thread" in str(exc):
                callback()
                return
            raise

    # -------------------------------------------------------------------------
    # Managed workers
    # -------------------------------------------------------------------------

    def _normalize_worker_token(self, value: str, *, fallback: str) -> str:
        normalized = str(value or "").strip()
        return normalized or fallback

    def _normalize_worker_timeout(self, timeout_s: Optional[float]) -> float:
        try:
            parsed = (
                self._DEFAULT_WORKER_TIMEOUT_SECONDS
                if timeout_s is None
                else float(timeout_s)
            )
        except (TypeError, ValueError):
            parsed = self._DEFAULT_WORKER_TIMEOUT_SECONDS
        return max(0.05, parsed)

    def register_managed_worker(
        self,
        *,
        owner: str,
        key: str,
        worker: Any,
        timeout_s: Optional[float] = None,
    ) -> None:
        """Register a worker object for lifecycle management."""
        owner_token = self._normalize_worker_token(owner, fallback="app")
        key_token = self._normalize_worker_token(key, fallback="worker")
        record = _ManagedWorker(
            owner=owner_token,
            key=key_token,
            worker=worker,
            timeout_s=self._normalize_worker_timeout(timeout_s),
        )
        with self._managed_workers_lock:
            self._managed_workers[(owner_token, key_token)] = record

    def managed_worker(self, *, owner: str, key: str) -> Any:
        owner_token = self._normalize_worker_token(owner, fallback="app")
        key_token = self._normalize_worker_token(key, fallback="worker")
        with self._managed_workers_lock:
            record = self._managed_workers.get((owner_token, key_token))
        return None if record is None else record.worker

    def start_managed_worker(
        self,
        *,
        owner: str,
        key: str,
        start: Callable[[], Any],
        timeout_s: Optional[float] = None,
        cancel_existing: bool = True,
    ) -> Any:
        """Start and register a worker with standardized cancellation semantics."""
        owner_token = self._normalize_worker_token(owner, fallback="app")
        key_token = self._normalize_worker_token(key, fallback="worker")
        timeout_value = self._normalize_worker_timeout(timeout_s)
        if cancel_existing:
            self.cancel_managed_worker(
                owner=owner_token,
                key=key_token,
                reason="replaced",
            )
        worker = start()
        if worker is None:
            return None
        self.register_managed_worker(
            owner=owner_token,
            key=key_token,
            worker=worker,
            timeout_s=timeout_value,
        )
        return worker

    def cancel_managed_worker(
        self,
        *,
        owner: str,
        key: str,
        reason: str = "",
    ) -> bool:
        """Cancel a managed worker; async workers finish cooperatively."""
        owner_token = self._normalize_worker_token(owner, fallback="app")
        key_token = self._normalize_worker_token(key, fallback="worker")
        with self._managed_workers_lock:
            record = self._managed_workers.pop((owner_token, key_token), None)
        if record is None:
            return True
        detail = f" ({reason})" if reason else ""
        cancel_fn = getattr(record.worker, "cancel", None)
        if not callable(cancel_fn):
            return False
        try:
            cancel_fn()
        except Exception:
            logger.exception(
                "Failed to cancel worker %s:%s%s",
                owner_token,
                key_token,
                detail,
            )
            return False
        return True

    def cancel_managed_workers_for_owner(
        self,
        *,
        owner: str,
        reason: str = "",
    ) -> dict[str, bool]:
        """Cancel all workers registered for a screen/owner."""
        owner_token = self._normalize_worker_token(owner, fallback="app")
        with self._managed_workers_lock:
            keys = [key for (worker_owner, key) in self._managed_workers if worker_owner == owner_token]
        return {
            key: self.cancel_managed_worker(owner=owner_token, key=key, reason=reason)
            for key in keys
        }

    def shutdown_managed_workers(self, *, reason: str = "") -> dict[str, bool]:
        """Cancel all tracked workers during app shutdown."""
        with self._managed_workers_lock:
            worker_keys = list(self._managed_workers.keys())
        results: dict[str, bool] = {}
        for owner_token, key_token in worker_keys:
            results[f"{owner_token}:{key_token}"] = self.cancel_managed_worker(
                owner=owner_token,
                key=key_token,
                reason=reason,
            )
        return results

    # -------------------------------------------------------------------------
    # UI Error Boundary
    # -------------------------------------------------------------------------

    def _is_recoverable_ui_exception(self, error: Exception) -> bool:
        """Return True when an exception originated from a TUI screen module."""
        tb = error.__traceback__
        if tb is None:
            return False
        try:
            frames = traceback.extract_tb(tb)
        except Exception:
            return False
        for frame in frames:
            filename = str(getattr(frame, "filename", "")).replace("\\", "/").lower()
            if "clawdis/ui/tui/screens/" in filename:
                return True
        return False

    def _present_recoverable_ui_error(self, error: Exception) -> None:
        """Log and surface a screen error without tearing the app down."""
        self._ui_error_count += 1
        summary = format_exception_summary(
            error,
            max_length=self._UI_ERROR_SUMMARY_MAX_LENGTH,
        )
        logger.error(
            "Recoverable UI screen exception #%s",
            self._ui_error_count,
            exc_info=exception_exc_info(error),
        )
        try:
            self.notify_event(
                f"Recovered from screen error #{self._ui_error_count}: {summary}",
                severity="error",
            )
        except Exception:
            logger.exception("Failed to emit recoverable UI error notification.")

    def _handle_exception(self, error: Exception) -> None:
        """Handle unhandled exceptions with a screen-level recovery boundary."""
        if self._recovering_ui_error:
            super()._handle_exception(error)
            return
        if self._is_recoverable_ui_exception(error):
            self._recovering_ui_error = True
            try:
                self._present_recoverable_ui_error(error)
            finally:
                self._recovering_ui_error = False
            return
        super()._handle_exception(error)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def _debug_screen(self) -> Any:
        try:
            return self.query_one("#debug-screen")
        except Exception:
            return None

    def action_reload_models(self) -> None:
        screen = self._debug_screen()
        if screen is not None:
            screen.action_reload_models()

    def action_open_log(self) -> None:
        self.view_model.open_log()

    def action_relaunch(self) -> None:
        """Start a new copy of the app, then exit this one."""
        logger.info("Relaunch requested")
        launched_bundle = self.view_model.relaunch()
        self.shutdown_managed_workers(reason="app-relaunch")
        if launched_bundle:
            self.exit()
            return
        self.ui_state.request_relaunch()
        self.exit(return_code=RELAUNCH_EXIT_CODE)

    def action_quit(self) -> None:
        logger.info("User requested quit")
        self.shutdown_managed_workers(reason="app-quit")
        self.exit()

    def notify_event(
        self,
        message: str,
        *,
        severity: Literal["info", "warning", "error"] = "info",
        timeout: Optional[float] = None,
    ) -> None:
        """Emit and record a UI notification event."""
        effective_timeout = timeout
        if effective_timeout is None:
            effective_timeout = (
                self._NOTIFY_ERROR_TIMEOUT_SECONDS
                if severity == "error"
                else self._NOTIFY_TIMEOUT_SECONDS
            )
        self.ui_state.push_notification(message, severity=severity)
        self.notify(
            message,
            severity=severity,
            timeout=effective_timeout,
        )


def _reexec(system: SystemServices) -> int:
    argv = system.reexec_argv()
    logger.info("Restarting in place: %s", " ".join(argv))
    try:
        os.execv(argv[0], argv)
    except OSError as exc:
        logger.debug("Relaunch exec failed: %s", exc)
    return 0


def run_tui(config: ClawdisConfig, *, view_model: Optional[DebugSettingsViewModel] = None) -> int:
    """
    Run the TUI application.

    Args:
        config: Clawdis configuration
        view_model: Optional pre-built view model

    Returns:
        Exit code (0 for success)
    """
    app = ClawdisApp(config, view_model=view_model)
    app.run()
    if app.ui_state.relaunch_requested:
        return _reexec(app.system)
    return app.return_code or 0
