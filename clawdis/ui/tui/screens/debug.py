"""Debug settings screen for the Clawdis TUI."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widget import Widget
from textual.widgets import Button, Input, Static

from clawdis.logging import get_logger
from clawdis.ui.tui.presenters.debug import (
    EMPTY_LOG_PLACEHOLDER,
    catalog_choose_label,
    format_models_summary,
    format_relay_status,
    relay_log_display,
    reload_button_label,
)
from clawdis.ui.tui.screens.base import ManagedScreenMixin
from clawdis.ui.tui.screens.catalog_picker import CatalogFilePicker
from clawdis.ui.tui.state import DebugSettingsViewModel
from clawdis.ui.tui.widgets.fields import (
    action_button,
    labeled_row,
    set_button,
    set_input,
    set_static,
    set_visible,
    value_field,
)

logger = get_logger(__name__)

RELAY_ROOT_HINT = "Used for pnpm/node fallback and PATH population when launching the relay."
CATALOG_HINT = "Used by the Config tab model picker; point at a different build when debugging."


class DebugSettingsScreen(ManagedScreenMixin, Widget):
    """Diagnostics and developer actions backed by ``DebugSettingsViewModel``."""

    _RELOAD_WORKER_KEY = "debug-reload-models"
    _NOTIFY_WORKER_KEY = "debug-send-notification"
    _RELOAD_WORKER_TIMEOUT_SECONDS = 5.0
    _NOTIFY_WORKER_TIMEOUT_SECONDS = 10.0

    def __init__(self, view_model: Optional[DebugSettingsViewModel] = None, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._view_model = view_model
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def view_model(self) -> Optional[DebugSettingsViewModel]:
        if self._view_model is None:
            self._view_model = getattr(self.app, "view_model", None)
        return self._view_model

    def _catalog_extension(self) -> str:
        view_model = self.view_model
        return view_model.catalog_extension if view_model is not None else "ts"

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="debug-layout"):
            yield labeled_row("PID", value_field("debug-pid"))
            yield labeled_row("Log file", action_button("Open log", "debug-open-log"))
            yield labeled_row("Binary path", value_field("debug-bundle-path", classes="debug-value debug-hint"))
            yield labeled_row("Relay status", value_field("debug-relay-status"))

            with Vertical(classes="debug-section"):
                yield Static("Relay stdout/stderr", classes="debug-section-title")
                with VerticalScroll(id="debug-relay-log-scroll"):
                    yield Static(EMPTY_LOG_PLACEHOLDER, id="debug-relay-log", classes="debug-mono", markup=False)

            with Vertical(classes="debug-section"):
                yield Static("Clawdis project root", classes="debug-section-title")
                with Horizontal(classes="debug-row"):
                    yield Input(placeholder="Path to clawdis repo", id="debug-relay-root", classes="debug-mono")
                    yield action_button("Save", "debug-relay-root-save", variant="primary")
                    yield action_button("Reset", "debug-relay-root-reset")
                yield Static(RELAY_ROOT_HINT, classes="debug-hint")

            with Vertical(classes="debug-section"):
                yield Static("Model catalog", classes="debug-section-title")
                yield Static("", id="debug-catalog-path", classes="debug-mono debug-hint", markup=False)
                with Horizontal(classes="debug-row"):
                    yield action_button(catalog_choose_label(self._catalog_extension()), "debug-catalog-choose")
                    yield action_button(reload_button_label(False), "debug-catalog-reload")
                yield Static("", id="debug-models-summary", classes="debug-hint", markup=False)
                yield Static(CATALOG_HINT, classes="debug-hint debug-tertiary")

            yield action_button("Send Test Notification", "debug-send-notification")
            with Horizontal(classes="debug-row"):
                yield action_button("Restart app", "debug-restart")
                yield action_button("Reveal app in file browser", "debug-reveal")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def on_mount(self) -> None:
        view_model = self.view_model
        if view_model is None:
            logger.warning("Debug screen mounted without a view model")
            return
        self._unsubscribers.append(view_model.observe_relay(self._on_relay_changed))
        self._unsubscribers.append(view_model.subscribe(self._on_models_changed))
        set_input(self, "debug-relay-root", view_model.relay_root_input)
        self.refresh_all()
        self._start_reload()

    def on_show(self) -> None:
        self.refresh_all()

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._cancel_managed_workers(reason="debug-unmount")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def refresh_all(self) -> None:
        view_model = self.view_model
        if view_model is None:
            return
        set_static(self, "debug-pid", str(view_model.process_id))
        set_static(self, "debug-bundle-path", Text(str(view_model.bundle_path)))
        set_button(self, "debug-open-log", tooltip=str(view_model.log_path))
        self._refresh_relay()
        self._refresh_models()

    def _refresh_relay(self) -> None:
        view_model = self.view_model
        if view_model is None:
            return
        set_static(
            self,
            "debug-relay-status",
            format_relay_status(view_model.relay_status_label, view_model.relay_restart_count),
        )
        set_static(self, "debug-relay-log", Text(relay_log_display(view_model.relay_log)))
        try:
            self.query_one("#debug-relay-log-scroll", VerticalScroll).scroll_end(animate=False)
        except Exception:
            return

    def _refresh_models(self) -> None:
        view_model = self.view_model
        if view_model is None:
            return
        set_static(self, "debug-catalog-path", Text(view_model.model_catalog_path))
        summary = format_models_summary(view_model.models_count, view_model.models_error)
        set_static(self, "debug-models-summary", Text(summary or ""))
        set_visible(self, "debug-models-summary", summary is not None)
        set_button(
            self,
            "debug-catalog-reload",
            label=reload_button_label(view_model.models_loading),
            disabled=view_model.models_loading,
        )

    def _on_relay_changed(self, _manager: Any) -> None:
        self._run_on_ui_thread(self._refresh_relay)

    def _on_models_changed(self) -> None:
        self._run_on_ui_thread(self._refresh_models)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        view_model = self.view_model
        if view_model is None:
            return
        if button_id == "debug-open-log":
            view_model.open_log()
        elif button_id == "debug-relay-root-save":
            self._save_relay_root()
        elif button_id == "debug-relay-root-reset":
            value = view_model.reset_relay_root()
            set_input(self, "debug-relay-root", value)
        elif button_id == "debug-catalog-choose":
            self._choose_catalog_file()
        elif button_id == "debug-catalog-reload":
            self._start_reload()
        elif button_id == "debug-send-notification":
            self._start_managed_worker(
                worker_key=self._NOTIFY_WORKER_KEY,
                work_factory=view_model.send_test_notification,
                timeout_s=self._NOTIFY_WORKER_TIMEOUT_SECONDS,
            )
        elif button_id == "debug-restart":
            relaunch = getattr(self.app, "action_relaunch", None)
            if callable(relaunch):
                relaunch()
        elif button_id == "debug-reveal":
            view_model.reveal_app()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "debug-relay-root" or self.view_model is None:
            return
        self.view_model.set_relay_root_input(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "debug-relay-root" or self.view_model is None:
            return
        self.view_model.set_relay_root_input(event.value)
        self._save_relay_root()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _save_relay_root(self) -> None:
        view_model = self.view_model
        if view_model is None:
            return
        view_model.save_relay_root()

    def _choose_catalog_file(self) -> None:
        view_model = self.view_model
        if view_model is None:
            return
        picker = CatalogFilePicker(view_model.model_catalog_path, extension=view_model.catalog_extension)
        self.app.push_screen(picker, callback=self._on_catalog_chosen)

    def _on_catalog_chosen(self, path: Optional[Path]) -> None:
        view_model = self.view_model
        if view_model is None:
            return
        if view_model.choose_catalog_file(path):
            self._refresh_models()
            self._start_reload()

    def _start_reload(self) -> None:
        view_model = self.view_model
        if view_model is None:
            return
        self._start_managed_worker(
            worker_key=self._RELOAD_WORKER_KEY,
            work_factory=view_model.reload_models,
            timeout_s=self._RELOAD_WORKER_TIMEOUT_SECONDS,
        )

    def action_reload_models(self) -> None:
        self._start_reload()

    def action_open_log(self) -> None:
        if self.view_model is not None:
            self.view_model.open_log()
