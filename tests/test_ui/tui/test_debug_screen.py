from __future__ import annotations

import asyncio
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from rich.text import Text

from clawdis.ui.tui.screens.catalog_picker import CatalogFilePicker
from clawdis.ui.tui.screens.debug import DebugSettingsScreen


class _StaticWidget:
    def __init__(self) -> None:
        self.last: Any = ""
        self.display = True

    def update(self, value: Any) -> None:
        self.last = value

    @property
    def plain(self) -> str:
        return self.last.plain if isinstance(self.last, Text) else str(self.last)


class _InputWidget:
    def __init__(self) -> None:
        self.value = ""


class _ButtonWidget:
    def __init__(self) -> None:
        self.label: Any = ""
        self.disabled = False
        self.tooltip = None
        self.history: list[tuple[Any, bool]] = []

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if name in {"label", "disabled"} and "history" in self.__dict__:
            self.history.append((self.label, self.disabled))


class _ScrollWidget:
    def __init__(self) -> None:
        self.scrolled = 0

    def scroll_end(self, animate: bool = True) -> None:
        self.scrolled += 1


_STATIC_IDS = ("debug-pid", "debug-bundle-path", "debug-relay-status", "debug-relay-log",
               "debug-catalog-path", "debug-models-summary")
_BUTTON_IDS = ("debug-open-log", "debug-catalog-reload")


class _FakeApp:
    def __init__(self) -> None:
        self.pushed: list[tuple[Any, Any]] = []
        self.relaunches = 0

    def push_screen(self, screen, callback=None) -> None:
        self.pushed.append((screen, callback))

    def action_relaunch(self) -> None:
        self.relaunches += 1


class _TestableDebugScreen(DebugSettingsScreen):
    def __init__(self, app, view_model):
        super().__init__(view_model)
        self._test_app = app
        self.widgets: dict[str, Any] = {f"#{wid}": _StaticWidget() for wid in _STATIC_IDS}
        self.widgets.update({f"#{wid}": _ButtonWidget() for wid in _BUTTON_IDS})
        self.widgets["#debug-relay-root"] = _InputWidget()
        self.widgets["#debug-relay-log-scroll"] = _ScrollWidget()
        self.worker_names: list[str] = []

    @property
    def app(self):  # type: ignore[override]
        return self._test_app

    def query_one(self, selector, _cls=None):  # type: ignore[override]
        if selector in self.widgets:
            return self.widgets[selector]
        raise KeyError(selector)

    def run_worker(self, work, name=None, group=None, exclusive=False):  # type: ignore[override]
        self.worker_names.append(name)
        asyncio.run(work)
        return SimpleNamespace(name=name, cancel=lambda: None)


def _pressed(button_id: str) -> SimpleNamespace:
    return SimpleNamespace(button=SimpleNamespace(id=button_id))


def _input_event(value: str, input_id: str = "debug-relay-root") -> SimpleNamespace:
    return SimpleNamespace(input=SimpleNamespace(id=input_id), value=value)


@pytest.fixture
def app() -> _FakeApp:
    return _FakeApp()


@pytest.fixture
def screen(app, view_model_factory) -> _TestableDebugScreen:
    return _TestableDebugScreen(app, view_model_factory(path_exists=lambda _p: False))


def test_mount_renders_state_and_reloads_once(screen, fake_loader, fake_relay, debug_config) -> None:
    fake_relay.status_label = "Running"
    fake_relay.restart_count = 1

    screen.on_mount()

    w = screen.widgets
    assert w["#debug-pid"].last == "4242"
    assert w["#debug-bundle-path"].plain == "/Applications/Clawdis.app"
    assert w["#debug-relay-status"].plain == "Running\nRestarts: 1"
    assert w["#debug-relay-log"].plain == "—"
    assert w["#debug-relay-root"].value == fake_relay.root
    assert w["#debug-open-log"].tooltip == str(debug_config.legacy_log_path)
    assert screen.worker_names == ["debug-reload-models"]
    assert len(fake_loader.paths) == 1
    assert w["#debug-models-summary"].plain == "Loaded 3 models"
    assert w["#debug-models-summary"].display is True


def test_summary_hidden_before_first_reload(screen) -> None:
    screen.refresh_all()
    assert screen.widgets["#debug-models-summary"].display is False
    assert screen.widgets["#debug-catalog-reload"].label == "Reload models"


def test_reload_button_shows_loading_state(screen) -> None:
    screen.on_mount()
    history = screen.widgets["#debug-catalog-reload"].history
    assert ("Reloading…", True) in history
    assert history[-1] == ("Reload models", False)


def test_reload_error_replaces_count(screen, fake_loader) -> None:
    screen.on_mount()
    fake_loader.error = ValueError("No models found in /x.ts")

    screen.on_button_pressed(_pressed("debug-catalog-reload"))

    assert screen.widgets["#debug-models-summary"].plain == "No models found in /x.ts"
    assert screen.view_model.models_count is None


def test_relay_changes_refresh_status_and_log(screen, fake_relay) -> None:
    screen.on_mount()
    fake_relay.status_label = "Failed: exited 1"
    fake_relay.log = "[red]not markup[/red]\n"
    fake_relay.emit()

    assert screen.widgets["#debug-relay-status"].plain.startswith("Failed: exited 1")
    assert screen.widgets["#debug-relay-log"].plain == "[red]not markup[/red]\n"
    assert screen.widgets["#debug-relay-log-scroll"].scrolled >= 2


def test_submit_relay_root_saves_exact_value(screen, fake_relay) -> None:
    screen.on_mount()
    screen.on_input_changed(_input_event("/foo/ba"))
    assert fake_relay.set_calls == []

    screen.on_input_submitted(_input_event("/foo/bar"))

    assert fake_relay.set_calls == ["/foo/bar"]
    assert fake_relay.project_root_path() == "/foo/bar"


def test_save_button_saves_typed_value(screen, fake_relay) -> None:
    screen.on_mount()
    screen.on_input_changed(_input_event(" /typed "))
    screen.on_button_pressed(_pressed("debug-relay-root-save"))
    assert fake_relay.project_root_path() == " /typed "


def test_other_inputs_are_ignored(screen, fake_relay) -> None:
    screen.on_mount()
    screen.on_input_submitted(_input_event("/foo", input_id="something-else"))
    assert fake_relay.set_calls == []


def test_reset_relay_root(screen, fake_relay, debug_config) -> None:
    screen.on_mount()
    screen.on_input_changed(_input_event("/scratch"))

    screen.on_button_pressed(_pressed("debug-relay-root-reset"))

    expected = str(debug_config.relay_root_default)
    assert screen.widgets["#debug-relay-root"].value == expected
    assert fake_relay.project_root_path() == expected


def test_choose_catalog_file_reloads_once_with_new_path(screen, app, fake_loader, preferences) -> None:
    screen.on_mount()
    fake_loader.paths.clear()

    screen.on_button_pressed(_pressed("debug-catalog-choose"))
    picker, callback = app.pushed[-1]
    assert isinstance(picker, CatalogFilePicker)

    callback(Path("/picked/models.generated.ts"))

    assert fake_loader.paths == ["/picked/models.generated.ts"]
    assert preferences.get("model_catalog_path") == "/picked/models.generated.ts"
    assert screen.widgets["#debug-catalog-path"].plain == "/picked/models.generated.ts"


def test_cancelled_catalog_pick_does_not_reload(screen, app, fake_loader) -> None:
    screen.on_mount()
    fake_loader.paths.clear()
    screen.on_button_pressed(_pressed("debug-catalog-choose"))
    _picker, callback = app.pushed[-1]

    callback(None)

    assert fake_loader.paths == []


def test_action_buttons(screen, app, fake_system, fake_notifier) -> None:
    screen.on_mount()
    screen.on_button_pressed(_pressed("debug-open-log"))
    screen.on_button_pressed(_pressed("debug-reveal"))
    screen.on_button_pressed(_pressed("debug-send-notification"))
    screen.on_button_pressed(_pressed("debug-restart"))

    assert len(fake_system.opened) == 1
    assert fake_system.revealed == [Path("/Applications/Clawdis.app")]
    assert fake_notifier.calls == [("Clawdis", "Test notification", None)]
    assert app.relaunches == 1


def test_failed_notification_is_silent(screen, fake_notifier) -> None:
    fake_notifier.error = RuntimeError("no notification daemon")
    screen.on_mount()
    screen.on_button_pressed(_pressed("debug-send-notification"))
    assert screen.widgets["#debug-models-summary"].plain == "Loaded 3 models"


def test_unmount_unsubscribes(screen, fake_relay) -> None:
    screen.on_mount()
    assert len(fake_relay.observers) == 1

    screen.on_unmount()

    assert fake_relay.observers == []
    fake_relay.status_label = "Running"
    fake_relay.emit()
    assert "Running" not in screen.widgets["#debug-relay-status"].plain


def test_screen_falls_back_to_app_view_model(view_model_factory) -> None:
    vm = view_model_factory()
    app = SimpleNamespace(view_model=vm)
    screen = _TestableDebugScreen(app, None)
    assert screen.view_model is vm


def test_unwritable_preferences_do_not_break_mount_or_actions(app, view_model_factory, fake_loader, tmp_path) -> None:
    from clawdis.config.preferences import PreferenceStore

    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    vm = view_model_factory(preferences=PreferenceStore(blocker / "preferences.json"), path_exists=lambda _p: False)
    screen = _TestableDebugScreen(app, vm)

    screen.on_mount()
    assert len(fake_loader.paths) == 1
    assert screen.widgets["#debug-models-summary"].plain == "Loaded 3 models"

    screen.on_input_submitted(_input_event("/not/saved"))
    screen._on_catalog_chosen(Path("/picked/models.generated.ts"))

    assert len(fake_loader.paths) == 1
    assert screen.worker_names == ["debug-reload-models"]
