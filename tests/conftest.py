"""
Shared pytest fixtures for the Clawdis debug panel tests.

Provides an isolated configuration rooted in ``tmp_path`` and in-memory
fakes for the collaborators the debug view model depends on.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from clawdis.config.models import ClawdisConfig
from clawdis.config.preferences import PreferenceStore


# -----------------------------------------------------------------------------
# Collaborator fakes
# -----------------------------------------------------------------------------

class FakeRelay:
    """In-memory relay manager with manual change emission."""

    def __init__(self, root: str = "/Users/dev/Projects/clawdis") -> None:
        self.status_label = "Stopped"
        self.restart_count = 0
        self.log = ""
        self.root = root
        self.set_calls: list[str] = []
        self.observers: list[Callable[[Any], None]] = []

    def project_root_path(self) -> str:
        return self.root

    def set_project_root(self, path: str) -> None:
        self.set_calls.append(path)
        self.root = path
        self.emit()

    def subscribe(self, observer: Callable[[Any], None]) -> Callable[[], None]:
        self.observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self.observers:
                self.observers.remove(observer)

        return _unsubscribe

    def emit(self) -> None:
        for observer in list(self.observers):
            observer(self)


class FakeLoader:
    """Catalog loader returning a canned result, optionally held open by a gate."""

    def __init__(self, result: Optional[list[Any]] = None, error: Optional[BaseException] = None) -> None:
        self.result = list(result or [])
        self.error = error
        self.paths: list[str] = []
        self.gate: Optional[asyncio.Event] = None
        self.started: Optional[asyncio.Event] = None

    async def load(self, path: str | Path) -> list[Any]:
        self.paths.append(str(path))
        if self.started is not None:
            self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.result)


class FakeNotifier:
    def __init__(self, result: bool = True, error: Optional[BaseException] = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[str, str, Optional[str]]] = []

    async def send(self, title: str, body: str, sound: Optional[str] = None) -> bool:
        self.calls.append((title, body, sound))
        if self.error is not None:
            raise self.error
        return self.result


class FakeSystem:
    """Records every desktop-shell call instead of performing it."""

    def __init__(self, bundle: str | Path = "/Applications/Clawdis.app", pid: int = 4242) -> None:
        self.bundle = Path(bundle)
        self.pid = pid
        self.opened: list[Path] = []
        self.revealed: list[Path] = []
        self.spawned: list[list[str]] = []
        self.open_result = True
        self.spawn_result: Optional[int] = 0

    def process_id(self) -> int:
        return self.pid

    def bundle_path(self) -> Path:
        return self.bundle

    def open_path(self, path: str | Path) -> bool:
        self.opened.append(Path(path))
        return self.open_result

    def reveal_in_file_browser(self, path: str | Path) -> bool:
        self.revealed.append(Path(path))
        return True

    def spawn_and_wait(self, argv) -> Optional[int]:
        self.spawned.append(list(argv))
        return self.spawn_result

    def relaunch_command(self, bundle: str | Path) -> Optional[list[str]]:
        if Path(bundle).suffix == ".app":
            return ["/usr/bin/open", str(bundle)]
        return None

    def reexec_argv(self, argv=None) -> list[str]:
        return ["/usr/bin/python3", "-m", "clawdis", *(argv or [])]


# -----------------------------------------------------------------------------
# Configuration Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def debug_config(tmp_path: Path) -> ClawdisConfig:
    """
    Provide a config whose every path lives under tmp_path.
    """
    return ClawdisConfig(
        config_folder=tmp_path / "home" / ".clawdis",
        log_dir=tmp_path / "logs",
        legacy_log_path=tmp_path / "clawdis.log",
        model_catalog_default=tmp_path / "pi-mono" / "models.generated.ts",
        relay_root_default=tmp_path / "Projects" / "clawdis",
    )


@pytest.fixture
def preferences(debug_config: ClawdisConfig) -> PreferenceStore:
    return PreferenceStore(debug_config.preferences_path)


@pytest.fixture
def fake_relay() -> FakeRelay:
    return FakeRelay()


@pytest.fixture
def fake_loader() -> FakeLoader:
    return FakeLoader(result=["a", "b", "c"])


@pytest.fixture
def fake_notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def fake_system() -> FakeSystem:
    return FakeSystem()


@pytest.fixture
def view_model_factory(debug_config, preferences, fake_relay, fake_loader, fake_notifier, fake_system):
    """Factory building a DebugSettingsViewModel over the fakes; overrides by keyword."""
    from clawdis.ui.tui.state import DebugSettingsViewModel

    def _create(**overrides: Any) -> DebugSettingsViewModel:
        kwargs: dict[str, Any] = dict(
            config=debug_config,
            preferences=preferences,
            relay=fake_relay,
            loader=fake_loader,
            notifier=fake_notifier,
            system=fake_system,
        )
        kwargs.update(overrides)
        return DebugSettingsViewModel(**kwargs)

    return _create


@pytest.fixture(autouse=True)
def _restore_clawdis_logger():
    """Undo handler and propagation changes made by setup_logging or the app."""
    root = logging.getLogger("clawdis")
    handlers = list(root.handlers)
    level = root.level
    propagate = root.propagate
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate
