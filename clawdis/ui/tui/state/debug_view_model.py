"""Debug settings view model and immutable state snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import os
from pathlib import Path
from typing import Callable, Optional

from clawdis.config.models import ClawdisConfig
from clawdis.config.preferences import (
    MODEL_CATALOG_PATH_KEY,
    MODEL_CATALOG_RELOAD_KEY,
    PreferenceError,
    PreferenceStore,
)
from clawdis.logging import get_logger
from clawdis.paths import resolve_log_path
from clawdis.services import (
    CatalogLoader,
    ModelCatalogLoader,
    NotificationSender,
    Notifier,
    RelayManager,
    RelayProcessManager,
    SystemEnvironment,
    SystemServices,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class DebugPanelSnapshot:
    """Immutable snapshot of everything the debug panel displays."""

    process_id: int
    log_path: str
    bundle_path: str
    relay_status: str
    relay_restart_count: int
    relay_log: str
    relay_root_input: str
    model_catalog_path: str
    reload_bump: int
    models_count: Optional[int]
    models_error: Optional[str]
    models_loading: bool


class DebugSettingsViewModel:
    """
    State and actions behind the debug settings panel.

    Holds no business logic of its own: every action forwards to one of the
    collaborators. Only catalog reload failures are kept for display; all
    other actions are best-effort.
    """

    def __init__(
        self,
        *,
        config: ClawdisConfig,
        preferences: PreferenceStore,
        relay: RelayManager,
        loader: CatalogLoader,
        notifier: Notifier,
        system: SystemEnvironment,
        today: Callable[[], date] = date.today,
        path_exists: Callable[[str | Path], bool] = os.path.exists,
    ) -> None:
        self._config = config
        self._preferences = preferences
        self._relay = relay
        self._loader = loader
        self._notifier = notifier
        self._system = system
        self._today = today
        self._path_exists = path_exists

        self._preferences.register_defaults({
            MODEL_CATALOG_PATH_KEY: str(config.model_catalog_default),
            MODEL_CATALOG_RELOAD_KEY: 0,
        })

        self._process_id = system.process_id()
        self._bundle_path = system.bundle_path()
        self._relay_root_input = relay.project_root_path()
        self._models_count: Optional[int] = None
        self._models_error: Optional[str] = None
        self._models_loading = False
        self._listeners: list[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Displayed state
    # ------------------------------------------------------------------

    @property
    def process_id(self) -> int:
        return self._process_id

    @property
    def bundle_path(self) -> Path:
        return self._bundle_path

    @property
    def log_path(self) -> Path:
        """Today's rolling log when present, else the legacy log file."""
        return resolve_log_path(
            self._today(),
            exists=self._path_exists,
            log_dir=self._config.log_dir,
            legacy_path=self._config.legacy_log_path,
        )

    @property
    def relay_status_label(self) -> str:
        return self._relay.status_label

    @property
    def relay_restart_count(self) -> int:
        return self._relay.restart_count

    @property
    def relay_log(self) -> str:
        return self._relay.log

    @property
    def relay_root_input(self) -> str:
        return self._relay_root_input

    @property
    def model_catalog_path(self) -> str:
        return self._preferences.get_str(MODEL_CATALOG_PATH_KEY, str(self._config.model_catalog_default))

    @property
    def reload_bump(self) -> int:
        return self._preferences.get_int(MODEL_CATALOG_RELOAD_KEY)

    @property
    def models_count(self) -> Optional[int]:
        return self._models_count

    @property
    def models_error(self) -> Optional[str]:
        return self._models_error

    @property
    def models_loading(self) -> bool:
        return self._models_loading

    @property
    def catalog_extension(self) -> str:
        return self._config.catalog_extension

    def snapshot(self) -> DebugPanelSnapshot:
        """Return an immutable copy of the current panel state."""
        return DebugPanelSnapshot(
            process_id=self._process_id,
            log_path=str(self.log_path),
            bundle_path=str(self._bundle_path),
            relay_status=self.relay_status_label,
            relay_restart_count=self.relay_restart_count,
            relay_log=self.relay_log,
            relay_root_input=self._relay_root_input,
            model_catalog_path=self.model_catalog_path,
            reload_bump=self.reload_bump,
            models_count=self._models_count,
            models_error=self._models_error,
            models_loading=self._models_loading,
        )

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Call ``listener`` whenever model reload state changes."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def observe_relay(self, observer: Callable[[object], None]) -> Callable[[], None]:
        """Forward relay manager change notifications to ``observer``."""
        return self._relay.subscribe(observer)

    def _changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Debug panel listener failed")

    # ------------------------------------------------------------------
    # Log and app actions
    # ------------------------------------------------------------------

    def open_log(self) -> bool:
        path = self.log_path
        opened = self._system.open_path(path)
        if not opened:
            logger.debug("Could not open log file %s", path)
        return opened

    def reveal_app(self) -> bool:
        return self._system.reveal_in_file_browser(self._bundle_path)

    def relaunch(self) -> bool:
        """
        Start a new copy of the app bundle and wait for the launcher.

        Returns False when the bundle has no launcher, in which case the
        caller restarts in place. Launcher failures are ignored. Terminating
        the current process is left to the caller.
        """
        command = self._system.relaunch_command(self._bundle_path)
        if command is None:
            return False
        status = self._system.spawn_and_wait(command)
        if status is None:
            logger.debug("Relaunch of %s could not be spawned", self._bundle_path)
        return True

    async def send_test_notification(self) -> None:
        try:
            await self._notifier.send(
                self._config.notification_title,
                self._config.notification_body,
                sound=None,
            )
        except Exception:
            logger.debug("Test notification failed", exc_info=True)

    # ------------------------------------------------------------------
    # Relay project root
    # ------------------------------------------------------------------

    def set_relay_root_input(self, text: str) -> None:
        self._relay_root_input = text

    def save_relay_root(self) -> bool:
        try:
            self._relay.set_project_root(self._relay_root_input)
        except PreferenceError as exc:
            logger.warning("Relay project root not saved: %s", exc)
            return False
        return True

    def reset_relay_root(self) -> str:
        self._relay_root_input = str(self._config.relay_root_default)
        self.save_relay_root()
        return self._relay_root_input

    # ------------------------------------------------------------------
    # Model catalog
    # ------------------------------------------------------------------

    def _bump_reload_counter(self) -> None:
        try:
            self._preferences.increment(MODEL_CATALOG_RELOAD_KEY)
        except PreferenceError as exc:
            logger.warning("Model catalog reload counter not saved: %s", exc)

    def choose_catalog_file(self, path: Optional[str | Path]) -> bool:
        """
        Persist a newly picked catalog file.

        Returns True when the selection was confirmed; the caller is expected
        to follow up with exactly one ``reload_models()``.
        """
        if path is None:
            return False
        try:
            self._preferences.set(MODEL_CATALOG_PATH_KEY, str(path))
        except PreferenceError as exc:
            logger.warning("Model catalog path not saved: %s", exc)
            return False
        self._bump_reload_counter()
        self._changed()
        return True

    async def reload_models(self) -> bool:
        """
        Reload the model catalog once.

        Returns False without touching any state when a reload is already in
        flight.
        """
        if self._models_loading:
            return False
        self._models_loading = True
        self._models_error = None
        try:
            self._bump_reload_counter()
            self._changed()
            path = self.model_catalog_path
            try:
                loaded = await self._loader.load(path)
            except Exception as exc:
                self._models_count = None
                self._models_error = str(exc).strip() or exc.__class__.__name__
                logger.info("Model catalog reload failed: %s", self._models_error)
            else:
                self._models_count = len(loaded)
                self._models_error = None
                logger.debug("Model catalog reloaded: %d models from %s", self._models_count, path)
        finally:
            self._models_loading = False
        self._changed()
        return True


def build_view_model(
    config: ClawdisConfig,
    *,
    system: Optional[SystemEnvironment] = None,
    preferences: Optional[PreferenceStore] = None,
    relay: Optional[RelayManager] = None,
) -> DebugSettingsViewModel:
    """Wire the debug view model to the default collaborators."""
    prefs = preferences or PreferenceStore(config.preferences_path)
    relay_manager = relay or RelayProcessManager(
        prefs,
        default_root=config.relay_root_default,
        log_limit=config.relay_log_limit,
    )
    return DebugSettingsViewModel(
        config=config,
        preferences=prefs,
        relay=relay_manager,
        loader=ModelCatalogLoader(),
        notifier=NotificationSender(),
        system=system or SystemServices(),
    )
