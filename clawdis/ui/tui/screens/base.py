"""Shared base screen mixin for worker lifecycle and UI-thread dispatch.

Concrete screen widgets register and cancel workers through the app's
managed lifecycle API without duplicating the delegation boilerplate.
"""

from __future__ import annotations

from typing import Any, Callable

from clawdis.logging import get_logger

logger = get_logger(__name__)


class ManagedScreenMixin:
    """Mixin providing worker lifecycle delegation for screen widgets.

    Concrete screens should inherit from both ``Widget`` and this mixin:

        class MyScreen(ManagedScreenMixin, Widget):
            ...

    The mixin assumes the host object has ``self.app`` and
    ``self.run_worker`` (provided by ``Widget``).
    """

    def _worker_owner_token(self) -> str:
        """Return a stable owner identifier for this screen."""
        widget_id = str(getattr(self, "id", "") or "").strip()
        if widget_id:
            return widget_id
        return self.__class__.__name__

    def _start_managed_worker(
        self,
        *,
        worker_key: str,
        work_factory: Callable[[], Any],
        timeout_s: float,
        replace: bool = False,
    ) -> Any:
        """Start an async worker registered with the app lifecycle.

        Falls back to an unmanaged ``run_worker`` when the app does not
        expose the managed API.

        Args:
            worker_key: Key for this worker (unique per owner).
            work_factory: Callable that returns a coroutine to run.
            timeout_s: Timeout for join on cancellation.
            replace: Cancel a running worker with the same key first.
        """
        app_obj = getattr(self, "app", None)
        starter = getattr(app_obj, "start_managed_worker", None)
        run_worker_fn = getattr(self, "run_worker", None)
        if not callable(run_worker_fn):
            return None

        def _start() -> Any:
            return run_worker_fn(work_factory(), name=worker_key, group=worker_key, exclusive=False)

        if callable(starter):
            try:
                return starter(
                    owner=self._worker_owner_token(),
                    key=worker_key,
                    timeout_s=timeout_s,
                    start=_start,
                    cancel_existing=replace,
                )
            except Exception:
                logger.exception(
                    "Failed to start managed worker '%s' for %s.",
                    worker_key,
                    self._worker_owner_token(),
                )
                return None
        return _start()

    def _cancel_managed_workers(self, *, reason: str) -> None:
        """Cancel all workers owned by this screen.

        Args:
            reason: Human-readable reason for cancellation.
        """
        app_obj = getattr(self, "app", None)
        cancel_owner = getattr(app_obj, "cancel_managed_workers_for_owner", None)
        if not callable(cancel_owner):
            return
        try:
            cancel_owner(
                owner=self._worker_owner_token(),
                reason=reason,
            )
        except Exception:
            logger.exception(
                "Failed to cancel managed workers for %s (%s).",
                self._worker_owner_token(),
                reason,
            )

    def _run_on_ui_thread(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on the app thread, from either thread."""
        app_obj = getattr(self, "app", None)
        runner = getattr(app_obj, "run_on_ui_thread", None)
        if callable(runner):
            try:
                runner(callback)
                return
            except Exception:
                logger.exception("Failed to dispatch UI callback for %s.", self._worker_owner_token())
                return
        callback()
