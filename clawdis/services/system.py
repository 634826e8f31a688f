"""
Operating environment services used by the debug panel.

Opening files, revealing paths in the file browser, and spawning the
relauncher are all best-effort: failures are logged and reported through
return values, never raised.
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

from clawdis.logging import get_logger

logger = get_logger(__name__)

BUNDLE_PATH_ENV_VAR = "CLAWDIS_BUNDLE_PATH"


class SystemServices:
    """Thin wrappers over process, bundle, and desktop-shell facilities."""

    def __init__(
        self,
        *,
        platform: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        executable: Optional[str] = None,
        popen: Callable[..., Any] = subprocess.Popen,
        run: Callable[..., Any] = subprocess.run,
    ) -> None:
        self._platform = platform or sys.platform
        self._environ = os.environ if environ is None else environ
        self._executable = executable or sys.executable
        self._popen = popen
        self._run = run

    @property
    def is_macos(self) -> bool:
        return self._platform == "darwin"

    def process_id(self) -> int:
        return os.getpid()

    def bundle_path(self) -> Path:
        """
        Locate the installed application.

        Priority:
        1. CLAWDIS_BUNDLE_PATH environment variable
        2. The nearest ``*.app`` directory enclosing the interpreter
        3. The installed ``clawdis`` package directory
        """
        override = self._environ.get(BUNDLE_PATH_ENV_VAR)
        if override:
            return Path(override).expanduser()
        for parent in Path(self._executable).parents:
            if parent.suffix == ".app":
                return parent
        return Path(__file__).resolve().parent.parent

    def _opener(self) -> str:
        return "/usr/bin/open" if self.is_macos else "xdg-open"

    def _launch_detached(self, argv: Sequence[str]) -> bool:
        try:
            self._popen(
                list(argv),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("Failed to launch %s: %s", argv[0], exc)
            return False
        return True

    def open_path(self, path: str | Path) -> bool:
        """Open a file with its default application."""
        return self._launch_detached([self._opener(), str(path)])

    def reveal_in_file_browser(self, path: str | Path) -> bool:
        """Show a path selected in Finder, or its folder elsewhere."""
        target = Path(path)
        if self.is_macos:
            return self._launch_detached([self._opener(), "-R", str(target)])
        return self._launch_detached([self._opener(), str(target.parent)])

    def spawn_and_wait(self, argv: Sequence[str]) -> Optional[int]:
        """Run a launcher to completion and return its exit status."""
        try:
            completed = self._run(
                list(argv),
                check=False,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("Failed to run %s: %s", argv[0] if argv else "<empty>", exc)
            return None
        return completed.returncode

    def relaunch_command(self, bundle: str | Path) -> Optional[list[str]]:
        """
        Command that starts a fresh copy of an application bundle.

        Returns None when the bundle is not a macOS ``.app``; the caller then
        restarts in place with ``reexec_argv``.
        """
        bundle_path = Path(bundle)
        if self.is_macos and bundle_path.suffix == ".app":
            return ["/usr/bin/open", str(bundle_path)]
        return None

    def reexec_argv(self, argv: Optional[Sequence[str]] = None) -> list[str]:
        args = list(sys.argv[1:] if argv is None else argv)
        return [self._executable, "-m", "clawdis", *args]
