"""Desktop notification delivery via the platform's command-line notifier."""

from __future__ import annotations

import asyncio
import shutil
import sys
from typing import Callable, Optional

from clawdis.logging import get_logger

logger = get_logger(__name__)


def _applescript_quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class NotificationSender:
    """
    Sends a system notification and reports whether delivery was accepted.

    macOS uses ``osascript``; other platforms use ``notify-send`` when it is
    installed. Delivery failures are logged and reported as ``False``.
    """

    def __init__(
        self,
        *,
        platform: Optional[str] = None,
        which: Callable[[str], Optional[str]] = shutil.which,
        timeout_s: float = 10.0,
    ) -> None:
        self._platform = platform or sys.platform
        self._which = which
        self._timeout_s = timeout_s

    def build_command(self, title: str, body: str, sound: Optional[str] = None) -> Optional[list[str]]:
        """Return the notifier argv for this platform, or None when unavailable."""
        if self._platform == "darwin":
            script = f"display notification {_applescript_quote(body)} with title {_applescript_quote(title)}"
            if sound:
                script += f" sound name {_applescript_quote(sound)}"
            return ["/usr/bin/osascript", "-e", script]
        notifier = self._which("notify-send")
        if notifier is None:
            return None
        command = [notifier, "--app-name=Clawdis", title, body]
        if sound:
            command.insert(1, f"--hint=string:sound-name:{sound}")
        return command

    async def send(self, title: str, body: str, sound: Optional[str] = None) -> bool:
        command = self.build_command(title, body, sound)
        if command is None:
            logger.debug("No notification backend available on %s", self._platform)
            return False
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.warning("Notification delivery failed: %s", exc)
            return False
        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout_s)
        except asyncio.TimeoutError:
            if process.returncode is None:
                process.kill()
            await process.wait()
            logger.warning("Notifier did not exit within %.1fs", self._timeout_s)
            return False
        if process.returncode != 0:
            detail = (stderr or b"").decode("utf-8", errors="replace").strip()
            logger.warning("Notifier exited with %s: %s", process.returncode, detail)
            return False
        return True
