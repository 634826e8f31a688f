"""Pure formatting helpers for the debug panel.

Kept separate from DebugSettingsScreen so rendering rules can be tested
without a widget tree.
"""

from __future__ import annotations

from typing import Optional

from rich.text import Text

EMPTY_LOG_PLACEHOLDER = "—"

_STATUS_STYLES = {
    "running": "bold green",
    "stopped": "grey70",
    "failed": "bold red",
}


def format_restart_count(restart_count: int) -> str:
    return f"Restarts: {max(0, int(restart_count))}"


def status_style(label: str) -> str:
    """Return the Rich style for a relay status label."""
    head = str(label or "").split(":", 1)[0].strip().rstrip("…").lower()
    return _STATUS_STYLES.get(head, "yellow")


def format_relay_status(label: str, restart_count: int) -> Text:
    """Render the relay status label over a dimmed restart count line."""
    text = Text(label or "Unknown", style=status_style(label))
    text.append("\n")
    text.append(format_restart_count(restart_count), style="dim")
    return text


def relay_log_display(log: str) -> str:
    """Relay output shown verbatim, or a placeholder when there is none."""
    return log if log else EMPTY_LOG_PLACEHOLDER


def format_models_summary(count: Optional[int], error: Optional[str]) -> Optional[str]:
    """
    One-line catalog reload outcome.

    The error wins when both are somehow set; None before the first reload.
    """
    if error:
        return error
    if count is not None:
        return f"Loaded {count} models"
    return None


def reload_button_label(loading: bool) -> str:
    return "Reloading…" if loading else "Reload models"


def catalog_choose_label(extension: str) -> str:
    suffix = f".{extension}" if extension else ""
    return f"Choose models.generated{suffix}…"
