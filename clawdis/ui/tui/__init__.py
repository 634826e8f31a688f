"""
TUI (Text User Interface) module for the Clawdis debug panel.

Provides the debug settings panel built with Textual.
"""

from __future__ import annotations

__all__ = [
    "ClawdisApp",
    "run_tui",
]


def __getattr__(name: str):
    if name in __all__:
        from clawdis.ui.tui.app import ClawdisApp, run_tui
        return {"ClawdisApp": ClawdisApp, "run_tui": run_tui}[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
