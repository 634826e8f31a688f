"""State models for the debug panel and app-wide UI state."""

from __future__ import annotations

from .app_state import AppState, AppStateSnapshot, Notification
from .debug_view_model import DebugPanelSnapshot, DebugSettingsViewModel, build_view_model

__all__ = [
    "AppState",
    "AppStateSnapshot",
    "DebugPanelSnapshot",
    "DebugSettingsViewModel",
    "Notification",
    "build_view_model",
]
