"""Screen widgets for the Clawdis TUI."""

from __future__ import annotations

from .catalog_picker import CatalogFilePicker
from .debug import DebugSettingsScreen

__all__ = ["CatalogFilePicker", "DebugSettingsScreen"]
