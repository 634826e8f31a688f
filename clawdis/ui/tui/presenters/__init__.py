"""Presentation helpers for TUI screens."""

from __future__ import annotations

from .debug import (
    EMPTY_LOG_PLACEHOLDER,
    catalog_choose_label,
    format_models_summary,
    format_relay_status,
    format_restart_count,
    relay_log_display,
    reload_button_label,
    status_style,
)

__all__ = [
    "EMPTY_LOG_PLACEHOLDER",
    "catalog_choose_label",
    "format_models_summary",
    "format_relay_status",
    "format_restart_count",
    "relay_log_display",
    "reload_button_label",
    "status_style",
]
