"""Reusable widget helpers for the Clawdis TUI."""

from __future__ import annotations

from .fields import action_button, labeled_row, set_button, set_input, set_static, set_visible, value_field

__all__ = [
    "action_button",
    "labeled_row",
    "set_button",
    "set_input",
    "set_static",
    "set_visible",
    "value_field",
]
