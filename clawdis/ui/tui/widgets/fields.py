"""
Labeled row helpers shared by debug panel widgets.
"""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual.containers import Horizontal
from textual.widget import Widget
from textual.widgets import Button, Input, Static


def labeled_row(label: str, *widgets: Widget, row_id: str | None = None) -> Widget:
    """Create a ``label | content...`` row."""
    return Horizontal(
        Static(label, classes="debug-label"),
        *widgets,
        id=row_id,
        classes="debug-row",
    )


def value_field(field_id: str, value: str = "", *, classes: str = "debug-value") -> Static:
    """Create a read-only value cell."""
    return Static(value, id=field_id, classes=classes)


def action_button(label: str, button_id: str, *, variant: str = "default", tooltip: str | None = None) -> Button:
    button = Button(label, id=button_id, variant=variant)
    if tooltip:
        button.tooltip = tooltip
    return button


def set_static(owner: Widget, field_id: str, value: str | Text) -> None:
    """Update a Static widget if it exists."""
    try:
        owner.query_one(f"#{field_id}", Static).update(value)
    except Exception:
        return


def set_input(owner: Widget, field_id: str, value: str) -> None:
    """Set an Input widget value if the widget exists."""
    try:
        owner.query_one(f"#{field_id}", Input).value = value or ""
    except Exception:
        return


def set_button(owner: Widget, button_id: str, *, label: Any = None, disabled: bool | None = None, tooltip: str | None = None) -> None:
    """Update a Button's label, disabled flag, or tooltip if the widget exists."""
    try:
        button = owner.query_one(f"#{button_id}", Button)
    except Exception:
        return
    if label is not None:
        button.label = label
    if disabled is not None:
        button.disabled = disabled
    if tooltip is not None:
        button.tooltip = tooltip


def set_visible(owner: Widget, field_id: str, visible: bool) -> None:
    try:
        owner.query_one(f"#{field_id}").display = visible
    except Exception:
        return
