"""Clawdis user interfaces.

- shell: single-shot command-line handlers
- tui: Textual-based debug panel
"""

from __future__ import annotations

__all__ = ["shell", "tui"]
