"""Modal file chooser for the model catalog file."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DirectoryTree, Static

from clawdis.logging import get_logger

logger = get_logger(__name__)


def matches_extension(path: Path, extension: str) -> bool:
    """Directories always match; files match on suffix. Empty extension matches everything."""
    ext = (extension or "").lstrip(".").lower()
    if not ext:
        return True
    try:
        if path.is_dir():
            return True
    except OSError:
        return False
    return path.suffix.lower() == f".{ext}"


def initial_directory(current_path: str | Path, fallback: Optional[Path] = None) -> Path:
    """Closest existing directory to the current catalog file."""
    candidate = Path(current_path).expanduser().parent
    for directory in (candidate, *candidate.parents):
        try:
            if directory.is_dir():
                return directory
        except OSError:
            continue
    return fallback or Path.home()


class CatalogDirectoryTree(DirectoryTree):
    """Directory tree that only lists files with the catalog extension."""

    def __init__(self, path: str | Path, *, extension: str, **kwargs) -> None:
        super().__init__(path, **kwargs)
        self.extension = (extension or "").lstrip(".")

    def filter_paths(self, paths: Iterable[Path]) -> Iterable[Path]:
        return [path for path in paths if matches_extension(path, self.extension)]


class CatalogFilePicker(ModalScreen[Optional[Path]]):
    """Pick a catalog file; dismisses with the chosen path or None."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=True),
    ]

    DEFAULT_CSS = """
    CatalogFilePicker {
        align: center middle;
    }
    #catalog-picker {
        width: 90%;
        height: 80%;
        border: round $accent;
        background: $surface;
        padding: 0 1;
    }
    #catalog-tree {
        height: 1fr;
    }
    #catalog-picker-actions {
        height: auto;
        align-horizontal: right;
    }
    """

    def __init__(self, current_path: str | Path, *, extension: str = "ts") -> None:
        super().__init__()
        self._start_dir = initial_directory(current_path)
        self._extension = extension
        self._picked: Optional[Path] = None

    @property
    def selected(self) -> Optional[Path]:
        return self._picked

    @property
    def start_directory(self) -> Path:
        return self._start_dir

    def compose(self) -> ComposeResult:
        suffix = f".{self._extension}" if self._extension else ""
        with Vertical(id="catalog-picker"):
            yield Static(f"Select models.generated{suffix}", classes="debug-section-title")
            yield CatalogDirectoryTree(self._start_dir, extension=self._extension, id="catalog-tree")
            yield Static("", id="catalog-selected", classes="debug-hint")
            with Horizontal(id="catalog-picker-actions"):
                yield Button("Select", id="catalog-select", variant="primary", disabled=True)
                yield Button("Cancel", id="catalog-cancel")

    def on_directory_tree_file_selected(self, event: DirectoryTree.FileSelected) -> None:
        self._pick(Path(event.path))

    def _pick(self, path: Path) -> None:
        if not matches_extension(path, self._extension):
            return
        self._picked = path
        try:
            self.query_one("#catalog-selected", Static).update(str(path))
            self.query_one("#catalog-select", Button).disabled = False
        except Exception:
            logger.debug("Catalog picker widgets not mounted")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id == "catalog-select":
            self.dismiss(self._picked)
        elif button_id == "catalog-cancel":
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
