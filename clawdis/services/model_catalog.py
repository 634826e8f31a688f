"""
Model catalog loading.

The catalog is a generated TypeScript module (``models.generated.ts``) that
enumerates the models offered by the config model picker. Only the fields
needed to list entries are extracted; the rest of the file is ignored.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from clawdis.logging import get_logger

logger = get_logger(__name__)

_FIELD_RE = re.compile(r"""\b(id|name|provider)\s*:\s*(["'])((?:\\.|(?!\2).)*)\2""")


@dataclass(frozen=True)
class ModelEntry:
    """Single model listed in the catalog."""

    id: str
    provider: Optional[str] = None
    name: Optional[str] = None


class ModelCatalogError(Exception):
    """Raised when a catalog file cannot be loaded."""


def parse_catalog_text(text: str) -> list[ModelEntry]:
    """
    Extract model entries from catalog source text.

    Each ``id:`` field starts a new entry; ``name:`` and ``provider:``
    fields that follow it (before the next ``id:``) are attached to it.
    """
    entries: list[ModelEntry] = []
    current: Optional[dict[str, Optional[str]]] = None
    for match in _FIELD_RE.finditer(text):
        key, value = match.group(1), match.group(3)
        if key == "id":
            if current is not None:
                entries.append(ModelEntry(**current))
            current = {"id": value, "provider": None, "name": None}
        elif current is not None and current.get(key) is None:
            current[key] = value
    if current is not None:
        entries.append(ModelEntry(**current))
    return entries


class ModelCatalogLoader:
    """Loads ``ModelEntry`` lists from catalog files off the event loop."""

    @staticmethod
    def _read(path: Path) -> str:
        if not path.exists():
            raise ModelCatalogError(f"Model catalog not found: {path}")
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ModelCatalogError(f"Failed to read model catalog {path}: {exc}") from exc

    async def load(self, path: str | Path) -> list[ModelEntry]:
        catalog_path = Path(path).expanduser()
        text = await asyncio.to_thread(self._read, catalog_path)
        entries = parse_catalog_text(text)
        if not entries:
            raise ModelCatalogError(f"No models found in {catalog_path}")
        logger.debug("Loaded %d models from %s", len(entries), catalog_path)
        return entries
