"""Item registry adapters.

The browser only needs ``list_all_entries()`` yielding
``(id, display_name, is_empty)`` tuples.  Hosts embedding the browser provide
their own registry; these two cover tests and the standalone runner.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Tuple

from engine.catalog import SourceUnavailable

log = logging.getLogger(__name__)

Row = Tuple[str, str, bool]


class StaticRegistry:
    """In-memory registry over a fixed list of rows."""

    def __init__(self, rows: Iterable[Row] = ()):
        self._rows: List[Row] = [tuple(r) for r in rows]

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "StaticRegistry":
        """Build rows from display names, deriving ``snake_case`` ids."""
        return cls((n.strip().lower().replace(" ", "_"), n, False) for n in names)

    def list_all_entries(self) -> List[Row]:
        return list(self._rows)


class JsonItemRegistry:
    """Registry backed by a JSON file.

    The file holds a list of objects like
    ``{"id": "minecraft:oak_planks", "name": "Oak Planks", "empty": false}``;
    ``name`` defaults to the id and ``empty`` to ``false``.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def list_all_entries(self) -> List[Row]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SourceUnavailable(f"Cannot read item registry {self.path}: {e}") from e

        if not isinstance(data, list):
            raise SourceUnavailable(f"Item registry {self.path} must contain a JSON list")

        rows: List[Row] = []
        for obj in data:
            if not isinstance(obj, dict) or not obj.get("id"):
                log.warning("Skipping malformed registry row: %r", obj)
                continue
            item_id = str(obj["id"]).strip()
            rows.append((item_id, str(obj.get("name") or item_id), bool(obj.get("empty", False))))
        log.debug("Registry %s listed %s rows", self.path, len(rows))
        return rows


__all__ = ["JsonItemRegistry", "StaticRegistry"]
