"""Catalog of browsable items.

The catalog is a sorted, immutable snapshot of every entry the host registry
knows about.  It is built once at startup (or on an explicit reload) and then
only read.  Empty entries and a small exclusion set (``air`` by default) never
make it into the snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Protocol, Tuple

log = logging.getLogger(__name__)

DEFAULT_EXCLUDED_IDS = frozenset({"air"})


class SourceUnavailable(Exception):
    """Raised when the item registry cannot be enumerated."""


class ItemRegistry(Protocol):
    def list_all_entries(self) -> Iterable[Tuple[str, str, bool]]:
        ...


def id_path(entry_id: str) -> str:
    """Return the part of ``entry_id`` after an optional ``namespace:`` prefix."""
    return entry_id.rsplit(":", 1)[-1]


@dataclass(frozen=True)
class Entry:
    """One catalog item.  Identity is the ``id`` alone."""

    id: str
    display_name: str = field(compare=False)

    @property
    def path(self) -> str:
        return id_path(self.id)

    def sort_key(self) -> Tuple[str, str]:
        return (self.display_name, self.id)


class Catalog:
    """Ordered, read-only sequence of entries sorted by display name."""

    def __init__(self, entries: Iterable[Entry] = ()):
        self._entries: Tuple[Entry, ...] = tuple(sorted(entries, key=Entry.sort_key))
        self._by_id = {e.id: e for e in self._entries}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __getitem__(self, idx):
        return self._entries[idx]

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._by_id

    def __repr__(self) -> str:
        return f"Catalog(size={len(self._entries)})"

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return self._entries

    def get(self, entry_id: str) -> Optional[Entry]:
        return self._by_id.get(entry_id)

    def ids(self) -> list[str]:
        return [e.id for e in self._entries]


def _is_excluded(entry_id: str, excluded: frozenset) -> bool:
    return entry_id in excluded or id_path(entry_id) in excluded


def load_catalog(
    registry: ItemRegistry,
    excluded_ids: Iterable[str] = DEFAULT_EXCLUDED_IDS,
) -> Catalog:
    """Enumerate ``registry`` and return the sorted catalog.

    Empty and excluded entries are dropped, duplicates keep their first
    occurrence.  Any failure while enumerating is re-raised as
    :class:`SourceUnavailable`; the caller decides whether to retry or to run
    with an empty catalog.
    """

    excluded = frozenset(excluded_ids)
    try:
        rows = list(registry.list_all_entries())
    except SourceUnavailable:
        raise
    except Exception as e:
        log.error("Item registry enumeration failed: %s", e)
        raise SourceUnavailable(str(e)) from e

    seen: set[str] = set()
    entries: list[Entry] = []
    skipped = 0
    for entry_id, display_name, is_empty in rows:
        if not entry_id or is_empty or _is_excluded(entry_id, excluded):
            skipped += 1
            continue
        if entry_id in seen:
            skipped += 1
            continue
        seen.add(entry_id)
        entries.append(Entry(entry_id, display_name or entry_id))

    catalog = Catalog(entries)
    log.info("Catalog loaded: entries=%s skipped=%s", len(catalog), skipped)
    return catalog


__all__ = [
    "Catalog",
    "DEFAULT_EXCLUDED_IDS",
    "Entry",
    "ItemRegistry",
    "SourceUnavailable",
    "id_path",
    "load_catalog",
]
