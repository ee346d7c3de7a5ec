"""Search and craftability filtering over the catalog."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from engine.catalog import Catalog, Entry
from engine.craftability import CraftabilityIndex, LookupBudget

log = logging.getLogger(__name__)

DEFAULT_FALLBACK_LOOKUPS = 64


@dataclass
class FilterState:
    search_text: str = ""
    craftable_only: bool = False

    @property
    def needle(self) -> str:
        return (self.search_text or "").strip().casefold()


@dataclass(frozen=True)
class FilteredView:
    """Catalog subsequence matching the filter state it was computed for."""

    entries: Tuple[Entry, ...] = ()
    generation: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __getitem__(self, idx):
        return self.entries[idx]


def matches_text(entry: Entry, needle: str) -> bool:
    return needle in entry.display_name.casefold() or needle in entry.id.casefold()


class FilterEngine:
    """Owns the filter state and produces the filtered view.

    Every recompute is a full scan of the catalog; the result keeps catalog
    order.  Setters only record state and mark the view dirty, scheduling is
    left to the caller.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        index: Optional[CraftabilityIndex] = None,
        state: Optional[FilterState] = None,
        fallback_lookups: int = DEFAULT_FALLBACK_LOOKUPS,
    ):
        self.catalog = catalog if catalog is not None else Catalog()
        self.index = index or CraftabilityIndex()
        self.state = state or FilterState()
        self.fallback_lookups = fallback_lookups
        self._generation = 0
        self._dirty = True
        self._view = FilteredView()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def view(self) -> FilteredView:
        return self._view

    def _touch(self) -> None:
        self._generation += 1
        self._dirty = True

    def set_search_text(self, text: str) -> bool:
        text = text or ""
        if text == self.state.search_text:
            return False
        self.state.search_text = text
        self._touch()
        return True

    def set_craftable_only(self, flag: bool) -> bool:
        flag = bool(flag)
        if flag == self.state.craftable_only:
            return False
        self.state.craftable_only = flag
        self._touch()
        return True

    def set_catalog(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self._touch()

    def mark_dirty(self) -> None:
        """Force the next recompute, e.g. after the index became ready."""
        self._touch()

    def recompute(self) -> FilteredView:
        start = time.perf_counter()
        entries = self.catalog.entries
        if self.state.craftable_only:
            budget = LookupBudget(self.fallback_lookups)
            is_craftable = self.index.is_craftable
            entries = tuple(e for e in entries if is_craftable(e.id, budget))
        needle = self.state.needle
        if needle:
            entries = tuple(e for e in entries if matches_text(e, needle))

        self._view = FilteredView(entries, self._generation)
        self._dirty = False
        log.debug(
            "Recomputed view: matched=%s of %s text=%r craftable_only=%s elapsed=%.1fms",
            len(entries), len(self.catalog), needle, self.state.craftable_only,
            (time.perf_counter() - start) * 1000,
        )
        return self._view


__all__ = ["FilterEngine", "FilterState", "FilteredView", "matches_text"]
