"""Browser session: the object the rendering and input layers talk to.

A session owns one catalog, its craftability index, the filter engine, the
pager and the search debouncer.  It lives on the UI thread; the only work
done elsewhere is the index warm-up, whose completion is delivered back to
the UI thread through a queued Qt signal.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Optional

from PySide6.QtCore import QObject, Signal, Slot

from core.signals import BrowserSignals
from engine.catalog import Catalog, DEFAULT_EXCLUDED_IDS, Entry, ItemRegistry, SourceUnavailable, load_catalog
from engine.craftability import CraftabilityIndex, CraftabilityRules, RecipeOracle
from engine.filtering import DEFAULT_FALLBACK_LOOKUPS, FilterEngine, FilterState, FilteredView
from engine.pager import Pager
from gui.debounce import DEFAULT_DEBOUNCE_MS, Debouncer


class BrowserSession(QObject):
    """Catalog + index + filter + pager context for one UI session."""

    # emitted from the warm-up worker, delivered on the session's thread
    _warmup_finished = Signal(int, int)

    def __init__(
        self,
        registry: ItemRegistry,
        oracle: RecipeOracle,
        page_size: int = 300,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        rules: Optional[CraftabilityRules] = None,
        excluded_ids: Iterable[str] = DEFAULT_EXCLUDED_IDS,
        craftable_only: bool = False,
        fallback_lookups: int = DEFAULT_FALLBACK_LOOKUPS,
        clock: Callable[[], float] = time.monotonic,
        signals: Optional[BrowserSignals] = None,
        executor=None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.logger = logging.getLogger(__name__)
        self.registry = registry
        self.oracle = oracle
        self.excluded_ids = frozenset(excluded_ids)
        self.signals = signals or BrowserSignals(self)

        self.index = CraftabilityIndex(rules, executor=executor)
        self.engine = FilterEngine(
            index=self.index,
            state=FilterState(craftable_only=craftable_only),
            fallback_lookups=fallback_lookups,
        )
        self.pager = Pager(page_size)
        self.debouncer = Debouncer(self._on_text_settled, debounce_ms, clock=clock, parent=self)
        self._warmup_finished.connect(self._on_warmup_finished)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self) -> Catalog:
        """Build the catalog from the registry and start the index warm-up.

        :class:`SourceUnavailable` propagates and leaves the current catalog
        in place.
        """
        catalog = load_catalog(self.registry, self.excluded_ids)
        self._install(catalog)
        return catalog

    def reload(self) -> Catalog:
        self.logger.info("Catalog reload requested")
        return self.load()

    def load_or_empty(self) -> bool:
        """Like :meth:`load` but runs with an empty catalog when the registry fails."""
        try:
            self.load()
            return True
        except SourceUnavailable as e:
            self.logger.warning("Item registry unavailable, starting with an empty catalog: %s", e)
            self._install(Catalog())
            return False

    def _install(self, catalog: Catalog) -> None:
        # keystrokes still settling are applied to the new catalog
        if self.debouncer.pending:
            self.engine.set_search_text(self.debouncer.text)
        self.debouncer.cancel()
        self.index.reset()
        self.engine.set_catalog(catalog)
        self.signals.catalog_loaded.emit(len(catalog))
        self.signals.ready_changed.emit(False)
        self._begin_warmup(catalog)
        self._recompute()

    def _begin_warmup(self, catalog: Catalog) -> None:
        generation = self.index.generation
        self.index.begin_warmup(
            catalog, self.oracle, lambda count: self._warmup_finished.emit(generation, count)
        )

    @Slot(int, int)
    def _on_warmup_finished(self, generation: int, count: int) -> None:
        if generation != self.index.generation or not self.index.is_ready():
            # superseded by a reload
            self.logger.debug("Ignoring stale warm-up notice (generation %s)", generation)
            return
        self.logger.info("Craftable index available: %s craftable entries", count)
        self.signals.ready_changed.emit(True)
        if self.engine.state.craftable_only:
            self.engine.mark_dirty()
            self._recompute()

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------
    def _recompute(self) -> FilteredView:
        view = self.engine.recompute()
        self.pager.refresh(len(view))
        self.signals.view_changed.emit()
        return view

    def _on_text_settled(self, text: str) -> None:
        if self.engine.set_search_text(text) or self.engine.dirty:
            self._recompute()

    def set_search_text(self, text: str) -> None:
        self.debouncer.on_text_changed(text or "")

    def flush(self) -> bool:
        """Apply pending search text immediately."""
        return self.debouncer.flush()

    def set_craftable_only(self, flag: bool) -> None:
        if not self.engine.set_craftable_only(flag):
            return
        if flag and not self.index.is_ready():
            self._begin_warmup(self.engine.catalog)
        self._recompute()

    def toggle_craftable_only(self) -> bool:
        flag = not self.engine.state.craftable_only
        self.set_craftable_only(flag)
        return flag

    @property
    def craftable_only(self) -> bool:
        return self.engine.state.craftable_only

    @property
    def search_text(self) -> str:
        return self.engine.state.search_text

    # ------------------------------------------------------------------
    # Paging
    # ------------------------------------------------------------------
    def _paged(self, changed: bool) -> bool:
        if changed:
            self.signals.view_changed.emit()
        return changed

    def next_page(self) -> bool:
        return self._paged(self.pager.next_page())

    def prev_page(self) -> bool:
        return self._paged(self.pager.prev_page())

    def scroll(self, amount: float) -> bool:
        return self._paged(self.pager.scroll(amount))

    def goto_page(self, index: int) -> bool:
        return self._paged(self.pager.goto_page(index))

    def set_page_size(self, page_size: int) -> None:
        self.pager.refresh(len(self.engine.view), page_size)
        self.signals.view_changed.emit()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    def get_visible_page(self) -> list[Entry]:
        return self.pager.page_slice(self.engine.view)

    def filtered_view(self) -> FilteredView:
        return self.engine.view

    def is_ready(self) -> bool:
        return self.index.is_ready()

    def page_label(self) -> str:
        return self.pager.label()

    def close(self) -> None:
        self.debouncer.cancel()
        self.index.shutdown()
