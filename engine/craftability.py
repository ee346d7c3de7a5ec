"""Craftability index.

Answering "does this entry have a recipe" means asking a recipe oracle, which
may hit the disk or the network.  That is far too slow to do for every entry
on every filter pass, so the index is warmed once per catalog load on a
background worker and then published as an immutable id set.

State machine::

    EMPTY --begin_warmup--> WARMING --publish--> READY
      ^                                            |
      +------------------- reset ------------------+

Until the index is READY, :meth:`CraftabilityIndex.is_craftable` answers from
the name heuristics, the recipe memo and a bounded number of synchronous
oracle calls.  Those answers may under-report; the published snapshot is
authoritative.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Protocol, Set

from engine.catalog import Catalog, id_path

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Heuristic rules
# ---------------------------------------------------------------------------

DEFAULT_ALLOW_IDS = (
    # Basic materials
    "oak_planks", "spruce_planks", "birch_planks", "jungle_planks", "acacia_planks",
    "dark_oak_planks", "cherry_planks", "mangrove_planks", "bamboo_planks",
    "crimson_planks", "warped_planks", "stick", "bowl", "crafting_table", "furnace",
    "chest", "ladder", "torch", "soul_torch",
    # Tools
    "wooden_pickaxe", "wooden_axe", "wooden_shovel", "wooden_sword", "wooden_hoe",
    "stone_pickaxe", "stone_axe", "stone_shovel", "stone_sword", "stone_hoe",
    "iron_pickaxe", "iron_axe", "iron_shovel", "iron_sword", "iron_hoe",
    "golden_pickaxe", "golden_axe", "golden_shovel", "golden_sword", "golden_hoe",
    "diamond_pickaxe", "diamond_axe", "diamond_shovel", "diamond_sword", "diamond_hoe",
    "netherite_pickaxe", "netherite_axe", "netherite_shovel", "netherite_sword",
    "netherite_hoe",
    # Armor
    "leather_helmet", "leather_chestplate", "leather_leggings", "leather_boots",
    "iron_helmet", "iron_chestplate", "iron_leggings", "iron_boots",
    "golden_helmet", "golden_chestplate", "golden_leggings", "golden_boots",
    "diamond_helmet", "diamond_chestplate", "diamond_leggings", "diamond_boots",
    # Food
    "bread", "cake", "cookie", "pumpkin_pie", "mushroom_stew", "rabbit_stew",
    "beetroot_soup", "golden_apple", "golden_carrot", "sugar",
    # Building blocks
    "stone_bricks", "smooth_stone", "bricks", "nether_bricks", "glass", "glass_pane",
    # Redstone
    "redstone_torch", "repeater", "comparator", "piston", "sticky_piston", "hopper",
    "dropper", "dispenser", "observer", "lectern", "note_block", "jukebox",
    # Transportation
    "rail", "powered_rail", "detector_rail", "activator_rail", "minecart",
    # Utility blocks
    "anvil", "enchanting_table", "bookshelf", "ender_chest", "barrel", "smoker",
    "blast_furnace", "grindstone", "stonecutter", "loom", "smithing_table",
    "brewing_stand", "cauldron", "composter", "campfire", "lantern",
    # Processed materials
    "iron_ingot", "gold_ingot", "copper_ingot", "netherite_ingot", "diamond",
    "emerald", "coal", "charcoal", "paper", "book", "map", "clock", "compass",
    "lead", "spyglass",
)

DEFAULT_ALLOW_SUFFIXES = (
    "_planks", "_slab", "_stairs", "_fence", "_fence_gate", "_door", "_trapdoor",
    "_button", "_pressure_plate", "_sign", "_hanging_sign", "_wall", "_carpet",
    "_stained_glass", "_stained_glass_pane", "_bed", "_banner", "_boat",
)

DEFAULT_DENY_SUBSTRINGS = (
    "spawn_egg", "debug", "structure_block", "structure_void", "jigsaw", "barrier",
    "command_block", "piston_head", "knowledge_book",
)

DEFAULT_DENY_IDS = ("air", "light")


@dataclass(frozen=True)
class CraftabilityRules:
    """Name-pattern heuristics applied before any oracle lookup.

    Deny rules always win.  Rules are matched against the path part of an id
    so ``minecraft:oak_planks`` and ``oak_planks`` behave the same.
    """

    allow_ids: frozenset = field(default_factory=lambda: frozenset(DEFAULT_ALLOW_IDS))
    allow_suffixes: tuple = DEFAULT_ALLOW_SUFFIXES
    deny_substrings: tuple = DEFAULT_DENY_SUBSTRINGS
    deny_ids: frozenset = field(default_factory=lambda: frozenset(DEFAULT_DENY_IDS))

    @classmethod
    def from_lists(
        cls,
        allow_ids: Iterable[str] = (),
        allow_suffixes: Iterable[str] = (),
        deny_substrings: Iterable[str] = (),
        deny_ids: Iterable[str] = (),
    ) -> "CraftabilityRules":
        return cls(
            allow_ids=frozenset(s.lower() for s in allow_ids),
            allow_suffixes=tuple(s.lower() for s in allow_suffixes),
            deny_substrings=tuple(s.lower() for s in deny_substrings),
            deny_ids=frozenset(s.lower() for s in deny_ids),
        )

    def classify(self, entry_id: str) -> Optional[bool]:
        """Return ``True``/``False`` when a rule decides, ``None`` otherwise."""
        path = id_path(entry_id).lower()
        if path in self.deny_ids:
            return False
        if any(s in path for s in self.deny_substrings):
            return False
        if path in self.allow_ids:
            return True
        if path.endswith(self.allow_suffixes):
            return True
        return None


# ---------------------------------------------------------------------------
# Recipe memo
# ---------------------------------------------------------------------------

class RecipeOracle(Protocol):
    def has_recipe(self, entry_id: str) -> bool:
        ...


class RecipeMemo:
    """Write-once ``entry id -> has recipe`` map shared with the warm-up thread.

    The oracle call runs outside the lock; two threads resolving the same id
    may both call it, and the first stored answer wins.  Failed lookups are
    answered ``False`` and not stored; they are remembered in a separate
    failure set so callers can avoid repeating them.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._map: Dict[str, bool] = {}
        self._failed: Set[str] = set()

    def __len__(self) -> int:
        with self._lock:
            return len(self._map)

    def get(self, entry_id: str) -> Optional[bool]:
        with self._lock:
            return self._map.get(entry_id)

    def failed(self, entry_id: str) -> bool:
        with self._lock:
            return entry_id in self._failed

    def resolve(self, entry_id: str, lookup: Callable[[str], bool]) -> bool:
        with self._lock:
            cached = self._map.get(entry_id)
        if cached is not None:
            return cached
        try:
            value = bool(lookup(entry_id))
        except Exception as e:
            log.warning("Recipe lookup failed for %s (%s): %s", entry_id, type(e).__name__, e)
            with self._lock:
                self._failed.add(entry_id)
            return False
        with self._lock:
            self._failed.discard(entry_id)
            return self._map.setdefault(entry_id, value)


class LookupBudget:
    """Caps the synchronous oracle calls made during one filter pass."""

    def __init__(self, limit: int):
        self.remaining = max(0, int(limit))

    def take(self) -> bool:
        if self.remaining <= 0:
            return False
        self.remaining -= 1
        return True

    def exhaust(self) -> None:
        self.remaining = 0


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------

class IndexState(str, Enum):
    EMPTY = "empty"
    WARMING = "warming"
    READY = "ready"


@dataclass(frozen=True)
class _Snapshot:
    craftable_ids: frozenset
    generation: int


class CraftabilityIndex:
    """Set of craftable entry ids, warmed in the background."""

    def __init__(
        self,
        rules: Optional[CraftabilityRules] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.rules = rules or CraftabilityRules()
        self._lock = threading.Lock()
        self._executor = executor
        self._owns_executor = executor is None
        self._state = IndexState.EMPTY
        self._generation = 0
        self._snapshot: Optional[_Snapshot] = None
        self._memo = RecipeMemo()
        self._oracle: Optional[RecipeOracle] = None
        self._future: Optional[Future] = None

    # --- state -----------------------------------------------------------
    @property
    def state(self) -> IndexState:
        return self._state

    def is_ready(self) -> bool:
        return self._snapshot is not None

    @property
    def size(self) -> int:
        snap = self._snapshot
        return len(snap.craftable_ids) if snap is not None else 0

    @property
    def memo(self) -> RecipeMemo:
        return self._memo

    @property
    def generation(self) -> int:
        return self._generation

    # --- warm-up ---------------------------------------------------------
    def begin_warmup(
        self,
        catalog: Catalog,
        oracle: RecipeOracle,
        on_ready: Optional[Callable[[int], None]] = None,
    ) -> Optional[Future]:
        """Start building the index unless it is already warming or ready.

        ``on_ready`` receives the number of craftable ids and is called from
        the worker thread after the snapshot is published.
        """
        with self._lock:
            if self._state is not IndexState.EMPTY:
                log.debug("Warm-up not started: index is %s", self._state.value)
                return None
            self._state = IndexState.WARMING
            self._oracle = oracle
            generation = self._generation
            memo = self._memo
        entries = tuple(catalog)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="craftable-warmup"
            )
        log.info("Craftable index warm-up started: entries=%s", len(entries))
        self._future = self._executor.submit(
            self._warm, entries, oracle, memo, generation, on_ready
        )
        return self._future

    def _warm(self, entries, oracle, memo, generation, on_ready):
        start = time.perf_counter()
        try:
            ids = set()
            for entry in entries:
                verdict = self.rules.classify(entry.id)
                if verdict is None:
                    verdict = memo.resolve(entry.id, oracle.has_recipe)
                if verdict:
                    ids.add(entry.id)
            snapshot = _Snapshot(frozenset(ids), generation)
        except Exception:
            log.exception("Craftable index warm-up failed")
            with self._lock:
                if generation == self._generation:
                    self._state = IndexState.EMPTY
            raise

        with self._lock:
            if generation != self._generation:
                log.info("Discarding stale craftable index (generation %s)", generation)
                return None
            self._snapshot = snapshot
            self._state = IndexState.READY

        log.info(
            "Craftable index ready: craftable=%s entries=%s elapsed=%.2fs",
            len(snapshot.craftable_ids), len(entries), time.perf_counter() - start,
        )
        if on_ready is not None:
            on_ready(len(snapshot.craftable_ids))
        return snapshot

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the running warm-up finishes; return readiness."""
        fut = self._future
        if fut is not None:
            fut.result(timeout=timeout)
        return self.is_ready()

    def reset(self) -> None:
        """Drop the snapshot and memo.  An in-flight warm-up is ignored."""
        with self._lock:
            self._generation += 1
            self._state = IndexState.EMPTY
            self._snapshot = None
            self._memo = RecipeMemo()
            self._oracle = None
            self._future = None

    def shutdown(self) -> None:
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=False)
            self._executor = None

    # --- queries ---------------------------------------------------------
    def is_craftable(self, entry_id: str, budget: Optional[LookupBudget] = None) -> bool:
        snap = self._snapshot
        if snap is not None:
            return entry_id in snap.craftable_ids

        verdict = self.rules.classify(entry_id)
        if verdict is not None:
            return verdict
        memo = self._memo
        cached = memo.get(entry_id)
        if cached is not None:
            return cached
        if memo.failed(entry_id):
            # left to the warm-up worker
            return False
        oracle = self._oracle
        if oracle is None or budget is None or not budget.take():
            return False
        verdict = memo.resolve(entry_id, oracle.has_recipe)
        if memo.failed(entry_id):
            # oracle is struggling, stop synchronous lookups for this pass
            budget.exhaust()
        return verdict


__all__ = [
    "CraftabilityIndex",
    "CraftabilityRules",
    "IndexState",
    "LookupBudget",
    "RecipeMemo",
    "RecipeOracle",
]
