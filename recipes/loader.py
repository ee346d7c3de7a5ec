"""
Recipe loader for the item catalog browser.

Recipes are stored one JSON document per item under a recipes root, e.g.
``<root>/recipes/oak_planks.json`` or ``<root>/smelting/iron_ingot.json``.
The loader only answers whether such a document exists and hands back its
parsed content; rendering and validation belong to the host.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from engine.catalog import id_path

DEFAULT_FOLDERS = ("recipes", "smelting", "blasting")


class RecipeLoader:
    """File-backed recipe oracle."""

    def __init__(self, recipes_dir: Optional[str] = None, folders: Iterable[str] = DEFAULT_FOLDERS):
        """Initialize recipe loader."""
        self.logger = logging.getLogger(__name__)

        if recipes_dir:
            self.recipes_dir = Path(recipes_dir)
        else:
            # Default to the directory shipped next to this module
            self.recipes_dir = Path(__file__).parent / "data"

        self.folders: Tuple[str, ...] = tuple(folders) or ("",)

    def _candidates(self, item_id: str):
        name = f"{id_path(item_id)}.json"
        for folder in self.folders:
            yield self.recipes_dir / folder / name if folder else self.recipes_dir / name

    def find_recipe_file(self, item_id: str) -> Optional[Path]:
        """Return the first recipe file for ``item_id`` or ``None``."""
        for path in self._candidates(item_id):
            if path.is_file():
                return path
        return None

    def has_recipe(self, item_id: str) -> bool:
        """Return True if a recipe document exists for the item.

        Filesystem errors propagate; the craftability index treats them as
        "not craftable".
        """
        return self.find_recipe_file(item_id) is not None

    def load_recipe(self, item_id: str) -> Optional[Dict[str, Any]]:
        """Load and parse the recipe document for an item."""
        path = self.find_recipe_file(item_id)
        if path is None:
            self.logger.debug("No recipe for %s under %s", item_id, self.recipes_dir)
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.error("Failed to load recipe for %s: %s", item_id, e)
            return None

        if not isinstance(data, dict):
            self.logger.error("Recipe for %s is not a JSON object", item_id)
            return None
        return data

    def recipe_type(self, item_id: str) -> Optional[str]:
        """Return the ``type`` field of the item's recipe, if any."""
        recipe = self.load_recipe(item_id)
        return recipe.get('type') if recipe else None
