"""Build a :class:`BrowserSession` from application configuration."""

from __future__ import annotations

import logging
from typing import Optional

from datasources.registry import JsonItemRegistry
from engine.catalog import ItemRegistry
from engine.config import ConfigManager
from engine.craftability import RecipeOracle
from gui.session import BrowserSession
from recipes.loader import RecipeLoader, DEFAULT_FOLDERS

log = logging.getLogger(__name__)


def build_oracle(config: ConfigManager) -> RecipeOracle:
    """Return the HTTP oracle when ``recipes.base_url`` is set, else the file one."""
    base_url = config.get("recipes.base_url")
    if base_url:
        from datasources.recipes_http import HttpRecipeOracle

        log.info("Using remote recipe oracle at %s", base_url)
        return HttpRecipeOracle(base_url, timeout=float(config.get("recipes.timeout_seconds", 5)))
    folders = config.get("recipes.folders") or DEFAULT_FOLDERS
    return RecipeLoader(config.get("recipes.directory"), folders=folders)


def build_registry(config: ConfigManager) -> ItemRegistry:
    path = config.get("catalog.registry_path")
    if not path:
        raise ValueError("catalog.registry_path is not configured")
    return JsonItemRegistry(path)


def build_session(
    config: ConfigManager,
    registry: Optional[ItemRegistry] = None,
    oracle: Optional[RecipeOracle] = None,
    parent=None,
) -> BrowserSession:
    """Wire a session from ``config``; explicit collaborators take precedence."""
    errors = config.validate_config()
    if errors:
        raise ValueError("Invalid configuration: " + "; ".join(errors))

    return BrowserSession(
        registry if registry is not None else build_registry(config),
        oracle if oracle is not None else build_oracle(config),
        page_size=config.get_page_size(),
        debounce_ms=config.get_debounce_ms(),
        rules=config.get_craftability_rules(),
        excluded_ids=config.get("catalog.excluded_ids") or (),
        craftable_only=bool(config.get("browser.show_only_craftable", False)),
        fallback_lookups=config.get_fallback_lookups(),
        parent=parent,
    )


__all__ = ["build_oracle", "build_registry", "build_session"]
