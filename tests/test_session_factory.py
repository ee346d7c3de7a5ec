import os, sys, pathlib
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("QT_OPENGL", "software")
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import json

import pytest
try:
    from services.session_factory import build_oracle, build_session
except Exception:  # pragma: no cover
    pytest.skip("PySide6 not available", allow_module_level=True)

from datasources.recipes_http import HttpRecipeOracle
from engine.config import ConfigManager
from recipes.loader import RecipeLoader


def _config(tmp_path, **overrides):
    cm = ConfigManager(config_path=str(tmp_path / "config.yaml"))
    cm.load_config()
    for key, value in overrides.items():
        cm.set(key, value)
    return cm


def test_build_oracle_prefers_remote(tmp_path):
    cm = _config(tmp_path, **{"recipes.base_url": "http://h/recipes", "recipes.timeout_seconds": 2})
    oracle = build_oracle(cm)
    assert isinstance(oracle, HttpRecipeOracle) and oracle.timeout == 2.0

    cm.set("recipes.base_url", None)
    cm.set("recipes.directory", str(tmp_path))
    oracle = build_oracle(cm)
    assert isinstance(oracle, RecipeLoader) and oracle.recipes_dir == tmp_path


def test_build_session_end_to_end(qtbot, tmp_path):
    registry = tmp_path / "items.json"
    registry.write_text(json.dumps([
        {"id": "minecraft:air", "name": "Air"},
        {"id": "minecraft:stick", "name": "Stick"},
        {"id": "minecraft:bedrock", "name": "Bedrock"},
        {"id": "minecraft:zombie_spawn_egg", "name": "Zombie Spawn Egg"},
    ]))
    recipes = tmp_path / "assets" / "recipes"
    recipes.mkdir(parents=True)
    (recipes / "zombie_spawn_egg.json").write_text("{}")

    cm = _config(tmp_path, **{
        "catalog.registry_path": str(registry),
        "recipes.directory": str(tmp_path / "assets"),
        "browser.items_per_row": 1,
        "browser.rows_per_page": 2,
    })
    session = build_session(cm)
    assert session.craftable_only is True
    assert session.pager.page_size == 2

    session.load()
    with qtbot.waitSignal(session.signals.ready_changed, timeout=5000):
        pass
    assert [e.id for e in session.get_visible_page()] == ["minecraft:stick"]
    session.toggle_craftable_only()
    assert [e.display_name for e in session.get_visible_page()] == ["Bedrock", "Stick"]
    assert session.page_label() == "Page 1 / 2"
    session.close()


def test_invalid_config_is_rejected(tmp_path):
    cm = _config(tmp_path, **{"browser.rows_per_page": -1})
    with pytest.raises(ValueError):
        build_session(cm)


def test_missing_registry_path(tmp_path):
    with pytest.raises(ValueError):
        build_session(_config(tmp_path))
