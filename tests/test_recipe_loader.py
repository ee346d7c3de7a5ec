import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import json

from recipes.loader import RecipeLoader


def _write(root, folder, name, payload):
    d = root / folder
    d.mkdir(parents=True, exist_ok=True)
    (d / f"{name}.json").write_text(payload if isinstance(payload, str) else json.dumps(payload))


def test_has_recipe_searches_all_folders(tmp_path):
    _write(tmp_path, "recipes", "oak_planks", {"type": "minecraft:crafting_shapeless"})
    _write(tmp_path, "smelting", "iron_ingot", {"type": "minecraft:smelting"})
    loader = RecipeLoader(str(tmp_path))
    assert loader.has_recipe("minecraft:oak_planks")
    assert loader.has_recipe("iron_ingot")
    assert not loader.has_recipe("bedrock")


def test_load_recipe_and_type(tmp_path):
    _write(tmp_path, "recipes", "stick", {"type": "minecraft:crafting_shaped", "pattern": ["#", "#"]})
    loader = RecipeLoader(str(tmp_path), folders=["recipes"])
    assert loader.load_recipe("stick")["pattern"] == ["#", "#"]
    assert loader.recipe_type("stick") == "minecraft:crafting_shaped"
    assert loader.load_recipe("missing") is None


def test_bad_json_is_logged_not_raised(tmp_path, caplog):
    _write(tmp_path, "recipes", "broken", "{not json")
    _write(tmp_path, "recipes", "listy", "[1, 2]")
    loader = RecipeLoader(str(tmp_path))
    assert loader.has_recipe("broken")
    assert loader.load_recipe("broken") is None
    assert loader.load_recipe("listy") is None
    assert "Failed to load recipe for broken" in caplog.text


def test_flat_directory(tmp_path):
    (tmp_path / "bread.json").write_text("{}")
    loader = RecipeLoader(str(tmp_path), folders=[])
    assert loader.has_recipe("bread")
