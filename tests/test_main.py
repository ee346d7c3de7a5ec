import os, sys, pathlib
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("QT_OPENGL", "software")
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import json

import pytest
try:
    import main
except Exception:  # pragma: no cover
    pytest.skip("PySide6 not available", allow_module_level=True)

from engine.config import ConfigManager


@pytest.fixture
def isolated(monkeypatch, tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("browser:\n  show_only_craftable: false\n")
    monkeypatch.setattr(main, "init_app_paths", lambda: None)
    monkeypatch.setattr(main, "ConfigManager", lambda: ConfigManager(config_path=str(cfg)))
    return tmp_path


def test_main_prints_first_page(isolated, capsys, qapp):
    registry = isolated / "items.json"
    registry.write_text(json.dumps([
        {"id": "bow", "name": "Bow"},
        {"id": "apple", "name": "Apple"},
        {"id": "bread", "name": "Bread"},
    ]))
    assert main.main(["main.py", str(registry), "b"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["bow\tBow", "bread\tBread", "Page 1 / 1"]


def test_main_reports_unavailable_registry(isolated, qapp):
    assert main.main(["main.py", str(isolated / "missing.json")]) == 1


def test_main_applies_configured_log_level(isolated, monkeypatch, qapp):
    (isolated / "config.yaml").write_text("logging:\n  level: debug\n")
    registry = isolated / "items.json"
    registry.write_text(json.dumps([{"id": "bow", "name": "Bow"}]))
    levels = []
    monkeypatch.setattr(main, "get_logger", lambda name, level="INFO": levels.append(level))

    assert main.main(["main.py", str(registry)]) == 0
    assert levels == ["DEBUG"]
