import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from utils import paths


def test_init_app_paths_creates_dirs_and_copies_legacy_config(monkeypatch, tmp_path):
    monkeypatch.setattr(paths, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(paths, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(paths, "CONFIG_DIR", tmp_path / "cfg")
    monkeypatch.setattr(paths, "CONFIG_PATH", tmp_path / "cfg" / "config.yaml")
    workdir = tmp_path / "work"
    workdir.mkdir()
    (workdir / "config.yaml").write_text("search:\n  debounce_ms: 10\n")
    monkeypatch.chdir(workdir)

    paths.init_app_paths()

    assert (tmp_path / "data").is_dir() and (tmp_path / "logs").is_dir()
    assert (tmp_path / "cfg" / "config.yaml").read_text().startswith("search:")


def test_paths_are_app_specific():
    assert paths.APP_NAME in str(paths.CONFIG_PATH)
    assert paths.CONFIG_PATH.name == "config.yaml"
