import pytest

from hoshin_compass.config import DEFAULT_STORE_DIR, load_config


def test_defaults(monkeypatch):
    monkeypatch.delenv("HOSHIN_STORE_DIR", raising=False)
    monkeypatch.delenv("HOSHIN_LOG_LEVEL", raising=False)
    cfg = load_config()
    assert cfg.store_dir == DEFAULT_STORE_DIR
    assert cfg.wizard_mode == "unset_only"
    assert cfg.log_level == "WARNING"


def test_file_then_environment(tmp_path, monkeypatch):
    path = tmp_path / "hoshin.yml"
    path.write_text("store_dir: /data/hoshin\nwizard_mode: walk_all\nlog_level: info\ncolour: blue\n", encoding="utf-8")
    monkeypatch.delenv("HOSHIN_STORE_DIR", raising=False)
    monkeypatch.delenv("HOSHIN_LOG_LEVEL", raising=False)

    cfg = load_config(str(path))
    assert cfg.store_dir == "/data/hoshin"
    assert cfg.wizard_mode == "walk_all"
    assert cfg.log_level == "INFO"

    monkeypatch.setenv("HOSHIN_STORE_DIR", str(tmp_path))
    monkeypatch.setenv("HOSHIN_LOG_LEVEL", "debug")
    cfg = load_config(str(path))
    assert cfg.store_dir == str(tmp_path)
    assert cfg.log_level == "DEBUG"


def test_empty_file(tmp_path, monkeypatch):
    monkeypatch.delenv("HOSHIN_STORE_DIR", raising=False)
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)).store_dir == DEFAULT_STORE_DIR


def test_unknown_wizard_mode(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("wizard_mode: sideways\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))
