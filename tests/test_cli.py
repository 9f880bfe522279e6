import json
from pathlib import Path

from hoshin_compass.cli import main
from hoshin_compass.models import FIXED_CONNECTION_PAIRS

TEXTS = {
    "s1": "I/We must establish weekly planning rituals",
    "s2": "I/We must define measurable revenue goals",
    "s3": "We must improve cross-team communication cadence",
    "s4": "I must automate repetitive reporting tasks",
    "s5": "I/We must reduce blocked dependency handoffs",
}


def run(capsys, store, *argv):
    code = main(["--store", str(store), *argv])
    return code, capsys.readouterr().out


def new_filled(capsys, store):
    code, out = run(capsys, store, "new", "--name", "Plan")
    assert code == 0
    doc_id = json.loads(out)["id"]
    for order, (slot, text) in enumerate(TEXTS.items(), start=1):
        assert run(capsys, store, "statement", doc_id, slot, "--text", text, "--order", str(order))[0] == 0
    return doc_id


def test_full_flow(tmp_path, capsys):
    store = tmp_path / "store"
    doc_id = new_filled(capsys, store)

    code, out = run(capsys, store, "validate", doc_id)
    assert code == 1
    assert "connection-direction-missing" in out
    assert run(capsys, store, "validate", doc_id, "--wizard")[0] == 0

    for a, b in FIXED_CONNECTION_PAIRS:
        assert run(capsys, store, "link", doc_id[:8], b, a)[0] == 0

    code, out = run(capsys, store, "validate", doc_id)
    assert code == 0
    assert "all authoring rules pass" in out

    code, out = run(capsys, store, "rank", doc_id)
    assert code == 0
    assert "Focus: s5, s4" in out

    assert run(capsys, store, "prompt", doc_id, "grow FY27 revenue")[0] == 0
    code, out = run(capsys, store, "export", doc_id, "--out", str(tmp_path / "out"))
    assert code == 0
    written = json.loads(out)
    assert written["focus"] == ["s5", "s4"]
    dest = Path(written["file"])
    assert dest.exists()
    assert dest.name == "what-are-the-key-issues-that-must-be-addressed-in-order-for-me-u.vbrief.json"


def test_list_and_show(tmp_path, capsys):
    store = tmp_path / "store"
    code, out = run(capsys, store, "new")
    doc_id = json.loads(out)["id"]
    assert json.loads(out)["name"] == "Hoshin 1"
    assert json.loads(run(capsys, store, "new")[1])["name"] == "Hoshin 2"

    code, out = run(capsys, store, "list")
    assert code == 0
    assert len(out.strip().splitlines()) == 2

    code, out = run(capsys, store, "show", doc_id)
    assert code == 0
    assert "s1-s2: not set" in out


def test_unlink_and_order_toggle(tmp_path, capsys):
    store = tmp_path / "store"
    doc_id = new_filled(capsys, store)
    run(capsys, store, "link", doc_id, "s1", "s2")
    code, out = run(capsys, store, "unlink", doc_id, "s2", "s1")
    assert code == 0
    assert "s1-s2: not set" in out

    code, out = run(capsys, store, "statement", doc_id, "s1", "--order", "1")
    assert "- s1 [order -]" in out


def test_wizard_resume_then_finish(tmp_path, capsys, monkeypatch):
    store = tmp_path / "store"
    doc_id = new_filled(capsys, store)

    answers = iter(["x", "2", "q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    code, out = run(capsys, store, "wizard", doc_id)
    assert code == 0
    assert "Please answer 1, 2 or q." in out
    assert '"completed": false' in out
    assert '"progress": "Pair 2 of 10"' in out

    monkeypatch.setattr("builtins.input", lambda prompt="": "1")
    code, out = run(capsys, store, "wizard", doc_id)
    assert code == 0
    assert "Pair 1 of 9" in out
    assert '"completed": true' in out

    code, out = run(capsys, store, "show", doc_id)
    assert "s1-s2: s2 -> s1" in out
    assert "s4-s5: s4 -> s5" in out
    assert run(capsys, store, "validate", doc_id)[0] == 0

    code, out = run(capsys, store, "wizard", doc_id)
    assert "already set" in out


def test_errors_exit_with_2(tmp_path, capsys):
    store = tmp_path / "store"
    doc_id = new_filled(capsys, store)

    assert main(["--store", str(store), "show", "nope"]) == 2
    assert "no unique Hoshin" in capsys.readouterr().err

    assert main(["--store", str(store), "link", doc_id, "s1", "s1"]) == 2
    assert main(["--store", str(store), "rank", doc_id]) == 2
    assert "Cannot calculate ranking" in capsys.readouterr().err

    assert main(["--store", str(store), "delete", doc_id]) == 2
    assert main(["--store", str(store), "delete", doc_id, "--confirm", "DELETE"]) == 0
    capsys.readouterr()
    assert run(capsys, store, "list") == (0, "")


def test_corrupt_store_file_exits_with_2(tmp_path, capsys):
    store = tmp_path / "store"
    store.mkdir()
    (store / "bad.json").write_text(json.dumps({"id": "bad", "settings": "picker"}), encoding="utf-8")
    assert main(["--store", str(store), "list"]) == 2
    assert "Unreadable document file bad.json" in capsys.readouterr().err
