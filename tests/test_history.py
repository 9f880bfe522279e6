from hoshin_compass.history import UndoableState


def test_undo_redo_walks_history():
    h = UndoableState(0)
    for n in (1, 2, 3):
        assert h.set_with_history(lambda _, n=n: n)
    assert h.past == [0, 1, 2]

    assert h.undo() and h.undo()
    assert h.value == 1
    assert h.future == [2, 3]

    assert h.redo()
    assert h.value == 2
    assert h.past == [0, 1]
    assert h.future == [3]


def test_new_edit_clears_redo():
    h = UndoableState("a")
    h.set_with_history(lambda _: "b")
    h.undo()
    assert h.can_redo
    h.set_with_history(lambda _: "c")
    assert not h.can_redo
    assert not h.redo()
    assert h.value == "c"
    assert h.past == ["a"]


def test_noop_update_is_not_recorded():
    h = UndoableState({"k": 1})
    assert not h.set_with_history(lambda v: v)
    assert not h.set_with_history(lambda v: {"k": 1})
    assert not h.can_undo


def test_undo_and_redo_on_empty_history():
    h = UndoableState(5)
    assert not h.undo()
    assert not h.redo()
    assert h.value == 5


def test_snapshots_are_isolated_from_callers():
    seed = [1]
    h = UndoableState(seed)
    seed.append(42)
    assert h.value == [1]

    h.set_with_history(lambda v: v + [2])
    leaked = h.value
    leaked.append(99)
    assert h.value == [1, 2]

    # an updater that mutates its argument still leaves the archive intact
    h.set_with_history(lambda v: (v.append(3), v)[1])
    assert h.past == [[1], [1, 2]]
    h.undo()
    h.undo()
    assert h.value == [1]
    h.redo()
    assert h.value == [1, 2]


def test_replace_present_resets_history():
    h = UndoableState(1)
    h.set_with_history(lambda _: 2)
    h.undo()
    h.replace_present(10)
    assert h.value == 10
    assert not h.can_undo and not h.can_redo
