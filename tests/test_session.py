import asyncio

import pytest

from hoshin_compass.editing import set_connection_direction, set_statement_text
from hoshin_compass.factory import create_empty_document
from hoshin_compass.models import HoshinError
from hoshin_compass.session import HoshinSession, next_default_name, normalize_document_names
from hoshin_compass.storage.memory import InMemoryHoshinRepository
from hoshin_compass.storage.repository import RepositoryError


class FailingRepository(InMemoryHoshinRepository):
    async def upsert(self, document):
        raise RepositoryError("read-only store")


def test_default_names_fill_the_first_gap():
    docs = [create_empty_document("Hoshin 1"), create_empty_document("Hoshin 3"), create_empty_document("Plan")]
    assert next_default_name(docs) == "Hoshin 2"
    assert next_default_name([]) == "Hoshin 1"


def test_blank_names_are_normalized():
    docs = [create_empty_document("  "), create_empty_document(" Plan "), create_empty_document("")]
    normalized, renamed = normalize_document_names(docs)
    assert [d.name for d in normalized] == ["Hoshin 1", "Plan", "Hoshin 2"]
    assert len(renamed) == 3


def test_load_empty_store():
    session = HoshinSession(InMemoryHoshinRepository())
    assert asyncio.run(session.load()) is None
    assert session.document is None
    assert not session.can_undo
    with pytest.raises(HoshinError):
        session.apply(lambda d: d)


def test_load_picks_most_recent_and_persists_renames():
    old = create_empty_document("Old", now="2026-01-01T00:00:00.000Z")
    new = create_empty_document("", now="2026-02-01T00:00:00.000Z")
    repo = InMemoryHoshinRepository([old, new])
    session = HoshinSession(repo)
    document = asyncio.run(session.load())
    assert document.id == new.id
    assert document.name == "Hoshin 1"
    assert asyncio.run(repo.get_by_id(new.id)).name == "Hoshin 1"


def test_create_and_switch(wizard_ready_document):
    repo = InMemoryHoshinRepository([wizard_ready_document])
    session = HoshinSession(repo)

    async def run():
        await session.load()
        created = await session.create()
        assert created.name == "Hoshin 1"
        assert session.document.id == created.id
        session.apply(lambda d: set_statement_text(d, "s1", "I must plan"))
        await session.select(wizard_ready_document.id)
        return created

    created = asyncio.run(run())
    assert session.document.id == wizard_ready_document.id
    assert not session.can_undo
    # the edit made before switching was saved
    assert asyncio.run(repo.get_by_id(created.id)).statements[0].text == "I must plan"
    with pytest.raises(KeyError):
        asyncio.run(session.select("missing"))


def test_apply_undo_redo(wizard_ready_document):
    session = HoshinSession(InMemoryHoshinRepository([wizard_ready_document]))
    asyncio.run(session.load())
    assert session.apply(lambda d: set_connection_direction(d, "s1-s2", "s2", "s1"))
    assert not session.apply(lambda d: set_connection_direction(d, "s1-s2", "s2", "s1"))
    assert session.can_undo

    assert session.undo()
    assert session.document.connection_by_id("s1-s2").direction is None
    assert session.redo()
    assert session.document.connection_by_id("s1-s2").direction.from_id == "s2"


def test_find_document_by_prefix():
    a = create_empty_document("A")
    a.id = "abc123"
    b = create_empty_document("B")
    b.id = "abd456"
    session = HoshinSession(InMemoryHoshinRepository([a, b]))
    asyncio.run(session.load())
    assert session.find_document_id("abc") == "abc123"
    assert session.find_document_id("abd456") == "abd456"
    with pytest.raises(KeyError):
        session.find_document_id("ab")
    with pytest.raises(KeyError):
        session.find_document_id("zzz")


def test_delete_moves_to_next_document():
    old = create_empty_document("Old", now="2026-01-01T00:00:00.000Z")
    new = create_empty_document("New", now="2026-02-01T00:00:00.000Z")
    session = HoshinSession(InMemoryHoshinRepository([old, new]))
    asyncio.run(session.load())
    assert asyncio.run(session.delete()).id == old.id
    assert asyncio.run(session.delete()) is None
    assert session.documents == []


def test_failed_save_propagates(wizard_ready_document):
    session = HoshinSession(FailingRepository([wizard_ready_document]))
    asyncio.run(session.load())
    session.apply(lambda d: set_statement_text(d, "s1", "I must adapt fast now"))
    with pytest.raises(RepositoryError):
        asyncio.run(session.save())
    assert session.document.statements[0].text == "I must adapt fast now"


def test_wizard_round_trip_through_session(wizard_ready_document):
    session = HoshinSession(InMemoryHoshinRepository([wizard_ready_document]))
    asyncio.run(session.load())
    wizard = session.start_wizard()

    async def run():
        while not wizard.is_complete:
            a, b = wizard.current_step.pair
            await wizard.answer(a, b)

    asyncio.run(run())
    session.finish_wizard(wizard.document)
    assert session.validation.is_valid
    assert not session.can_undo
    assert session.calculate().focus_top_two == ("s1", "s2")
    filename, payload = session.export()
    assert filename.endswith(".vbrief.json")
    assert payload["plan"]["id"] == wizard_ready_document.id
