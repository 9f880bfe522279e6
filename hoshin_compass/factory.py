from __future__ import annotations
from datetime import datetime, timezone
import uuid

from hoshin_compass.models import (
    FIXED_CONNECTION_PAIRS,
    STATEMENT_IDS,
    Connection,
    HoshinDocument,
    HoshinSettings,
    Statement,
    to_connection_pair_id,
)

DEFAULT_DOCUMENT_NAME = "Hoshin 1"
DEFAULT_PROMPT_QUESTION = "What are the key issues that must be addressed in order for me/us to ________?"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_document_id() -> str:
    return str(uuid.uuid4())


def create_empty_document(name: str = DEFAULT_DOCUMENT_NAME, *, now: str | None = None) -> HoshinDocument:
    created_at = now or now_iso()
    return HoshinDocument(
        id=new_document_id(),
        name=name,
        prompt_question=DEFAULT_PROMPT_QUESTION,
        statements=[Statement(id=sid) for sid in STATEMENT_IDS],
        connections=[
            Connection(id=to_connection_pair_id(a, b), pair=(a, b))
            for a, b in FIXED_CONNECTION_PAIRS
        ],
        settings=HoshinSettings(),
        created_at=created_at,
        updated_at=created_at,
    )
