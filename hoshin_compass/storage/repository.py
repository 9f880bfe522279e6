from __future__ import annotations
from typing import Iterable, List, Optional, Protocol

from hoshin_compass.models import HoshinDocument


class RepositoryError(RuntimeError):
    """A storage operation failed. Never reported as an empty result."""


class HoshinRepository(Protocol):
    """Key-value document store keyed by document id."""

    async def upsert(self, document: HoshinDocument) -> None: ...

    async def get_by_id(self, document_id: str) -> Optional[HoshinDocument]: ...

    async def list(self) -> List[HoshinDocument]: ...

    async def delete(self, document_id: str) -> None: ...


def sort_most_recent_first(documents: Iterable[HoshinDocument]) -> List[HoshinDocument]:
    # ISO-8601 UTC strings sort chronologically
    return sorted(documents, key=lambda d: d.updated_at, reverse=True)
