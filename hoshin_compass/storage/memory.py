from __future__ import annotations
from typing import Dict, List, Optional
import copy

from hoshin_compass.models import HoshinDocument


class InMemoryHoshinRepository:
    """Process-local store. Keeps and hands out deep copies."""

    def __init__(self, documents: Optional[List[HoshinDocument]] = None):
        self._items: Dict[str, HoshinDocument] = {}
        for d in documents or []:
            self._items[d.id] = copy.deepcopy(d)

    async def upsert(self, document: HoshinDocument) -> None:
        self._items[document.id] = copy.deepcopy(document)

    async def get_by_id(self, document_id: str) -> Optional[HoshinDocument]:
        item = self._items.get(document_id)
        return copy.deepcopy(item) if item is not None else None

    async def list(self) -> List[HoshinDocument]:
        return [copy.deepcopy(d) for d in self._items.values()]

    async def delete(self, document_id: str) -> None:
        self._items.pop(document_id, None)
