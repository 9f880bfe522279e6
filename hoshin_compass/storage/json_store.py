from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional
import asyncio
import json
import logging
import os
import re

from hoshin_compass.models import DocumentFormatError, HoshinDocument
from hoshin_compass.storage.repository import RepositoryError

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_.-]+$")


def write_json(path: str, payload: Dict[str, Any]) -> None:
    tmp = f"{path}.tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    os.replace(tmp, path)


def read_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


class JsonDirectoryHoshinRepository:
    """
    One ``<id>.json`` file per document under ``root``.

    File I/O is blocking, so each operation runs in a worker thread.
    """

    def __init__(self, root: str):
        self.root = Path(root).expanduser()

    def _path_for(self, document_id: str) -> Path:
        if not document_id or not _SAFE_ID.match(document_id) or document_id.startswith("."):
            raise RepositoryError(f"Document id is not usable as a file name: {document_id!r}")
        return self.root / f"{document_id}.json"

    def _load(self, path: Path) -> HoshinDocument:
        try:
            return HoshinDocument.from_dict(read_json(str(path)))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, DocumentFormatError) as e:
            logger.error(f"Unreadable document file {path}: {e}")
            raise RepositoryError(f"Unreadable document file {path.name}: {e}") from e

    def _upsert_sync(self, document: HoshinDocument) -> None:
        path = self._path_for(document.id)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            write_json(str(path), document.to_dict())
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise RepositoryError(f"Failed to save document {document.id}: {e}") from e
        logger.debug(f"Saved {document.id} to {path}")

    def _get_sync(self, document_id: str) -> Optional[HoshinDocument]:
        path = self._path_for(document_id)
        if not path.exists():
            return None
        return self._load(path)

    def _list_sync(self) -> List[HoshinDocument]:
        if not self.root.exists():
            return []
        return [self._load(p) for p in sorted(self.root.glob("*.json"))]

    def _delete_sync(self, document_id: str) -> None:
        path = self._path_for(document_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to delete {path}: {e}")
            raise RepositoryError(f"Failed to delete document {document_id}: {e}") from e

    async def upsert(self, document: HoshinDocument) -> None:
        await asyncio.to_thread(self._upsert_sync, document)

    async def get_by_id(self, document_id: str) -> Optional[HoshinDocument]:
        return await asyncio.to_thread(self._get_sync, document_id)

    async def list(self) -> List[HoshinDocument]:
        return await asyncio.to_thread(self._list_sync)

    async def delete(self, document_id: str) -> None:
        await asyncio.to_thread(self._delete_sync, document_id)
