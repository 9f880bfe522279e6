"""
Editor session: one open Hoshin, its undo history, and the document list.

This is the glue the CLI and the Streamlit page drive. Persistence failures
propagate as RepositoryError and leave the in-memory state as it was.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging
import re

from hoshin_compass.export.vbrief import build_vbrief_filename, to_vbrief
from hoshin_compass.factory import create_empty_document
from hoshin_compass.history import UndoableState
from hoshin_compass.models import HoshinDocument, HoshinError, RankingResult, ValidationResult
from hoshin_compass.ranking import calculate_ranking
from hoshin_compass.storage.repository import HoshinRepository, sort_most_recent_first
from hoshin_compass.validation import validate_draft, validate_wizard_ready
from hoshin_compass.wizard import WizardMode, WizardSequencer

logger = logging.getLogger(__name__)

DEFAULT_NAME_PREFIX = "Hoshin"
_DEFAULT_NAME = re.compile(rf"^{DEFAULT_NAME_PREFIX}\s+(\d+)$")


def next_default_name(documents: List[HoshinDocument]) -> str:
    used = set()
    for d in documents:
        m = _DEFAULT_NAME.match((d.name or "").strip())
        if m and int(m.group(1)) > 0:
            used.add(int(m.group(1)))
    n = 1
    while n in used:
        n += 1
    return f"{DEFAULT_NAME_PREFIX} {n}"


def normalize_document_names(documents: List[HoshinDocument]) -> Tuple[List[HoshinDocument], List[HoshinDocument]]:
    """Trim names and give blank ones the next free default. Returns (all, renamed)."""
    normalized: List[HoshinDocument] = []
    renamed: List[HoshinDocument] = []
    for d in documents:
        name = (d.name or "").strip()
        if not name:
            name = next_default_name(normalized)
        if name != d.name:
            d.name = name
            renamed.append(d)
        normalized.append(d)
    return normalized, renamed


def upsert_document_in_list(documents: List[HoshinDocument], document: HoshinDocument) -> List[HoshinDocument]:
    return sort_most_recent_first([d for d in documents if d.id != document.id] + [document])


class HoshinSession:
    def __init__(self, repository: HoshinRepository, wizard_mode: WizardMode = "unset_only"):
        self.repository = repository
        self.wizard_mode = wizard_mode
        self.documents: List[HoshinDocument] = []
        self._history: Optional[UndoableState[HoshinDocument]] = None

    @property
    def document(self) -> Optional[HoshinDocument]:
        return self._history.value if self._history else None

    def _require_document(self) -> HoshinDocument:
        document = self.document
        if document is None:
            raise HoshinError("No Hoshin is open.")
        return document

    def _adopt(self, document: Optional[HoshinDocument]) -> None:
        if document is None:
            self._history = None
        elif self._history is None:
            self._history = UndoableState(document)
        else:
            self._history.replace_present(document)

    async def load(self) -> Optional[HoshinDocument]:
        listed = await self.repository.list()
        normalized, renamed = normalize_document_names(listed)
        for d in renamed:
            logger.warning(f"Normalized name of {d.id} to {d.name!r}")
            await self.repository.upsert(d)
        self.documents = sort_most_recent_first(normalized)
        self._adopt(self.documents[0] if self.documents else None)
        logger.info(f"Loaded {len(self.documents)} Hoshin(s)")
        return self.document

    def find_document_id(self, id_or_prefix: str) -> str:
        """Resolve a full id or a unique id prefix against the loaded list."""
        exact = [d.id for d in self.documents if d.id == id_or_prefix]
        if exact:
            return exact[0]
        matches = [d.id for d in self.documents if d.id.startswith(id_or_prefix)]
        if len(matches) != 1:
            raise KeyError(id_or_prefix)
        return matches[0]

    async def create(self, name: str = "") -> HoshinDocument:
        document = create_empty_document(name.strip() or next_default_name(self.documents))
        await self.repository.upsert(document)
        self.documents = upsert_document_in_list(self.documents, document)
        self._adopt(document)
        logger.info(f"Created {document.name!r} ({document.id})")
        return document

    async def select(self, document_id: str, *, save_current: bool = True) -> HoshinDocument:
        if save_current and self.document is not None:
            await self.save()
        selected = await self.repository.get_by_id(document_id)
        if selected is None:
            selected = next((d for d in self.documents if d.id == document_id), None)
        if selected is None:
            raise KeyError(document_id)
        self._adopt(selected)
        return selected

    async def save(self) -> HoshinDocument:
        document = self._require_document()
        await self.repository.upsert(document)
        self.documents = upsert_document_in_list(self.documents, document)
        return document

    async def delete(self) -> Optional[HoshinDocument]:
        document = self._require_document()
        await self.repository.delete(document.id)
        self.documents = [d for d in self.documents if d.id != document.id]
        self._adopt(self.documents[0] if self.documents else None)
        logger.info(f"Deleted {document.id}")
        return self.document

    def apply(self, updater: Callable[[HoshinDocument], HoshinDocument]) -> bool:
        if self._history is None:
            raise HoshinError("No Hoshin is open.")
        return self._history.set_with_history(updater)

    def undo(self) -> bool:
        return self._history.undo() if self._history else False

    def redo(self) -> bool:
        return self._history.redo() if self._history else False

    @property
    def can_undo(self) -> bool:
        return bool(self._history and self._history.can_undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._history and self._history.can_redo)

    @property
    def validation(self) -> ValidationResult:
        return validate_draft(self._require_document())

    @property
    def wizard_validation(self) -> ValidationResult:
        return validate_wizard_ready(self._require_document())

    def calculate(self) -> RankingResult:
        return calculate_ranking(self._require_document())

    def export(self) -> Tuple[str, Dict[str, Any]]:
        document = self._require_document()
        return build_vbrief_filename(document), to_vbrief(document)

    def start_wizard(
        self,
        mode: Optional[WizardMode] = None,
        on_complete: Optional[Callable[[HoshinDocument], None]] = None,
    ) -> WizardSequencer:
        return WizardSequencer(self._require_document(), self.repository, mode or self.wizard_mode, on_complete)

    def finish_wizard(self, document: HoshinDocument) -> None:
        # the wizard already persisted; this is a reset, not an undoable edit
        self.documents = upsert_document_in_list(self.documents, document)
        self._adopt(document)
