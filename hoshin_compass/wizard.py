"""
Pairwise wizard over the ten fixed connections.

Each answer sets one direction and is persisted before the wizard moves on.
Two modes:

- ``unset_only``: ask only the pairs that have no direction yet.
- ``walk_all``: visit every pair; pairs that already have a direction are
  pass-through steps advanced with ``next()``.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Literal, Optional, Tuple
import logging

from hoshin_compass.editing import pairs_with_null_direction, set_connection_direction
from hoshin_compass.models import (
    FIXED_CONNECTION_PAIRS,
    ConnectionDirection,
    HoshinDocument,
    HoshinError,
    to_connection_pair_id,
)
from hoshin_compass.storage.repository import HoshinRepository
from hoshin_compass.validation import validate_wizard_ready

logger = logging.getLogger(__name__)

WizardMode = Literal["unset_only", "walk_all"]
WIZARD_MODES = ("unset_only", "walk_all")


class WizardError(HoshinError):
    pass


@dataclass
class WizardStep:
    index: int                   # 0-based position in the sequence
    total: int
    pair: Tuple[str, str]
    pair_id: str
    direction: Optional[ConnectionDirection]

    @property
    def requires_choice(self) -> bool:
        return self.direction is None


def wizard_pairs(document: HoshinDocument, mode: WizardMode) -> List[Tuple[str, str]]:
    if mode == "unset_only":
        return pairs_with_null_direction(document)
    if mode == "walk_all":
        return [
            (a, b) for a, b in FIXED_CONNECTION_PAIRS
            if document.connection_by_id(to_connection_pair_id(a, b)) is not None
        ]
    raise WizardError(f"Unknown wizard mode: {mode}")


class WizardSequencer:
    def __init__(
        self,
        document: HoshinDocument,
        repository: HoshinRepository,
        mode: WizardMode = "unset_only",
        on_complete: Optional[Callable[[HoshinDocument], None]] = None,
    ):
        readiness = validate_wizard_ready(document)
        if not readiness.is_valid:
            raise WizardError(f"Cannot run wizard: {readiness.first_message()}")
        self.mode = mode
        self.repository = repository
        self.on_complete = on_complete
        self._document = document
        # fixed at start; answering does not reshuffle the remaining steps
        self._pairs = wizard_pairs(document, mode)
        self._index = 0
        self._signalled = False

    @property
    def document(self) -> HoshinDocument:
        return self._document

    @property
    def total(self) -> int:
        return len(self._pairs)

    @property
    def is_complete(self) -> bool:
        return self._index >= len(self._pairs)

    @property
    def progress_label(self) -> str:
        return f"Pair {min(self._index + 1, self.total)} of {self.total}"

    @property
    def current_step(self) -> Optional[WizardStep]:
        if self.is_complete:
            return None
        a, b = self._pairs[self._index]
        pair_id = to_connection_pair_id(a, b)
        connection = self._document.connection_by_id(pair_id)
        return WizardStep(
            index=self._index,
            total=self.total,
            pair=(a, b),
            pair_id=pair_id,
            direction=connection.direction if connection else None,
        )

    def _require_step(self) -> WizardStep:
        step = self.current_step
        if step is None:
            raise WizardError("The wizard is already complete.")
        return step

    async def answer(self, from_id: str, to_id: str) -> HoshinDocument:
        step = self._require_step()
        if {from_id, to_id} != set(step.pair) or from_id == to_id:
            raise WizardError(f"Answer {from_id}->{to_id} does not match pair {step.pair_id}.")

        updated = set_connection_direction(self._document, step.pair_id, from_id, to_id)
        # a failed write leaves document and position untouched
        await self.repository.upsert(updated)
        self._document = updated
        logger.debug(f"Wizard {self.progress_label}: {from_id} -> {to_id}")
        self._advance()
        return self._document

    async def next(self) -> HoshinDocument:
        step = self._require_step()
        if step.requires_choice:
            raise WizardError(f"Pair {step.pair_id} still needs a direction.")
        self._advance()
        return self._document

    async def back_to_editor(self) -> HoshinDocument:
        await self.repository.upsert(self._document)
        logger.info(f"Wizard left at {self.progress_label} for {self._document.id}")
        return self._document

    def _advance(self) -> None:
        self._index += 1
        if self.is_complete and not self._signalled:
            self._signalled = True
            logger.info(f"Wizard complete for {self._document.id}")
            if self.on_complete is not None:
                self.on_complete(self._document)
