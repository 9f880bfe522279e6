from __future__ import annotations
from typing import Callable, Generic, List, TypeVar
import copy

T = TypeVar("T")


class UndoableState(Generic[T]):
    """
    Undo/redo history around a value.

    ``past`` is oldest first, ``future`` is most-recently-undone first. Every
    snapshot going in or coming out is a deep copy, so edits to a returned
    value never reach the archived entries.
    """

    def __init__(self, initial: T):
        self._past: List[T] = []
        self._present: T = copy.deepcopy(initial)
        self._future: List[T] = []

    @property
    def value(self) -> T:
        return copy.deepcopy(self._present)

    @property
    def past(self) -> List[T]:
        return copy.deepcopy(self._past)

    @property
    def future(self) -> List[T]:
        return copy.deepcopy(self._future)

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    def set_with_history(self, updater: Callable[[T], T]) -> bool:
        """Apply ``updater`` to the present value. Returns False for a no-op."""
        candidate = copy.deepcopy(updater(copy.deepcopy(self._present)))
        if candidate == self._present:
            return False
        self._past.append(self._present)
        self._present = candidate
        self._future = []
        return True

    def replace_present(self, value: T) -> None:
        # switching documents is not an edit; nothing to undo into
        self._past = []
        self._present = copy.deepcopy(value)
        self._future = []

    def undo(self) -> bool:
        if not self._past:
            return False
        self._future.insert(0, self._present)
        self._present = self._past.pop()
        return True

    def redo(self) -> bool:
        if not self._future:
            return False
        self._past.append(self._present)
        self._present = self._future.pop(0)
        return True
