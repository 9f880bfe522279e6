from __future__ import annotations
from functools import cmp_to_key
from typing import Callable, Dict, List, Optional
import logging

from hoshin_compass.models import (
    STATEMENT_IDS,
    ConnectionDirection,
    HoshinDocument,
    HoshinError,
    RankedStatement,
    RankingResult,
    Statement,
    to_connection_pair_id,
)
from hoshin_compass.validation import validate_for_calculation

logger = logging.getLogger(__name__)

_NO_ORDER = float("inf")


class RankingError(HoshinError):
    pass


def count_arrows_out(document: HoshinDocument) -> Dict[str, int]:
    counts = {sid: 0 for sid in STATEMENT_IDS}
    for connection in document.connections:
        if connection.direction is not None:
            counts[connection.direction.from_id] = counts.get(connection.direction.from_id, 0) + 1
    return counts


def _direction_between(document: HoshinDocument, a: str, b: str) -> Optional[ConnectionDirection]:
    connection = document.connection_by_id(to_connection_pair_id(a, b))
    return connection.direction if connection else None


def _cmp(x, y) -> int:
    return (x > y) - (x < y)


def make_rank_comparator(document: HoshinDocument, arrows_out: Dict[str, int]) -> Callable[[Statement, Statement], int]:
    """
    Negative when ``a`` ranks above ``b``. Keys, in order: arrows out (desc),
    direct driver edge between the two, initial order (asc, unset last), id.
    """
    def compare(a: Statement, b: Statement) -> int:
        by_arrows = _cmp(arrows_out[b.id], arrows_out[a.id])
        if by_arrows:
            return by_arrows

        direction = _direction_between(document, a.id, b.id)
        if direction is not None:
            if direction.from_id == a.id and direction.to_id == b.id:
                return -1
            if direction.from_id == b.id and direction.to_id == a.id:
                return 1

        order_a = a.initial_order if a.initial_order is not None else _NO_ORDER
        order_b = b.initial_order if b.initial_order is not None else _NO_ORDER
        if order_a != order_b:
            return -1 if order_a < order_b else 1

        return _cmp(a.id, b.id)

    return compare


def calculate_ranking(document: HoshinDocument) -> RankingResult:
    validation = validate_for_calculation(document)
    if not validation.is_valid:
        raise RankingError(f"Cannot calculate ranking: {validation.first_message('unknown validation error')}")

    arrows_out = count_arrows_out(document)
    # slot order first; the direct-edge key can cycle among three tied statements
    by_id = sorted(document.statements, key=lambda s: s.id)
    ordered = sorted(by_id, key=cmp_to_key(make_rank_comparator(document, arrows_out)))
    ranking: List[RankedStatement] = [
        RankedStatement(
            statement_id=s.id,
            statement_text=s.text,
            initial_order=s.initial_order,
            arrows_out=arrows_out[s.id],
            rank=i,
        )
        for i, s in enumerate(ordered, start=1)
    ]
    focus = (ranking[0].statement_id, ranking[1].statement_id)
    logger.debug(f"Ranked {document.id}: {[r.statement_id for r in ranking]}")
    return RankingResult(arrows_out_by_statement=arrows_out, ranking=ranking, focus_top_two=focus)
