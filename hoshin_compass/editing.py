"""
Pure mutation helpers for HoshinDocument.

Each helper returns a new document, or the very same object when the edit
would change nothing, so undo history never records no-op churn.
"""
from __future__ import annotations
from dataclasses import replace
from typing import Any, List, Optional, Tuple

from hoshin_compass.factory import now_iso
from hoshin_compass.models import (
    CANONICAL_PAIR_IDS,
    FIXED_CONNECTION_PAIRS,
    ConnectionDirection,
    HoshinDocument,
    to_connection_pair_id,
)
from hoshin_compass.rules.load_rules import default_statement_rules

PROMPT_PREFIX = "What are the key issues that must be addressed in order for me/us to"
PROMPT_PLACEHOLDER = "________"


def _touch(document: HoshinDocument, now: Optional[str], **changes: Any) -> HoshinDocument:
    return replace(document, updated_at=now or now_iso(), **changes)


def set_connection_direction(
    document: HoshinDocument,
    pair_id: str,
    from_id: str,
    to_id: str,
    *,
    now: Optional[str] = None,
) -> HoshinDocument:
    if pair_id not in CANONICAL_PAIR_IDS:
        raise ValueError(f"Unknown connection pair: {pair_id}")
    if to_connection_pair_id(from_id, to_id) != pair_id or from_id == to_id:
        raise ValueError(f"Direction {from_id}->{to_id} does not belong to pair {pair_id}")
    current = document.connection_by_id(pair_id)
    if current is None:
        raise KeyError(pair_id)

    direction = ConnectionDirection(from_id=from_id, to_id=to_id)
    if current.direction == direction:
        return document
    connections = [
        replace(c, direction=direction) if c.id == pair_id else c
        for c in document.connections
    ]
    return _touch(document, now, connections=connections)


def clear_connection_direction(document: HoshinDocument, pair_id: str, *, now: Optional[str] = None) -> HoshinDocument:
    current = document.connection_by_id(pair_id)
    if current is None:
        raise KeyError(pair_id)
    if current.direction is None:
        return document
    connections = [replace(c, direction=None) if c.id == pair_id else c for c in document.connections]
    return _touch(document, now, connections=connections)


def set_statement_text(document: HoshinDocument, statement_id: str, text: str, *, now: Optional[str] = None) -> HoshinDocument:
    current = document.statement_by_id(statement_id)
    if current is None:
        raise KeyError(statement_id)
    if current.text == text:
        return document
    statements = [replace(s, text=text) if s.id == statement_id else s for s in document.statements]
    return _touch(document, now, statements=statements)


def set_initial_order(
    document: HoshinDocument,
    statement_id: str,
    order: Optional[int],
    *,
    now: Optional[str] = None,
) -> HoshinDocument:
    """
    Pick an initial order for one statement.

    Picking the order the statement already holds clears it. Picking an order
    another statement holds takes it away from that statement, so orders
    never collide through this helper.
    """
    rules = default_statement_rules()
    if order is not None and not (rules.min_order <= order <= rules.max_order):
        raise ValueError(f"Initial order must be between {rules.min_order} and {rules.max_order}, got {order}")
    current = document.statement_by_id(statement_id)
    if current is None:
        raise KeyError(statement_id)

    new_order = None if order is None or current.initial_order == order else order
    statements = []
    for s in document.statements:
        if s.id == statement_id:
            statements.append(replace(s, initial_order=new_order))
        elif new_order is not None and s.initial_order == new_order:
            statements.append(replace(s, initial_order=None))
        else:
            statements.append(s)
    if statements == document.statements:
        return document
    return _touch(document, now, statements=statements)


def set_prompt_question(document: HoshinDocument, prompt_question: str, *, now: Optional[str] = None) -> HoshinDocument:
    if document.prompt_question == prompt_question:
        return document
    return _touch(document, now, prompt_question=prompt_question)


def rename_document(document: HoshinDocument, name: str, *, now: Optional[str] = None) -> HoshinDocument:
    trimmed = name.strip()
    if not trimmed or trimmed == document.name:
        return document
    return _touch(document, now, name=trimmed)


def compose_prompt_question(blank: str) -> str:
    return f"{PROMPT_PREFIX} {blank if blank else PROMPT_PLACEHOLDER}?"


def extract_prompt_blank(prompt_question: str) -> str:
    trimmed = prompt_question.strip()
    if not trimmed:
        return ""
    prefix = f"{PROMPT_PREFIX} "
    if trimmed.startswith(prefix) and trimmed.endswith("?"):
        blank = trimmed[len(prefix):-1]
        return "" if blank.strip() == PROMPT_PLACEHOLDER else blank
    return trimmed


def set_prompt_blank(document: HoshinDocument, blank: str, *, now: Optional[str] = None) -> HoshinDocument:
    """Fill the prompt template, leaving the prompt alone when the blank is unchanged."""
    blank = blank.strip()
    if blank == extract_prompt_blank(document.prompt_question).strip():
        return document
    return set_prompt_question(document, compose_prompt_question(blank), now=now)


def pairs_with_null_direction(document: HoshinDocument) -> List[Tuple[str, str]]:
    pairs = []
    for a, b in FIXED_CONNECTION_PAIRS:
        connection = document.connection_by_id(to_connection_pair_id(a, b))
        if connection is not None and connection.direction is None:
            pairs.append((a, b))
    return pairs
