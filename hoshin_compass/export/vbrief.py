from __future__ import annotations
from typing import Any, Dict
import json
import logging
import re

from hoshin_compass.models import (
    VBRIEF_CORE_VERSION,
    VBRIEF_PINNED_RELEASE_TAG,
    HoshinDocument,
    HoshinError,
)
from hoshin_compass.ranking import calculate_ranking
from hoshin_compass.validation import validate_for_calculation

logger = logging.getLogger(__name__)

FILENAME_SUFFIX = ".vbrief.json"
FALLBACK_BASENAME = "hoshin"
MAX_BASENAME_LENGTH = 64


class VbriefExportError(HoshinError):
    pass


def to_vbrief(document: HoshinDocument) -> Dict[str, Any]:
    validation = validate_for_calculation(document)
    if not validation.is_valid:
        raise VbriefExportError(f"Strict export failed: {validation.first_message()}")

    ranking = calculate_ranking(document)
    rank_by_id = {row.statement_id: row.rank for row in ranking.ranking}

    items = []
    for statement in document.statements:
        rank = rank_by_id[statement.id]
        items.append({
            "id": statement.id,
            "title": statement.text,
            "status": "pending",
            "priority": "high" if rank <= 2 else "medium",
            "narrative": {
                "InitialOrder": str(statement.initial_order),
                "FinalRank": str(rank),
                "ArrowsOut": str(ranking.arrows_out_by_statement[statement.id]),
            },
        })

    # draft validation guarantees every direction is set
    edges = [
        {"from": c.direction.from_id, "to": c.direction.to_id, "type": "blocks"}
        for c in document.connections
        if c.direction is not None
    ]

    logger.info(f"Exported {document.id} with focus {ranking.focus_top_two[0]}, {ranking.focus_top_two[1]}")
    return {
        "vBRIEFInfo": {
            "version": VBRIEF_CORE_VERSION,
            "description": "Hoshin Success Compass export",
            "metadata": {
                "profile": "hoshin-success-compass",
                "pinnedReleaseTag": VBRIEF_PINNED_RELEASE_TAG,
            },
            "created": document.created_at,
            "updated": document.updated_at,
        },
        "plan": {
            "id": document.id,
            "title": document.prompt_question.strip() or "Hoshin Compass",
            "status": "running",
            "items": items,
            "edges": edges,
            "narratives": {
                "Overview": (
                    "Ranking follows the Hoshin PDF rule: count outgoing driver arrows "
                    "and tie-break by direct driver relationship."
                ),
                "Action": "Focus execution on final rank #1 and #2 statements to maximize cascading impact.",
            },
            "metadata": {
                "source": "hoshin-web",
                "pinnedReleaseTag": VBRIEF_PINNED_RELEASE_TAG,
                "finalRanking": [
                    {"statementId": row.statement_id, "rank": row.rank, "arrowsOut": row.arrows_out}
                    for row in ranking.ranking
                ],
            },
        },
    }


def build_vbrief_filename(document: HoshinDocument) -> str:
    base = re.sub(r"[^a-z0-9]+", "-", (document.prompt_question or FALLBACK_BASENAME).lower())
    base = base.strip("-")[:MAX_BASENAME_LENGTH]
    return f"{base or FALLBACK_BASENAME}{FILENAME_SUFFIX}"


def write_vbrief(path: str, payload: Dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
