from __future__ import annotations
from typing import List

from hoshin_compass.models import HoshinDocument, RankingResult, ValidationResult

MAX_LISTED_ISSUES = 12


def render_validation_txt(document: HoshinDocument, result: ValidationResult, label: str = "Draft check") -> str:
    lines: List[str] = []
    lines.append(f"{label}: {document.name or document.id}")
    if result.is_valid:
        lines.append("- OK: all authoring rules pass.")
        return "\n".join(lines)
    for issue in result.issues[:MAX_LISTED_ISSUES]:
        lines.append(f"- {issue.path}: {issue.message} [{issue.code}]")
    if len(result.issues) > MAX_LISTED_ISSUES:
        lines.append(f"... plus {len(result.issues) - MAX_LISTED_ISSUES} more.")
    return "\n".join(lines)


def render_ranking_txt(result: RankingResult) -> str:
    lines: List[str] = ["Ranking"]
    for row in result.ranking:
        focus = f"  <- #{row.rank} focus" if row.statement_id in result.focus_top_two else ""
        lines.append(
            f"#{row.rank} {row.statement_id} (arrows out: {row.arrows_out}, "
            f"initial order: {row.initial_order if row.initial_order is not None else '-'}) "
            f"{row.statement_text}{focus}"
        )
    lines.append("")
    lines.append(f"Focus: {result.focus_top_two[0]}, {result.focus_top_two[1]}")
    return "\n".join(lines)


def render_document_txt(document: HoshinDocument) -> str:
    lines: List[str] = []
    lines.append(f"{document.name} ({document.id})")
    lines.append(f"Prompt: {document.prompt_question}")
    lines.append(f"Updated: {document.updated_at}")
    lines.append("")
    lines.append("Statements")
    for s in document.statements:
        order = s.initial_order if s.initial_order is not None else "-"
        lines.append(f"- {s.id} [order {order}] {s.text or '(empty)'}")
    lines.append("")
    lines.append("Links")
    for c in document.connections:
        if c.direction is None:
            lines.append(f"- {c.id}: not set")
        else:
            lines.append(f"- {c.id}: {c.direction.from_id} -> {c.direction.to_id}")
    return "\n".join(lines)
