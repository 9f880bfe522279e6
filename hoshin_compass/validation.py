from __future__ import annotations
from typing import List, Optional, Set
import re

from hoshin_compass.models import (
    CANONICAL_PAIR_IDS,
    FIXED_CONNECTION_PAIRS,
    STATEMENT_IDS,
    HoshinDocument,
    ValidationIssue,
    ValidationResult,
    parse_connection_pair_id,
)
from hoshin_compass.rules.load_rules import StatementRules, default_statement_rules


def _prefix_patterns(rules: StatementRules) -> List[re.Pattern]:
    return [re.compile(rf"^{re.escape(p)}\b", re.IGNORECASE) for p in rules.prefixes]


def extract_suffix_after_prefix(text: str, rules: Optional[StatementRules] = None) -> Optional[str]:
    """Text after the required prefix, or None when no prefix matches."""
    rules = rules or default_statement_rules()
    trimmed = text.strip()
    for pattern in _prefix_patterns(rules):
        m = pattern.match(trimmed)
        if m:
            return trimmed[m.end():].strip()
    return None


def additional_word_count(text: str, rules: Optional[StatementRules] = None) -> int:
    rules = rules or default_statement_rules()
    suffix = extract_suffix_after_prefix(text, rules)
    if suffix is None:
        return -1
    return len(re.findall(rules.word_pattern, suffix))


def format_statement_path(statement_id: str) -> str:
    return f"Card {statement_id.upper()}"


def format_connection_path(connection_id: str) -> str:
    a, b = parse_connection_pair_id(connection_id)
    return f"Link {a.upper()}-{b.upper()}"


def _prefix_list(rules: StatementRules) -> str:
    quoted = [f"'{p}'" for p in rules.prefixes]
    if len(quoted) < 2:
        return "".join(quoted)
    return f"{', '.join(quoted[:-1])}, or {quoted[-1]}"


def _statement_issues(document: HoshinDocument, rules: StatementRules) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    expected = len(STATEMENT_IDS)

    if len(document.statements) != expected:
        issues.append(ValidationIssue(
            code="statement-count-invalid",
            message="A Hoshin MUST contain exactly five statements.",
            path="Statements",
        ))

    seen_orders: Set[int] = set()
    for statement in document.statements:
        path = format_statement_path(statement.id)
        text = statement.text.strip()

        if extract_suffix_after_prefix(text, rules) is None:
            issues.append(ValidationIssue(
                code="statement-prefix-invalid",
                message=f"Each statement MUST begin with {_prefix_list(rules)}.",
                path=path,
            ))

        count = additional_word_count(text, rules)
        if count < rules.min_words or count > rules.max_words:
            issues.append(ValidationIssue(
                code="statement-word-count-invalid",
                message=(
                    f"Each statement MUST include {rules.min_words}-{rules.max_words} "
                    f"additional words after '{rules.prefix_label}'."
                ),
                path=path,
            ))

        order = statement.initial_order
        if (
            not isinstance(order, int)
            or isinstance(order, bool)
            or order < rules.min_order
            or order > rules.max_order
        ):
            issues.append(ValidationIssue(
                code="initial-order-invalid",
                message=(
                    f"Each statement MUST include an initial order value from "
                    f"{rules.min_order} to {rules.max_order}."
                ),
                path=path,
            ))
        elif order in seen_orders:
            issues.append(ValidationIssue(
                code="initial-order-duplicate",
                message=f"Initial order values MUST be unique from {rules.min_order} to {rules.max_order}.",
                path=path,
            ))
        else:
            seen_orders.add(order)

    # catches cross-statement gaps even when every card passed on its own
    if seen_orders != set(range(rules.min_order, rules.max_order + 1)):
        issues.append(ValidationIssue(
            code="initial-order-coverage-invalid",
            message=(
                f"Initial order values MUST cover all {rules.min_order} through "
                f"{rules.max_order} exactly once."
            ),
            path="Order",
        ))
    return issues


def _connection_issues(document: HoshinDocument) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []

    if len(document.connections) != len(FIXED_CONNECTION_PAIRS):
        issues.append(ValidationIssue(
            code="connection-count-invalid",
            message="The Hoshin template MUST include all ten fixed connections.",
            path="Links",
        ))

    for connection in document.connections:
        path = format_connection_path(connection.id)
        canonical = connection.id in CANONICAL_PAIR_IDS
        if not canonical:
            issues.append(ValidationIssue(
                code="connection-pair-invalid",
                message="Connection pair is not part of the fixed Hoshin template.",
                path=path,
            ))
        elif tuple(sorted(connection.pair)) != parse_connection_pair_id(connection.id):
            issues.append(ValidationIssue(
                code="connection-pair-mismatch",
                message=f"Connection pair {connection.pair[0]}/{connection.pair[1]} does not match its id {connection.id}.",
                path=path,
            ))

        if connection.direction is None:
            issues.append(ValidationIssue(
                code="connection-direction-missing",
                message="All fixed connection lines MUST have a selected direction.",
                path=path,
            ))
            continue

        first, second = connection.endpoints()
        d = connection.direction
        forward = d.from_id == first and d.to_id == second
        reverse = d.from_id == second and d.to_id == first
        if not forward and not reverse:
            issues.append(ValidationIssue(
                code="connection-direction-invalid",
                message="Direction MUST point between the two statements in the connection pair.",
                path=path,
            ))
    return issues


def _missing_pair_issues(document: HoshinDocument) -> List[ValidationIssue]:
    present = {c.id for c in document.connections}
    return [
        ValidationIssue(
            code="connection-pair-missing",
            message=f"Missing fixed connection pair: {pair_id}.",
            path=format_connection_path(pair_id),
        )
        for pair_id in CANONICAL_PAIR_IDS
        if pair_id not in present
    ]


def _missing_slot_issues(document: HoshinDocument) -> List[ValidationIssue]:
    present = {s.id for s in document.statements}
    return [
        ValidationIssue(
            code="statement-id-missing",
            message=f"Missing fixed statement slot: {sid}.",
            path=format_statement_path(sid),
        )
        for sid in STATEMENT_IDS
        if sid not in present
    ]


def validate_draft(document: HoshinDocument, rules: Optional[StatementRules] = None) -> ValidationResult:
    rules = rules or default_statement_rules()
    issues: List[ValidationIssue] = []
    issues.extend(_statement_issues(document, rules))
    issues.extend(_connection_issues(document))
    issues.extend(_missing_pair_issues(document))
    issues.extend(_missing_slot_issues(document))
    return ValidationResult(issues=issues)


def validate_wizard_ready(document: HoshinDocument, rules: Optional[StatementRules] = None) -> ValidationResult:
    """Statement and order rules only; the wizard exists to fill in directions."""
    rules = rules or default_statement_rules()
    issues: List[ValidationIssue] = []
    issues.extend(_statement_issues(document, rules))
    issues.extend(_missing_slot_issues(document))
    return ValidationResult(issues=issues)


def validate_for_calculation(document: HoshinDocument, rules: Optional[StatementRules] = None) -> ValidationResult:
    return validate_draft(document, rules)


def can_calculate(document: HoshinDocument, rules: Optional[StatementRules] = None) -> bool:
    return validate_for_calculation(document, rules).is_valid


def can_run_wizard(document: HoshinDocument, rules: Optional[StatementRules] = None) -> bool:
    return validate_wizard_ready(document, rules).is_valid
