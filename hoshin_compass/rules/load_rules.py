from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Tuple
import yaml

DEFAULT_RULES_PATH = str(Path(__file__).parent / "hoshin_rules.yml")


@dataclass(frozen=True)
class StatementRules:
    prefix_label: str = "I/We must"
    prefixes: Tuple[str, ...] = ("I/We must", "I must", "We must")
    word_pattern: str = r"[A-Za-z0-9'-]+"
    min_words: int = 3
    max_words: int = 7
    min_order: int = 1
    max_order: int = 5


def load_rule_pack(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_statement_rules(rule_pack: Dict[str, Any]) -> StatementRules:
    base = StatementRules()
    st = rule_pack.get("statement") or {}
    order = rule_pack.get("initial_order") or {}
    prefixes = tuple(str(p) for p in (st.get("prefixes") or base.prefixes))
    return StatementRules(
        prefix_label=str(st.get("prefix_label", base.prefix_label)),
        prefixes=prefixes,
        word_pattern=str(st.get("word_pattern", base.word_pattern)),
        min_words=int(st.get("min_words", base.min_words)),
        max_words=int(st.get("max_words", base.max_words)),
        min_order=int(order.get("min", base.min_order)),
        max_order=int(order.get("max", base.max_order)),
    )


@lru_cache(maxsize=8)
def default_statement_rules(path: str = DEFAULT_RULES_PATH) -> StatementRules:
    return load_statement_rules(load_rule_pack(path))
