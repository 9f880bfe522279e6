from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

STATEMENT_IDS: Tuple[str, ...] = ("s1", "s2", "s3", "s4", "s5")

FIXED_CONNECTION_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("s1", "s2"),
    ("s1", "s3"),
    ("s1", "s4"),
    ("s1", "s5"),
    ("s2", "s3"),
    ("s2", "s4"),
    ("s2", "s5"),
    ("s3", "s4"),
    ("s3", "s5"),
    ("s4", "s5"),
)

ARROW_INPUT_MODES = ("picker", "drag")
DEFAULT_ARROW_INPUT_MODE = "picker"
VBRIEF_CORE_VERSION = "0.5"
VBRIEF_PINNED_RELEASE_TAG = "v0.5-beta"


class HoshinError(ValueError):
    """Base class for precondition failures raised by the core."""


class DocumentFormatError(HoshinError):
    """A stored payload cannot be turned into a HoshinDocument at all."""


def to_connection_pair_id(a: str, b: str) -> str:
    first, second = sorted((a, b))
    return f"{first}-{second}"


def parse_connection_pair_id(pair_id: str) -> Tuple[str, str]:
    a, _, b = pair_id.partition("-")
    return a, b


CANONICAL_PAIR_IDS: Tuple[str, ...] = tuple(to_connection_pair_id(a, b) for a, b in FIXED_CONNECTION_PAIRS)


@dataclass
class Statement:
    id: str
    text: str = ""
    initial_order: Optional[int] = None  # 1..5 once chosen


@dataclass(frozen=True)
class ConnectionDirection:
    from_id: str
    to_id: str

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.from_id, "to": self.to_id}


@dataclass
class Connection:
    id: str                      # canonical pair id, e.g. "s1-s4"
    pair: Tuple[str, str]
    direction: Optional[ConnectionDirection] = None

    def endpoints(self) -> Tuple[str, str]:
        # the canonical id wins over the stored pair
        if self.id in CANONICAL_PAIR_IDS:
            return parse_connection_pair_id(self.id)
        return self.pair


@dataclass
class HoshinSettings:
    arrow_input_mode: str = DEFAULT_ARROW_INPUT_MODE


@dataclass
class HoshinDocument:
    id: str
    name: str
    prompt_question: str
    statements: List[Statement] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    settings: HoshinSettings = field(default_factory=HoshinSettings)
    created_at: str = ""
    updated_at: str = ""

    def statement_by_id(self, statement_id: str) -> Optional[Statement]:
        return next((s for s in self.statements if s.id == statement_id), None)

    def connection_by_id(self, pair_id: str) -> Optional[Connection]:
        return next((c for c in self.connections if c.id == pair_id), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "promptQuestion": self.prompt_question,
            "statements": [
                {"id": s.id, "text": s.text, "initialOrder": s.initial_order}
                for s in self.statements
            ],
            "connections": [
                {
                    "id": c.id,
                    "pair": list(c.pair),
                    "direction": c.direction.to_dict() if c.direction else None,
                }
                for c in self.connections
            ],
            "settings": {"arrowInputMode": self.settings.arrow_input_mode},
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "HoshinDocument":
        """
        Build a document from its stored shape.

        Structural problems (wrong counts, duplicate slots, unknown pairs) are
        loaded as-is so validation can report them. Payloads whose containers
        have the wrong type raise DocumentFormatError.
        """
        if not isinstance(data, dict):
            raise DocumentFormatError(f"Document payload must be a mapping, got {type(data).__name__}.")
        if not data.get("id"):
            raise DocumentFormatError("Document payload has no id.")

        statements: List[Statement] = []
        for raw in _entries(data, "statements"):
            if not isinstance(raw, dict):
                raise DocumentFormatError("Statement entries must be mappings.")
            statements.append(Statement(
                id=str(raw.get("id", "")),
                text=str(raw.get("text") or ""),
                initial_order=_coerce_order(raw.get("initialOrder")),
            ))

        connections: List[Connection] = []
        for raw in _entries(data, "connections"):
            if not isinstance(raw, dict):
                raise DocumentFormatError("Connection entries must be mappings.")
            pair_id = str(raw.get("id", ""))
            raw_pair = raw.get("pair")
            if raw_pair is not None and not isinstance(raw_pair, (list, tuple)):
                raise DocumentFormatError(f"Connection {pair_id} has a pair that is not a list.")
            if raw_pair and len(raw_pair) == 2:
                pair = (str(raw_pair[0]), str(raw_pair[1]))
            else:
                pair = parse_connection_pair_id(pair_id)
            raw_dir = raw.get("direction")
            direction = None
            if isinstance(raw_dir, dict) and raw_dir.get("from") and raw_dir.get("to"):
                direction = ConnectionDirection(from_id=str(raw_dir["from"]), to_id=str(raw_dir["to"]))
            connections.append(Connection(id=pair_id, pair=pair, direction=direction))

        raw_settings = data.get("settings") or {}
        if not isinstance(raw_settings, dict):
            raise DocumentFormatError("Document settings must be a mapping.")
        mode = raw_settings.get("arrowInputMode", DEFAULT_ARROW_INPUT_MODE)
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            prompt_question=str(data.get("promptQuestion") or ""),
            statements=statements,
            connections=connections,
            settings=HoshinSettings(arrow_input_mode=mode if mode in ARROW_INPUT_MODES else DEFAULT_ARROW_INPUT_MODE),
            created_at=str(data.get("createdAt") or ""),
            updated_at=str(data.get("updatedAt") or ""),
        )


def _entries(data: Dict[str, Any], key: str) -> List[Any]:
    raw = data.get(key) or []
    if not isinstance(raw, list):
        raise DocumentFormatError(f"Document {key} must be a list, got {type(raw).__name__}.")
    return raw


def _coerce_order(value: Any) -> Optional[int]:
    # bool is an int subclass; a stored true/false is not an order
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


@dataclass
class ValidationIssue:
    code: str
    message: str
    path: str


@dataclass
class ValidationResult:
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    def first_message(self, default: str = "document is invalid") -> str:
        return self.issues[0].message if self.issues else default

    def codes(self) -> List[str]:
        return [i.code for i in self.issues]


@dataclass
class RankedStatement:
    statement_id: str
    statement_text: str
    initial_order: Optional[int]
    arrows_out: int
    rank: int


@dataclass
class RankingResult:
    arrows_out_by_statement: Dict[str, int]
    ranking: List[RankedStatement]
    focus_top_two: Tuple[str, str]

    def rank_of(self, statement_id: str) -> int:
        for row in self.ranking:
            if row.statement_id == statement_id:
                return row.rank
        raise KeyError(statement_id)
