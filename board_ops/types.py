from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class LineRange:
    """Half-open range of line indices [start, end)."""
    start: int
    end: int

    @property
    def empty(self) -> bool:
        return self.end <= self.start


@dataclass(frozen=True)
class Block:
    title: Any
    x: Any
    y: Any
    w: Any
    h: Any

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Block":
        # No coercion: malformed values are left for the validator to report.
        return cls(
            title=raw.get("title"),
            x=raw.get("x"),
            y=raw.get("y"),
            w=raw.get("w"),
            h=raw.get("h"),
        )

    def cells(self, width: int, height: int) -> List[Tuple[int, int]]:
        """Occupied cells, clipped to a width x height grid."""
        return [
            (cx, cy)
            for cx in range(self.x, min(self.x + self.w, width))
            for cy in range(self.y, min(self.y + self.h, height))
        ]


@dataclass(frozen=True)
class Section:
    name: str
    start_line: int  # heading line
    end_line: int  # next heading of the same level, or len(lines)
    heading_line: str
    lines: Tuple[str, ...] = ()

    @property
    def body_range(self) -> LineRange:
        return LineRange(self.start_line + 1, self.end_line)


@dataclass
class MatchResult:
    matched: List[Tuple[Block, Section]] = field(default_factory=list)
    missing_titles: List[str] = field(default_factory=list)
    extra_sections: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.missing_titles

    def section_for(self, title: str) -> Optional[Section]:
        for block, section in self.matched:
            if block.title == title:
                return section
        return None


@dataclass
class Violation:
    kind: str  # "structural" | "bounds" | "overlap"
    index: int
    message: str
    other_index: Optional[int] = None
    cell: Optional[Tuple[int, int]] = None


@dataclass
class ValidationResult:
    violations: List[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def by_kind(self, kind: str) -> List[Violation]:
        return [v for v in self.violations if v.kind == kind]

    def raise_for_errors(self, name: str = "") -> None:
        if self.violations:
            from .errors import LayoutInvalid  # local import to avoid cycle
            raise LayoutInvalid(name, self.violations)


@dataclass
class ResolveResult:
    insertion_line: int
    stubs: List[str]
    titles: List[str]


@dataclass
class LayoutInfo:
    name: str
    display_name: str
    description: str
    sections: List[str]
    block_count: int
    category: str


@dataclass
class BoardAnalysis:
    path: str
    layout_name: str
    frontmatter: LineRange
    sections: List[Section]
    match: MatchResult


@dataclass
class BoardNoteMeta:
    title: str
    path: str
    layout_name: str
    section_names: List[str]
    missing_titles: List[str]
    extra_sections: List[str]
    error: Optional[str] = None


@dataclass
class DiffResult:
    a_label: str
    b_label: str
    diff_unified: str


def to_json_safe(obj: Any) -> Any:
    if hasattr(obj, "__dataclass_fields__"):
        return to_json_safe(asdict(obj))
    if isinstance(obj, (list, tuple)):
        return [to_json_safe(x) for x in obj]
    if isinstance(obj, dict):
        return {k: to_json_safe(v) for k, v in obj.items()}
    return obj
