from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .const import DEFAULT_CATEGORY, GRID_HEIGHT, GRID_WIDTH, LAYOUT_NAME_PATTERN
from .errors import BoardError, LayoutNotFound
from .layouts import BUILT_IN_LAYOUTS, LAYOUT_INFO
from .types import Block, LayoutInfo, ValidationResult, Violation

logger = logging.getLogger(__name__)


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _structural_violations(i: int, b: Block) -> List[Violation]:
    out: List[Violation] = []
    if not isinstance(b.title, str) or not b.title.strip():
        out.append(Violation("structural", i, f"block {i}: title must be a non-empty string"))
    elif "\n" in b.title or "\r" in b.title:
        out.append(Violation("structural", i, f'block {i} "{b.title}": title must be a single line'))
    elif b.title.strip().startswith("#"):
        out.append(Violation("structural", i, f'block {i} "{b.title}": title must not start with "#"'))
    for prop in ("x", "y", "w", "h"):
        v = getattr(b, prop)
        if not _is_int(v) or v < 0:
            out.append(Violation("structural", i, f"block {i}: {prop} must be a non-negative integer, got {v!r}"))
    for prop in ("w", "h"):
        v = getattr(b, prop)
        if _is_int(v) and v == 0:
            out.append(Violation("structural", i, f"block {i}: {prop} must be at least 1"))
    return out


def _bounds_violations(i: int, b: Block) -> List[Violation]:
    out: List[Violation] = []
    if b.x + b.w > GRID_WIDTH:
        out.append(Violation("bounds", i, f'block {i} "{b.title}" exceeds right edge (x:{b.x} + w:{b.w} > {GRID_WIDTH})'))
    if b.y + b.h > GRID_HEIGHT:
        out.append(Violation("bounds", i, f'block {i} "{b.title}" exceeds bottom edge (y:{b.y} + h:{b.h} > {GRID_HEIGHT})'))
    return out


def validate_layout(blocks: Sequence[Block]) -> ValidationResult:
    """Check blocks for structural, bounds and overlap violations.

    Every violation is reported, in that order of kinds. Blocks that are
    structurally broken are left out of the geometric checks; out-of-bounds
    blocks still take part in overlap detection for their in-grid cells.
    """
    result = ValidationResult()
    usable: List[Tuple[int, Block]] = []
    for i, b in enumerate(blocks):
        found = _structural_violations(i, b)
        result.violations.extend(found)
        if not found:
            usable.append((i, b))

    for i, b in usable:
        result.violations.extend(_bounds_violations(i, b))

    owners: Dict[Tuple[int, int], int] = {}
    for i, b in usable:
        for cell in b.cells(GRID_WIDTH, GRID_HEIGHT):
            cx, cy = cell
            owner = owners.get(cell)
            if owner is not None:
                result.violations.append(
                    Violation(
                        "overlap",
                        i,
                        f'block {i} "{b.title}" overlaps block {owner} at ({cx}, {cy})',
                        other_index=owner,
                        cell=cell,
                    )
                )
            else:
                owners[cell] = i
    return result


def blocks_from_dicts(raw: Iterable[Dict[str, Any]]) -> List[Block]:
    return [Block.from_dict(r) for r in raw]


def check_layout_name(name: str) -> None:
    if not isinstance(name, str) or not LAYOUT_NAME_PATTERN.match(name):
        raise BoardError(
            f'invalid layout name "{name}": expected "layout_" followed by letters, digits or underscores',
            "VALIDATION_ERROR",
            {"field": "layout_name", "value": name},
        )


class LayoutRegistry:
    """Validated layouts, looked up by name."""

    def __init__(self) -> None:
        self.layouts: Dict[str, List[Block]] = {}
        self.infos: Dict[str, LayoutInfo] = {}

    @classmethod
    def with_builtins(cls) -> "LayoutRegistry":
        reg = cls()
        reg.load()
        return reg

    def load(
        self,
        layouts: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        infos: Optional[Dict[str, LayoutInfo]] = None,
    ) -> Dict[str, ValidationResult]:
        """(Re)load a catalogue; invalid layouts are skipped and returned."""
        layouts = BUILT_IN_LAYOUTS if layouts is None else layouts
        infos = LAYOUT_INFO if infos is None else infos
        self.layouts.clear()
        self.infos.clear()
        rejected: Dict[str, ValidationResult] = {}
        for name, raw in layouts.items():
            blocks = blocks_from_dicts(raw)
            res = validate_layout(blocks)
            if not res.ok:
                for v in res.violations:
                    logger.warning("[%s] %s", name, v.message)
                rejected[name] = res
                continue
            self.layouts[name] = blocks
            if name in infos:
                self.infos[name] = infos[name]
        logger.info("%d layouts loaded (%d rejected)", len(self.layouts), len(rejected))
        for name, blocks in self.layouts.items():
            logger.debug("  %s: %d sections (%s)", name, len(blocks), ", ".join(b.title for b in blocks))
        return rejected

    def register(self, name: str, blocks: Sequence[Block], info: Optional[LayoutInfo] = None) -> None:
        check_layout_name(name)
        validate_layout(blocks).raise_for_errors(name)
        self.layouts[name] = list(blocks)
        if info is not None:
            self.infos[name] = info

    def get(self, name: str) -> List[Block]:
        blocks = self.layouts.get(name)
        if blocks is None:
            raise LayoutNotFound(name)
        return blocks

    def __contains__(self, name: str) -> bool:
        return name in self.layouts

    def names(self) -> List[str]:
        return list(self.layouts.keys())

    def info(self, name: str) -> LayoutInfo:
        blocks = self.get(name)
        known = self.infos.get(name)
        if known is not None:
            return known
        return LayoutInfo(
            name=name,
            display_name=name,
            description="Custom layout",
            sections=[b.title for b in blocks],
            block_count=len(blocks),
            category=DEFAULT_CATEGORY,
        )

    def all_info(self) -> List[LayoutInfo]:
        return [self.info(n) for n in self.names()]


_default_registry: Optional[LayoutRegistry] = None


def default_registry() -> LayoutRegistry:
    """Shared registry holding the built-in layouts, loaded on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = LayoutRegistry.with_builtins()
    return _default_registry
