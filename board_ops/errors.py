from __future__ import annotations

from typing import Any, Dict, List, Optional

from .types import Violation


class BoardError(Exception):
    """Base error: a message plus a stable code and a context dict."""

    def __init__(self, message: str, code: str = "BOARD_ERROR", context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.context = context or {}


class LayoutNotFound(BoardError):
    def __init__(self, layout_name: str) -> None:
        super().__init__(f'layout "{layout_name}" not found', "LAYOUT_NOT_FOUND", {"layout_name": layout_name})


class LayoutInvalid(BoardError):
    def __init__(self, layout_name: str, violations: List[Violation]) -> None:
        label = f'layout "{layout_name}"' if layout_name else "layout"
        super().__init__(
            f"{label} has {len(violations)} violation(s)",
            "VALIDATION_ERROR",
            {"layout_name": layout_name, "violations": [v.message for v in violations]},
        )
        self.violations = violations


class ContractViolation(BoardError):
    """Caller broke an engine contract (stale section, unresolved title)."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONTRACT_VIOLATION", context)
