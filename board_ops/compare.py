from __future__ import annotations

import difflib

from .types import DiffResult


def unified_diff(a_text: str, b_text: str, a_label: str, b_label: str, n: int = 3) -> DiffResult:
    diff = difflib.unified_diff(
        a_text.splitlines(keepends=True),
        b_text.splitlines(keepends=True),
        fromfile=a_label,
        tofile=b_label,
        n=n,
    )
    return DiffResult(a_label=a_label, b_label=b_label, diff_unified="".join(diff))


def make_diff(label: str, old_text: str, new_text: str, n: int = 3) -> DiffResult:
    """Preview of a pending edit to `label`."""
    return unified_diff(old_text, new_text, label + " (old)", label + " (new)", n)
