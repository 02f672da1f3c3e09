from __future__ import annotations

from typing import List, Sequence

from .types import Block, MatchResult, Section


def normalize_title(title: str) -> str:
    """Comparison key for titles: trimmed and lower-cased."""
    return title.strip().lower()


def match_sections(blocks: Sequence[Block], sections: Sequence[Section]) -> MatchResult:
    """Pair each block with the first unclaimed section of the same normalized name.

    Exact equality after normalization only. Unmatched blocks keep layout
    order in `missing_titles`; unclaimed sections keep document order in
    `extra_sections`.
    """
    keys = [normalize_title(s.name) for s in sections]
    claimed: List[bool] = [False] * len(sections)
    result = MatchResult()
    for block in blocks:
        want = normalize_title(block.title)
        for i, key in enumerate(keys):
            if not claimed[i] and key == want:
                claimed[i] = True
                result.matched.append((block, sections[i]))
                break
        else:
            result.missing_titles.append(block.title)
    result.extra_sections = [s.name for i, s in enumerate(sections) if not claimed[i]]
    return result
