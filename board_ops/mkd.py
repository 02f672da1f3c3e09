from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .const import INVALID_FILENAME_CHARS, LAYOUT_KEY, NOTE_TYPE, SECTION_HEADING_LEVEL, YAML_FM_DELIM
from .types import LineRange, Section
from .utils import yaml_load

_HEADING_PATTERNS: Dict[int, re.Pattern] = {}


def split_lines(text: str) -> List[str]:
    """Split on "\\n" only; join_lines() is the exact inverse."""
    return text.split("\n")


def join_lines(lines: Sequence[str]) -> str:
    return "\n".join(lines)


def heading_pattern(level: int = SECTION_HEADING_LEVEL) -> re.Pattern:
    pat = _HEADING_PATTERNS.get(level)
    if pat is None:
        # exactly `level` hashes, one whitespace char, then content not starting with '#'
        pat = re.compile(r"^#{%d}\s([^#].*)$" % level)
        _HEADING_PATTERNS[level] = pat
    return pat


def heading_name(line: str, level: int = SECTION_HEADING_LEVEL) -> Optional[str]:
    """Return the trimmed heading text if `line` is a heading of `level`, else None."""
    m = heading_pattern(level).match(line.rstrip())
    if not m:
        return None
    name = m.group(1).strip()
    return name or None


def format_heading(title: str, level: int = SECTION_HEADING_LEVEL) -> str:
    return f"{'#' * level} {title}"


def detect_frontmatter(lines: Sequence[str]) -> LineRange:
    """Range of the leading YAML block, or [0, 0) when absent or unterminated."""
    if not lines or lines[0] != YAML_FM_DELIM:
        return LineRange(0, 0)
    for k in range(1, len(lines)):
        if lines[k] == YAML_FM_DELIM:
            return LineRange(0, k + 1)
    # unterminated: common while typing, parse as plain body
    return LineRange(0, 0)


def parse_sections(
    lines: Sequence[str],
    level: int = SECTION_HEADING_LEVEL,
    frontmatter: Optional[LineRange] = None,
) -> List[Section]:
    """Partition the lines below the frontmatter into heading-delimited sections.

    Lines between the frontmatter and the first heading belong to no section
    (see preamble_range). Never raises.
    """
    if frontmatter is None:
        frontmatter = detect_frontmatter(lines)
    heads: List[Tuple[int, str]] = []
    for i in range(frontmatter.end, len(lines)):
        name = heading_name(lines[i], level)
        if name is not None:
            heads.append((i, name))

    sections: List[Section] = []
    for n, (start, name) in enumerate(heads):
        end = heads[n + 1][0] if n + 1 < len(heads) else len(lines)
        sections.append(
            Section(
                name=name,
                start_line=start,
                end_line=end,
                heading_line=lines[start],
                lines=tuple(lines[start + 1:end]),
            )
        )
    return sections


def parse_text(text: str, level: int = SECTION_HEADING_LEVEL) -> Tuple[List[str], LineRange, List[Section]]:
    lines = split_lines(text)
    fm = detect_frontmatter(lines)
    return lines, fm, parse_sections(lines, level, fm)


def preamble_range(sections: Sequence[Section], frontmatter: LineRange, line_count: int) -> LineRange:
    """Lines after the frontmatter and before the first heading."""
    end = sections[0].start_line if sections else line_count
    return LineRange(frontmatter.end, end)


def reconstruct(lines: Sequence[str], frontmatter: LineRange, sections: Sequence[Section]) -> List[str]:
    """Rebuild the line list from its parts: frontmatter, preamble, sections."""
    pre = preamble_range(sections, frontmatter, len(lines))
    out = list(lines[frontmatter.start:frontmatter.end])
    out.extend(lines[pre.start:pre.end])
    for s in sections:
        out.append(s.heading_line)
        out.extend(s.lines)
    return out


def split_frontmatter(raw: str) -> Tuple[Dict, str]:
    """Extract YAML frontmatter dict and return (fm, body)."""
    lines = split_lines(raw)
    fm_range = detect_frontmatter(lines)
    if fm_range.empty:
        return {}, raw
    yaml_text = join_lines(lines[1:fm_range.end - 1])
    body = join_lines(lines[fm_range.end:])
    return yaml_load(yaml_text), body


def get_layout_name(frontmatter: Dict[str, Any], key: str = LAYOUT_KEY) -> Optional[str]:
    val = frontmatter.get(key)
    if val is None:
        return None
    val = str(val).strip()
    return val or None


def sanitize_file_name(name: str) -> str:
    """Drop characters forbidden in file names; collapse whitespace; trim."""
    cleaned = INVALID_FILENAME_CHARS.sub("", name)
    return re.sub(r"\s+", " ", cleaned).strip()


def make_frontmatter(base: Dict, layout_key: str = LAYOUT_KEY) -> str:
    # Keep order readable; minimal YAML generation
    keys = [layout_key, "created", "type", "layout-type", "tags"]
    lines = [YAML_FM_DELIM]
    for k in keys:
        v = base.get(k)
        if v is None:
            continue
        if isinstance(v, list):
            lines.append(f"{k}:")
            for item in v:
                lines.append(f"- {item}")
        else:
            lines.append(f"{k}: {v}")
    lines.append(YAML_FM_DELIM)
    return "\n".join(lines) + "\n"


def build_board_note_text(
    frontmatter: Dict,
    title: str,
    section_titles: Sequence[str],
    description: Optional[str] = None,
    custom_content: Optional[Dict[str, str]] = None,
    level: int = SECTION_HEADING_LEVEL,
    layout_key: str = LAYOUT_KEY,
) -> str:
    fm = dict(frontmatter)
    fm.setdefault("type", NOTE_TYPE)
    parts = [make_frontmatter(fm, layout_key), f"# {title}\n"]
    if description:
        parts.append(f"> {description}\n")
    custom_content = custom_content or {}
    for t in section_titles:
        body = custom_content.get(t, "").strip("\n")
        parts.append(f"{format_heading(t, level)}\n\n{body}\n" if body else f"{format_heading(t, level)}\n")
    return "\n".join(parts)
