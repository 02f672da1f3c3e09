from __future__ import annotations

from typing import List, Sequence, Union

from .const import SECTION_HEADING_LEVEL
from .errors import ContractViolation
from .match import normalize_title
from .mkd import heading_name, join_lines, parse_text, split_lines
from .types import Section

Body = Union[str, Sequence[str]]


def _body_lines(body: Body) -> List[str]:
    if isinstance(body, str):
        return split_lines(body)
    return list(body)


def check_section_current(lines: Sequence[str], section: Section, level: int = SECTION_HEADING_LEVEL) -> None:
    """Raise ContractViolation unless `section` still describes `lines`."""
    start, end = section.start_line, section.end_line
    ctx = {"section": section.name, "start_line": start, "end_line": end, "line_count": len(lines)}
    if not 0 <= start < end <= len(lines):
        raise ContractViolation(f'section "{section.name}" range is outside the document', ctx)
    if lines[start] != section.heading_line or heading_name(lines[start], level) != section.name:
        raise ContractViolation(f'section "{section.name}" heading moved; re-parse before patching', ctx)
    if end < len(lines) and heading_name(lines[end], level) is None:
        raise ContractViolation(f'section "{section.name}" end no longer at a heading; re-parse before patching', ctx)
    for i in range(start + 1, end):
        if heading_name(lines[i], level) is not None:
            raise ContractViolation(f'section "{section.name}" now contains heading at line {i}; re-parse before patching', ctx)


def patch_section(
    lines: Sequence[str],
    section: Section,
    new_body: Body,
    level: int = SECTION_HEADING_LEVEL,
) -> List[str]:
    """Replace the body of `section`; every line outside its body is kept as is."""
    check_section_current(lines, section, level)
    return list(lines[:section.start_line + 1]) + _body_lines(new_body) + list(lines[section.end_line:])


def patch_text(text: str, section: Section, new_body: Body, level: int = SECTION_HEADING_LEVEL) -> str:
    return join_lines(patch_section(split_lines(text), section, new_body, level))


def find_section(sections: Sequence[Section], name: str) -> Section:
    want = normalize_title(name)
    for s in sections:
        if normalize_title(s.name) == want:
            return s
    raise ContractViolation(f'section "{name}" not found', {"section": name})


def replace_section_body(text: str, name: str, new_body: Body, level: int = SECTION_HEADING_LEVEL) -> str:
    """Re-parse `text` and replace the body of the first section named `name`."""
    lines, _, sections = parse_text(text, level)
    section = find_section(sections, name)
    return join_lines(patch_section(lines, section, new_body, level))
