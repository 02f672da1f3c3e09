from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple

from .const import SECTION_HEADING_LEVEL, YAML_FM_DELIM
from .errors import ContractViolation
from .match import match_sections
from .mkd import format_heading, heading_name, join_lines, parse_text, split_lines
from .types import Block, LineRange, ResolveResult, Section

# body lines for a stub; must not contain "---" or headings of the section level
StubBody = Callable[[str], Sequence[str]]


def make_stub(title: str, level: int = SECTION_HEADING_LEVEL, body: Optional[Sequence[str]] = None) -> str:
    lines = [format_heading(title, level), ""]
    if body:
        lines.extend(body)
        lines.append("")
    return join_lines(lines)


def _check_stub_body(title: str, body: Sequence[str], level: int) -> None:
    for line in body:
        if line == YAML_FM_DELIM or heading_name(line, level) is not None or "\n" in line:
            raise ContractViolation(
                f'stub body for "{title}" contains a line that would change the section structure: {line!r}',
                {"title": title, "line": line},
            )


def resolve_missing(
    blocks: Sequence[Block],
    sections: Sequence[Section],
    frontmatter: LineRange,
    level: int = SECTION_HEADING_LEVEL,
    *,
    line_count: int,
    stub_body: Optional[StubBody] = None,
) -> ResolveResult:
    """Stubs for every block without a section, to be appended at the end.

    Append-only: the frontmatter and existing sections are never moved, so
    the insertion point is always the end of the document.
    """
    titles = match_sections(blocks, sections).missing_titles
    stubs = []
    for t in titles:
        body = list(stub_body(t)) if stub_body else None
        if body:
            _check_stub_body(t, body, level)
        stubs.append(make_stub(t, level, body))
    return ResolveResult(insertion_line=max(line_count, frontmatter.end), stubs=stubs, titles=list(titles))


def apply_stubs(text: str, result: ResolveResult) -> str:
    if not result.stubs:
        return text
    joined = "\n".join(result.stubs)
    if text == "":
        return joined
    if split_lines(text)[-1].strip() == "":
        return text + "\n" + joined
    # one blank line between the existing content and the first stub
    return text + "\n\n" + joined


def ensure_sections(
    text: str,
    blocks: Sequence[Block],
    level: int = SECTION_HEADING_LEVEL,
    stub_body: Optional[StubBody] = None,
) -> Tuple[str, ResolveResult]:
    """Append stubs for missing block titles and verify none remain missing."""
    lines, fm, sections = parse_text(text, level)
    result = resolve_missing(blocks, sections, fm, level, line_count=len(lines), stub_body=stub_body)
    if not result.stubs:
        return text, result
    new_text = apply_stubs(text, result)
    _, _, new_sections = parse_text(new_text, level)
    still_missing = match_sections(blocks, new_sections).missing_titles
    if still_missing:
        raise ContractViolation(
            f"titles still missing after adding sections: {', '.join(still_missing)}",
            {"missing_titles": still_missing},
        )
    return new_text, result
