"""Matching layout blocks to sections and appending missing ones."""

import pytest

from board_ops.errors import ContractViolation
from board_ops.match import match_sections, normalize_title
from board_ops.mkd import parse_text, split_lines
from board_ops.resolve import apply_stubs, ensure_sections, make_stub, resolve_missing
from board_ops.types import Block, Section


def blocks(*titles):
    return [Block(t, i * 2, 0, 2, 2) for i, t in enumerate(titles)]


def missing_after_parse(text, layout, level=2):
    _, _, sections = parse_text(text, level)
    return match_sections(layout, sections).missing_titles


@pytest.mark.parametrize("title", ["Todo", " todo ", "TODO"])
def test_normalized_titles_match(title):
    section = Section(name=" todo ", start_line=0, end_line=1, heading_line="## todo")
    res = match_sections([Block(title, 0, 0, 1, 1)], [section])
    assert res.missing_titles == []
    assert res.extra_sections == []
    assert res.matched[0][1] is section


def test_normalize_title():
    assert normalize_title("  In Progress ") == "in progress"


def test_first_section_wins_and_later_duplicates_are_extra():
    _, _, sections = parse_text("## A\nx\n## a\ny\n## Other", 2)
    res = match_sections(blocks("A"), sections)
    assert res.matched[0][1].start_line == 0
    assert res.extra_sections == ["a", "Other"]


def test_repeated_block_titles_claim_distinct_sections():
    _, _, sections = parse_text("## Notes\n## Notes", 2)
    res = match_sections(blocks("Notes", "Notes"), sections)
    assert [s.start_line for _, s in res.matched] == [0, 1]
    assert res.missing_titles == []


def test_missing_titles_keep_layout_order():
    text = "## A\nfoo"
    lines, fm, sections = parse_text(text, 2)
    layout = blocks("A", "B", "C")
    assert match_sections(layout, sections).missing_titles == ["B", "C"]

    res = resolve_missing(layout, sections, fm, 2, line_count=len(lines))
    assert res.titles == ["B", "C"]
    assert res.stubs == ["## B\n", "## C\n"]
    assert res.insertion_line == 2
    assert apply_stubs(text, res) == "## A\nfoo\n\n## B\n\n## C\n"


def test_apply_stubs_reuses_trailing_blank_line():
    layout = blocks("A", "B")
    new_text, _ = ensure_sections("## A\nfoo\n", layout)
    assert new_text == "## A\nfoo\n\n## B\n"


def test_apply_stubs_on_empty_document():
    new_text, res = ensure_sections("", blocks("A", "B"))
    assert new_text == "## A\n\n## B\n"
    assert res.insertion_line == 1


def test_apply_nothing_missing_returns_text():
    text = "## A\n## B"
    new_text, res = ensure_sections(text, blocks("a", "b"))
    assert new_text == text
    assert res.stubs == []


def test_frontmatter_and_existing_content_untouched():
    text = "---\nagile-board: layout_simple\n---\nintro\n## Extra\nkeep me"
    new_text, res = ensure_sections(text, blocks("Ideas", "Actions"))
    assert new_text.startswith(text)
    assert split_lines(new_text)[:3] == ["---", "agile-board: layout_simple", "---"]
    _, _, sections = parse_text(new_text, 2)
    assert [s.name for s in sections] == ["Extra", "Ideas", "Actions"]
    assert match_sections(blocks("Ideas", "Actions"), sections).extra_sections == ["Extra"]


def test_frontmatter_only_document():
    text = "---\nagile-board: layout_simple\n---"
    new_text, _ = ensure_sections(text, blocks("Ideas", "Actions"))
    assert new_text == text + "\n\n## Ideas\n\n## Actions\n"


@pytest.mark.parametrize("text", [
    "",
    "\n",
    "## A\nfoo",
    "---\nx: 1\n---",
    "---\nx: 1\n",
    "intro only\n\n",
    "## c\n## b\n",
    "## A\r\nbody\r\n",
])
def test_resolve_is_idempotent(text):
    layout = blocks("A", "B", "C")
    once, _ = ensure_sections(text, layout)
    assert missing_after_parse(once, layout) == []
    twice, res = ensure_sections(once, layout)
    assert twice == once
    assert res.stubs == []


def test_resolve_at_level_one():
    layout = blocks("A", "B")
    new_text, _ = ensure_sections("# A\ntext", layout, level=1)
    assert new_text == "# A\ntext\n\n# B\n"
    assert missing_after_parse(new_text, layout, level=1) == []


def test_stub_body():
    new_text, _ = ensure_sections("## A", blocks("A", "B"), stub_body=lambda t: ["- [ ] first " + t])
    assert new_text == "## A\n\n## B\n\n- [ ] first B\n"
    assert make_stub("X", 3) == "### X\n"


@pytest.mark.parametrize("line", ["---", "## Sneaky", "ok\n## Sneaky"])
def test_stub_body_cannot_change_section_structure(line):
    # "---" would close the unterminated block above and swallow the stub
    with pytest.raises(ContractViolation) as exc:
        ensure_sections("---\nfoo", blocks("A"), stub_body=lambda t: [line])
    assert exc.value.context == {"title": "A", "line": line}


def test_stub_body_allows_other_heading_levels():
    new_text, _ = ensure_sections("## A", blocks("A", "B"), stub_body=lambda t: ["### detail", "----"])
    assert new_text == "## A\n\n## B\n\n### detail\n----\n"


def test_unresolvable_title_is_a_contract_violation():
    # titles starting with '#' never parse back as headings; the validator rejects them
    with pytest.raises(ContractViolation) as exc:
        ensure_sections("## A", [Block("#tag", 0, 0, 1, 1)])
    assert exc.value.code == "CONTRACT_VIOLATION"
    assert exc.value.context["missing_titles"] == ["#tag"]
