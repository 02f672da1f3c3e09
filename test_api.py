"""Async tool-call API, file operations, config and CLI."""

import asyncio
from pathlib import Path

import pytest

from board_ops import (
    board_add_missing_sections,
    board_analyze_note,
    board_create_note,
    board_list_layouts,
    board_parse_text,
    board_scan_vault,
    board_update_section,
    board_validate_layout,
)
from board_ops.cli import main
from board_ops.config import BoardConfig
from board_ops.mkd import parse_text, split_frontmatter

PARTIAL = "---\nagile-board: layout_simple\n---\n\n## Ideas\n- try rich tables\n"


def write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def test_list_layouts():
    res = asyncio.run(board_list_layouts())
    assert res["ok"]
    assert res["meta"]["count"] == 9
    names = [i["name"] for i in res["data"]]
    assert "layout_eisenhower" in names


def test_validate_layout_reports_violations_as_data():
    res = asyncio.run(board_validate_layout([
        {"title": "A", "x": 0, "y": 0, "w": 12, "h": 12},
        {"title": "B", "x": 0, "y": 0, "w": 12, "h": 12},
    ]))
    assert res["ok"]
    assert res["data"]["ok"] is False
    assert res["meta"]["count"] == 144
    assert res["data"]["violations"][0]["kind"] == "overlap"
    assert res["data"]["violations"][0]["other_index"] == 0


def test_parse_text():
    res = asyncio.run(board_parse_text("---\nx: 1\n---\n\n## S\nbody"))
    assert res["ok"]
    assert res["data"]["frontmatter"] == {"start": 0, "end": 3}
    assert res["data"]["preamble"] == {"start": 3, "end": 4}
    assert res["data"]["sections"][0]["name"] == "S"
    assert res["data"]["sections"][0]["lines"] == ["body"]


def test_create_note(tmp_path):
    res = asyncio.run(board_create_note(str(tmp_path), "layout_kanban", title="Sprint: 1"))
    assert res["ok"], res
    path = Path(res["data"]["path"])
    assert path.name == "Sprint 1.md"
    text = read(path)
    fm, _ = split_frontmatter(text)
    assert fm["agile-board"] == "layout_kanban"
    assert fm["type"] == "agile-board"
    _, _, sections = parse_text(text, 2)
    assert [s.name for s in sections] == ["To Do", "In Progress", "Done"]

    again = asyncio.run(board_create_note(str(tmp_path), "layout_kanban", title="Sprint: 1"))
    assert not again["ok"]
    assert again["meta"]["reason"] == "exists"


def test_create_note_unknown_layout(tmp_path):
    res = asyncio.run(board_create_note(str(tmp_path), "layout_nope"))
    assert not res["ok"]
    assert res["meta"]["code"] == "LAYOUT_NOT_FOUND"
    bad = asyncio.run(board_create_note(str(tmp_path), "kanban"))
    assert bad["meta"]["code"] == "VALIDATION_ERROR"


def test_analyze_note(tmp_path):
    path = write(tmp_path / "board.md", PARTIAL + "## Scratch\n")
    res = asyncio.run(board_analyze_note(str(path)))
    assert res["ok"]
    assert res["data"]["layout_name"] == "layout_simple"
    assert res["data"]["missing_titles"] == ["Actions"]
    assert res["data"]["extra_sections"] == ["Scratch"]


def test_analyze_note_without_layout(tmp_path):
    path = write(tmp_path / "plain.md", "## Ideas\n")
    res = asyncio.run(board_analyze_note(str(path)))
    assert not res["ok"]
    assert res["meta"]["code"] == "VALIDATION_ERROR"


def test_add_missing_sections_dry_run_then_write(tmp_path):
    path = write(tmp_path / "board.md", PARTIAL)
    res = asyncio.run(board_add_missing_sections(str(path)))
    assert res["ok"]
    assert res["data"]["added"] == ["Actions"]
    assert "+## Actions" in res["data"]["diff"]
    assert read(path) == PARTIAL

    res = asyncio.run(board_add_missing_sections(str(path), dry_run=False))
    assert res["data"]["written"]
    assert read(path) == PARTIAL + "\n## Actions\n"
    assert read(tmp_path / "board.md.bak") == PARTIAL

    res = asyncio.run(board_add_missing_sections(str(path), dry_run=False))
    assert res["data"]["added"] == []
    assert res["data"]["written"] is False


def test_add_missing_sections_without_backup(tmp_path):
    path = write(tmp_path / "board.md", PARTIAL)
    config = BoardConfig(backup=False)
    asyncio.run(board_add_missing_sections(str(path), dry_run=False, config=config))
    assert not (tmp_path / "board.md.bak").exists()


def test_update_section(tmp_path):
    path = write(tmp_path / "board.md", PARTIAL + "\n## Actions\n- old\n")
    res = asyncio.run(board_update_section(str(path), "ideas", "- new idea\n", dry_run=False))
    assert res["ok"]
    assert res["data"]["changed"]
    assert read(path) == "---\nagile-board: layout_simple\n---\n\n## Ideas\n- new idea\n\n## Actions\n- old\n"


def test_update_missing_section(tmp_path):
    path = write(tmp_path / "board.md", PARTIAL)
    res = asyncio.run(board_update_section(str(path), "Backlog", "x", dry_run=False))
    assert not res["ok"]
    assert res["meta"]["code"] == "CONTRACT_VIOLATION"
    assert read(path) == PARTIAL


def test_crlf_lines_survive_an_update(tmp_path):
    path = tmp_path / "board.md"
    path.write_bytes(b"---\r\nagile-board: layout_simple\r\n---\r\n## Ideas\r\nold\r\n## Actions\r\nkeep\r\n")
    asyncio.run(board_update_section(str(path), "Ideas", ["new\r"], dry_run=False))
    assert path.read_bytes() == b"---\r\nagile-board: layout_simple\r\n---\r\n## Ideas\r\nnew\r\n## Actions\r\nkeep\r\n"


def test_invalid_utf8_note_is_rejected_untouched(tmp_path):
    path = tmp_path / "board.md"
    raw = b"---\nagile-board: layout_simple\n---\n## Ideas\nold\n## Actions\ncaf\xe9 latin-1\n"
    path.write_bytes(raw)
    res = asyncio.run(board_update_section(str(path), "Ideas", ["new"], dry_run=False))
    assert not res["ok"]
    assert res["meta"]["code"] == "VALIDATION_ERROR"
    assert res["meta"]["context"]["offset"] == raw.index(b"\xe9")
    res = asyncio.run(board_add_missing_sections(str(path), dry_run=False))
    assert not res["ok"]
    assert path.read_bytes() == raw
    assert not (tmp_path / "board.md.bak").exists()


def test_bom_is_kept_on_write(tmp_path):
    path = tmp_path / "board.md"
    path.write_bytes(b"\xef\xbb\xbf" + PARTIAL.encode("utf-8"))
    res = asyncio.run(board_analyze_note(str(path)))
    assert res["ok"], res
    assert res["data"]["missing_titles"] == ["Actions"]

    res = asyncio.run(board_add_missing_sections(str(path), dry_run=False))
    assert res["data"]["added"] == ["Actions"]
    assert path.read_bytes() == b"\xef\xbb\xbf" + (PARTIAL + "\n## Actions\n").encode("utf-8")

    asyncio.run(board_update_section(str(path), "Actions", ["- ship"], dry_run=False))
    assert path.read_bytes().startswith(b"\xef\xbb\xbf---\n")
    assert read(path).endswith("## Actions\n- ship")


def test_scan_vault(tmp_path):
    write(tmp_path / "complete.md", PARTIAL + "## Actions\n")
    write(tmp_path / "partial.md", PARTIAL)
    write(tmp_path / "plain.md", "# not a board\n")
    (tmp_path / "sub").mkdir()
    write(tmp_path / "sub" / "unknown.md", "---\nagile-board: layout_missing\n---\n")

    res = asyncio.run(board_scan_vault(str(tmp_path)))
    assert res["ok"]
    assert res["meta"]["count"] == 3
    by_title = {n["title"]: n for n in res["data"]}
    assert by_title["complete"]["missing_titles"] == []
    assert by_title["partial"]["missing_titles"] == ["Actions"]
    assert by_title["unknown"]["error"]

    res = asyncio.run(board_scan_vault(str(tmp_path), only_missing=True))
    assert [n["title"] for n in res["data"]] == ["partial"]


def test_scan_vault_bad_root(tmp_path):
    res = asyncio.run(board_scan_vault(str(tmp_path / "nope")))
    assert not res["ok"]


def test_scan_vault_reads_bom_and_skips_undecodable_notes(tmp_path):
    (tmp_path / "bom.md").write_bytes(b"\xef\xbb\xbf" + PARTIAL.encode("utf-8"))
    (tmp_path / "latin.md").write_bytes(PARTIAL.encode("utf-8") + b"caf\xe9\n")
    res = asyncio.run(board_scan_vault(str(tmp_path)))
    assert res["ok"]
    assert [n["title"] for n in res["data"]] == ["bom"]
    assert res["data"][0]["missing_titles"] == ["Actions"]


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("BOARD_HEADING_LEVEL", "3")
    monkeypatch.setenv("BOARD_LAYOUT_KEY", "board")
    monkeypatch.setenv("BOARD_BACKUP", "no")
    monkeypatch.setenv("BOARD_LOG_LEVEL", "debug")
    config = BoardConfig.from_env()
    assert config.heading_level == 3
    assert config.layout_key == "board"
    assert config.backup is False
    assert config.log_level == "DEBUG"


def test_config_rejects_bad_level():
    with pytest.raises(ValueError):
        BoardConfig(heading_level=7)


def test_custom_heading_level_and_key(tmp_path):
    config = BoardConfig(heading_level=3, layout_key="board")
    path = write(tmp_path / "b.md", "---\nboard: layout_simple\n---\n### Ideas\n")
    res = asyncio.run(board_add_missing_sections(str(path), dry_run=False, config=config))
    assert res["data"]["added"] == ["Actions"]
    assert read(path).endswith("### Ideas\n\n### Actions\n")


def test_cli(tmp_path):
    partial = write(tmp_path / "partial.md", PARTIAL)
    assert main(["layouts"]) == 0
    assert main(["check", str(partial)]) == 1
    assert main(["fix", str(partial)]) == 0
    assert read(partial) == PARTIAL
    assert main(["fix", str(partial), "--write"]) == 0
    assert main(["check", str(partial)]) == 0
    assert main(["scan", str(tmp_path), "--missing"]) == 0
    assert main(["check", str(tmp_path / "absent.md")]) == 2


@pytest.mark.parametrize("var,value", [("BOARD_HEADING_LEVEL", "two"), ("BOARD_HEADING_LEVEL", "9"),
                                       ("BOARD_LOG_LEVEL", "loud")])
def test_cli_bad_environment_exits_with_error(monkeypatch, var, value):
    monkeypatch.setenv(var, value)
    assert main(["layouts"]) == 2


def test_config_rejects_unknown_log_level():
    with pytest.raises(ValueError):
        BoardConfig(log_level="loud")
