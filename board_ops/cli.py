from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich import box

from .config import BoardConfig
from .edit import add_missing_sections, analyze_file
from .errors import BoardError
from .indexer import BoardIndex
from .layout import default_registry

console = Console()


def cmd_layouts(args: argparse.Namespace, config: BoardConfig) -> int:
    table = Table(title="Layouts", box=box.SIMPLE)
    table.add_column("Name", style="cyan")
    table.add_column("Display name")
    table.add_column("Category")
    table.add_column("Sections")
    for info in default_registry().all_info():
        table.add_row(info.name, info.display_name, info.category, ", ".join(info.sections))
    console.print(table)
    return 0


def cmd_check(args: argparse.Namespace, config: BoardConfig) -> int:
    analysis = asyncio.run(analyze_file(args.file, config=config))
    table = Table(title=f"{args.file} ({analysis.layout_name})", box=box.SIMPLE)
    table.add_column("Section")
    table.add_column("Status")
    for block, section in analysis.match.matched:
        table.add_row(block.title, f"[green]ok[/green] (line {section.start_line + 1})")
    for title in analysis.match.missing_titles:
        table.add_row(title, "[red]missing[/red]")
    for name in analysis.match.extra_sections:
        table.add_row(name, "[yellow]extra[/yellow]")
    console.print(table)
    return 1 if analysis.match.missing_titles else 0


def cmd_fix(args: argparse.Namespace, config: BoardConfig) -> int:
    res = asyncio.run(add_missing_sections(args.file, config=config, dry_run=not args.write))
    if not res["added"]:
        console.print("[green]All sections present[/green]")
        return 0
    if args.write:
        console.print(f"[green]Added {len(res['added'])} section(s):[/green] {', '.join(res['added'])}")
    else:
        console.print(res["diff"], markup=False, highlight=False)
        console.print("[dim]dry run, pass --write to apply[/dim]")
    return 0


def cmd_scan(args: argparse.Namespace, config: BoardConfig) -> int:
    idx = BoardIndex(args.root, config=config)
    asyncio.run(idx.build())
    notes = idx.with_missing() if args.missing else idx.all()
    table = Table(title=f"Board notes under {args.root}", box=box.SIMPLE)
    table.add_column("Note", style="cyan")
    table.add_column("Layout")
    table.add_column("Missing")
    table.add_column("Extra")
    for m in notes:
        missing = m.error or ", ".join(m.missing_titles)
        table.add_row(m.title, m.layout_name, missing, ", ".join(m.extra_sections))
    console.print(table)
    return 1 if idx.with_missing() else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="board-ops", description="Keep markdown board notes in sync with their layouts")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("layouts", help="list available layouts")
    p.set_defaults(func=cmd_layouts)

    p = sub.add_parser("check", help="report matched, missing and extra sections of a note")
    p.add_argument("file")
    p.set_defaults(func=cmd_check)

    p = sub.add_parser("fix", help="append stubs for missing sections")
    p.add_argument("file")
    p.add_argument("--write", action="store_true", help="write the file instead of printing a diff")
    p.set_defaults(func=cmd_fix)

    p = sub.add_parser("scan", help="index all board notes under a folder")
    p.add_argument("root")
    p.add_argument("--missing", action="store_true", help="only list notes with missing sections")
    p.set_defaults(func=cmd_scan)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = BoardConfig.from_env()
        logging.basicConfig(level=logging.DEBUG if args.verbose else config.log_level)
    except ValueError as e:
        console.print(f"[red]bad configuration[/red]: {e}")
        return 2
    try:
        return args.func(args, config)
    except BoardError as e:
        console.print(f"[red]error[/red] ({e.code}): {e}")
        return 2
    except OSError as e:
        console.print(f"[red]error[/red]: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
