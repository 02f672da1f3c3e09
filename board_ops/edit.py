from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

from .compare import make_diff
from .config import BoardConfig
from .errors import BoardError
from .layout import LayoutRegistry, check_layout_name, default_registry
from .match import match_sections
from .mkd import build_board_note_text, get_layout_name, parse_text, sanitize_file_name, split_frontmatter
from .patch import Body, replace_section_body
from .resolve import ensure_sections
from .types import BoardAnalysis
from .utils import read_text, run_in_thread, split_bom, today_str, write_text

logger = logging.getLogger(__name__)


async def _read_note(p: Path) -> Tuple[str, str]:
    return split_bom(await run_in_thread(read_text, p))


def analyze_text(
    text: str,
    path: str = "",
    registry: Optional[LayoutRegistry] = None,
    config: Optional[BoardConfig] = None,
) -> BoardAnalysis:
    registry = registry or default_registry()
    config = config or BoardConfig()
    fm, _ = split_frontmatter(text)
    name = get_layout_name(fm, config.layout_key)
    if not name:
        raise BoardError(
            f"no '{config.layout_key}' layout declared in frontmatter",
            "VALIDATION_ERROR",
            {"path": path, "field": config.layout_key},
        )
    blocks = registry.get(name)
    _, fm_range, sections = parse_text(text, config.heading_level)
    match = match_sections(blocks, sections)
    logger.debug(
        "analyzed %s: layout=%s sections=%d missing=%d extra=%d",
        path or "<text>", name, len(sections), len(match.missing_titles), len(match.extra_sections),
    )
    return BoardAnalysis(path=path, layout_name=name, frontmatter=fm_range, sections=sections, match=match)


async def analyze_file(
    path: str | Path,
    registry: Optional[LayoutRegistry] = None,
    config: Optional[BoardConfig] = None,
) -> BoardAnalysis:
    p = Path(path)
    _, text = await _read_note(p)
    return analyze_text(text, str(p), registry, config)


async def add_missing_sections(
    path: str | Path,
    registry: Optional[LayoutRegistry] = None,
    config: Optional[BoardConfig] = None,
    dry_run: bool = False,
) -> Dict:
    p = Path(path)
    config = config or BoardConfig()
    bom, text = await _read_note(p)
    analysis = analyze_text(text, str(p), registry, config)
    if analysis.match.complete:
        return {"path": str(p), "added": [], "diff": "", "written": False}

    blocks = (registry or default_registry()).get(analysis.layout_name)
    new_text, result = ensure_sections(text, blocks, config.heading_level)
    diff = make_diff(str(p), text, new_text)
    if not dry_run:
        await run_in_thread(write_text, p, bom + new_text, config.backup)
        logger.info("added %d section(s) to %s: %s", len(result.titles), p, ", ".join(result.titles))
    return {"path": str(p), "added": result.titles, "diff": diff.diff_unified, "written": not dry_run}


async def update_section(
    path: str | Path,
    section_name: str,
    body: Body,
    config: Optional[BoardConfig] = None,
    dry_run: bool = False,
) -> Dict:
    p = Path(path)
    config = config or BoardConfig()
    # always patch against a fresh read; sections from an earlier parse may be stale
    bom, text = await _read_note(p)
    new_text = replace_section_body(text, section_name, body, config.heading_level)
    changed = new_text != text
    diff = make_diff(str(p), text, new_text)
    if changed and not dry_run:
        await run_in_thread(write_text, p, bom + new_text, config.backup)
        logger.info('section "%s" updated in %s', section_name, p)
    return {"path": str(p), "section": section_name, "changed": changed, "diff": diff.diff_unified,
            "written": changed and not dry_run}


async def create_board_note(
    root: str | Path,
    layout_name: str,
    title: Optional[str] = None,
    registry: Optional[LayoutRegistry] = None,
    config: Optional[BoardConfig] = None,
    custom_content: Optional[Dict[str, str]] = None,
    overwrite: bool = False,
) -> Dict:
    root = Path(root)
    registry = registry or default_registry()
    config = config or BoardConfig()
    check_layout_name(layout_name)
    blocks = registry.get(layout_name)
    info = registry.info(layout_name)
    title = title or f"{info.display_name} {today_str()}"
    norm = sanitize_file_name(title)
    if not norm:
        raise BoardError("note title is empty after sanitizing", "VALIDATION_ERROR", {"title": title})
    path = root / f"{norm}.md"
    if path.exists() and not overwrite:
        return {"created": False, "path": str(path), "reason": "exists"}
    fm = {
        config.layout_key: layout_name,
        "created": today_str(),
        "layout-type": info.category,
    }
    text = build_board_note_text(
        fm,
        norm,
        [b.title for b in blocks],
        description=info.description if layout_name in registry.infos else None,
        custom_content=custom_content,
        level=config.heading_level,
        layout_key=config.layout_key,
    )
    await run_in_thread(write_text, path, text, config.backup)
    logger.info("created %s with layout %s (%d sections)", path, layout_name, len(blocks))
    return {"created": True, "path": str(path), "title": norm, "layout_name": layout_name,
            "sections": len(blocks)}
