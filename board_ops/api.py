from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import BoardConfig
from .edit import add_missing_sections, analyze_file, create_board_note, update_section
from .errors import BoardError
from .indexer import BoardIndex
from .layout import LayoutRegistry, blocks_from_dicts, default_registry, validate_layout
from .mkd import parse_text, preamble_range
from .types import to_json_safe


# ---------------------------
# Helper to standardize result
# ---------------------------
def _ok(data: Any, meta: Dict | None = None) -> Dict:
    return {"ok": True, "data": to_json_safe(data), "error": None, "meta": meta or {}}


def _err(msg: str, meta: Dict | None = None) -> Dict:
    return {"ok": False, "data": None, "error": msg, "meta": meta or {}}


def _board_err(e: BoardError) -> Dict:
    return _err(str(e), meta={"code": e.code, "context": to_json_safe(e.context)})


# ---------------------------
# Public async API (tool-call)
# ---------------------------

async def board_list_layouts(registry: Optional[LayoutRegistry] = None) -> Dict:
    try:
        infos = (registry or default_registry()).all_info()
        return _ok(infos, meta={"count": len(infos)})
    except Exception as e:
        return _err(str(e))


async def board_validate_layout(blocks: List[Dict[str, Any]]) -> Dict:
    """Validate a raw layout definition; violations are data, not an error."""
    try:
        res = validate_layout(blocks_from_dicts(blocks))
        return _ok({"ok": res.ok, "violations": res.violations}, meta={"count": len(res.violations)})
    except Exception as e:
        return _err(str(e))


async def board_parse_text(text: str, heading_level: int = 2) -> Dict:
    try:
        lines, fm, sections = parse_text(text, heading_level)
        return _ok({
            "frontmatter": fm,
            "preamble": preamble_range(sections, fm, len(lines)),
            "sections": sections,
        }, meta={"count": len(sections)})
    except Exception as e:
        return _err(str(e))


async def board_analyze_note(path: str, config: Optional[BoardConfig] = None) -> Dict:
    try:
        analysis = await analyze_file(path, config=config)
        return _ok({
            "path": analysis.path,
            "layout_name": analysis.layout_name,
            "sections": [s.name for s in analysis.sections],
            "missing_titles": analysis.match.missing_titles,
            "extra_sections": analysis.match.extra_sections,
        })
    except BoardError as e:
        return _board_err(e)
    except Exception as e:
        return _err(str(e))


async def board_add_missing_sections(path: str, dry_run: bool = True, config: Optional[BoardConfig] = None) -> Dict:
    try:
        res = await add_missing_sections(path, config=config, dry_run=dry_run)
        return _ok(res, meta={"dry_run": dry_run})
    except BoardError as e:
        return _board_err(e)
    except Exception as e:
        return _err(str(e))


async def board_update_section(
    path: str,
    section: str,
    content: str,
    dry_run: bool = True,
    config: Optional[BoardConfig] = None,
) -> Dict:
    try:
        res = await update_section(path, section, content, config=config, dry_run=dry_run)
        return _ok(res, meta={"dry_run": dry_run})
    except BoardError as e:
        return _board_err(e)
    except Exception as e:
        return _err(str(e))


async def board_create_note(
    root: str,
    layout_name: str,
    title: Optional[str] = None,
    custom_content: Optional[Dict[str, str]] = None,
    overwrite: bool = False,
    config: Optional[BoardConfig] = None,
) -> Dict:
    try:
        result = await create_board_note(
            root, layout_name, title, config=config, custom_content=custom_content, overwrite=overwrite
        )
        if not result.get("created"):
            return _err(f"create failed: {result.get('reason')}", meta=result)
        return _ok(result)
    except BoardError as e:
        return _board_err(e)
    except Exception as e:
        return _err(str(e))


async def board_scan_vault(root: str, only_missing: bool = False, config: Optional[BoardConfig] = None) -> Dict:
    """Index every board note under `root` with its missing sections."""
    try:
        if not Path(root).is_dir():
            return _err(f"not a directory: {root}")
        idx = BoardIndex(root, config=config)
        await idx.build()
        notes = idx.with_missing() if only_missing else idx.all()
        return _ok(notes, meta={"count": len(notes)})
    except Exception as e:
        return _err(str(e))
