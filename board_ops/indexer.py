from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from .config import BoardConfig
from .const import MD_GLOB
from .errors import BoardError
from .layout import LayoutRegistry, default_registry
from .match import match_sections
from .mkd import get_layout_name, parse_text, split_frontmatter
from .types import BoardNoteMeta
from .utils import read_text, run_in_thread, split_bom

logger = logging.getLogger(__name__)


class BoardIndex:
    """In-memory index of the board notes under a vault root."""

    def __init__(
        self,
        root: str | Path,
        registry: Optional[LayoutRegistry] = None,
        config: Optional[BoardConfig] = None,
    ) -> None:
        self.root = Path(root)
        self.registry = registry or default_registry()
        self.config = config or BoardConfig()
        self.notes_by_path: Dict[str, BoardNoteMeta] = {}

    def index_text(self, path: Path, text: str) -> Optional[BoardNoteMeta]:
        """Meta for one note, or None when it declares no layout."""
        fm, _ = split_frontmatter(text)
        name = get_layout_name(fm, self.config.layout_key)
        if not name:
            return None
        _, _, sections = parse_text(text, self.config.heading_level)
        meta = BoardNoteMeta(
            title=path.stem,
            path=str(path),
            layout_name=name,
            section_names=[s.name for s in sections],
            missing_titles=[],
            extra_sections=[],
        )
        try:
            blocks = self.registry.get(name)
        except BoardError as e:
            logger.warning("%s: %s", path, e)
            meta.error = str(e)
            return meta
        match = match_sections(blocks, sections)
        meta.missing_titles = match.missing_titles
        meta.extra_sections = match.extra_sections
        return meta

    async def build(self) -> None:
        paths = await run_in_thread(lambda: sorted(self.root.glob(MD_GLOB)))
        metas: List[BoardNoteMeta] = []
        for p in paths:
            if not p.is_file():
                continue
            try:
                _, text = split_bom(await run_in_thread(read_text, p))
            except (OSError, BoardError) as e:
                logger.warning("skipping unreadable note %s: %s", p, e)
                continue
            meta = self.index_text(p, text)
            if meta is not None:
                metas.append(meta)
        self.notes_by_path = {m.path: m for m in metas}
        logger.info("indexed %d board note(s) under %s", len(metas), self.root)

    def get(self, path: str) -> BoardNoteMeta | None:
        return self.notes_by_path.get(path)

    def all(self) -> List[BoardNoteMeta]:
        return list(self.notes_by_path.values())

    def with_missing(self) -> List[BoardNoteMeta]:
        return [m for m in self.notes_by_path.values() if m.missing_titles]
