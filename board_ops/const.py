from __future__ import annotations

import re

GRID_WIDTH = 24
GRID_HEIGHT = 100

SECTION_HEADING_LEVEL = 2  # "## Title"
YAML_FM_DELIM = "---"
LAYOUT_KEY = "agile-board"  # frontmatter key naming the layout of a note
LAYOUT_NAME_PATTERN = re.compile(r"^layout_[a-z0-9_]+$", re.IGNORECASE)

INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')
MD_GLOB = "**/*.md"

NOTE_TYPE = "agile-board"
DEFAULT_CATEGORY = "custom"
