"""Keep markdown board notes and their grid layouts in sync.

Engine (pure, synchronous): frontmatter detection, section parsing, layout
validation, section matching, missing-section resolution and section
patching. The async `board_*` functions wrap it for files on disk.
"""
from .api import (
    board_add_missing_sections,
    board_analyze_note,
    board_create_note,
    board_list_layouts,
    board_parse_text,
    board_scan_vault,
    board_update_section,
    board_validate_layout,
)
from .config import BoardConfig
from .const import GRID_HEIGHT, GRID_WIDTH, SECTION_HEADING_LEVEL
from .errors import BoardError, ContractViolation, LayoutInvalid, LayoutNotFound
from .layout import LayoutRegistry, default_registry, validate_layout
from .match import match_sections, normalize_title
from .mkd import detect_frontmatter, join_lines, parse_sections, parse_text, preamble_range, split_lines
from .patch import patch_section, patch_text, replace_section_body
from .resolve import apply_stubs, ensure_sections, resolve_missing
from .types import Block, LineRange, MatchResult, ResolveResult, Section, ValidationResult, Violation

__all__ = [
    "GRID_HEIGHT",
    "GRID_WIDTH",
    "SECTION_HEADING_LEVEL",
    "Block",
    "BoardConfig",
    "BoardError",
    "ContractViolation",
    "LayoutInvalid",
    "LayoutNotFound",
    "LayoutRegistry",
    "LineRange",
    "MatchResult",
    "ResolveResult",
    "Section",
    "ValidationResult",
    "Violation",
    "apply_stubs",
    "board_add_missing_sections",
    "board_analyze_note",
    "board_create_note",
    "board_list_layouts",
    "board_parse_text",
    "board_scan_vault",
    "board_update_section",
    "board_validate_layout",
    "default_registry",
    "detect_frontmatter",
    "ensure_sections",
    "join_lines",
    "match_sections",
    "normalize_title",
    "parse_sections",
    "parse_text",
    "patch_section",
    "patch_text",
    "preamble_range",
    "replace_section_body",
    "resolve_missing",
    "split_lines",
    "validate_layout",
]
