"""Markdown body operations: field lookup and rewrite, list and table appends."""
from __future__ import annotations

from plandoc.markdown.fields import (
    PatchResult,
    extract_bold_field,
    extract_field,
    patch_fields,
    replace_field,
)
from plandoc.markdown.scanner import Heading, Line, Section, find_section, iter_lines, scan_headings
from plandoc.markdown.sections import (
    EMPTY_PLACEHOLDER,
    RemovalResult,
    append_list_item,
    append_table_row,
    is_placeholder,
    list_items,
    mark_phase_checkbox,
    mark_requirement_checkbox,
    remove_list_items,
    set_table_cell,
    toggle_checkbox,
)

__all__ = [
    # Scanning
    "Line",
    "Heading",
    "Section",
    "iter_lines",
    "scan_headings",
    "find_section",
    # Fields
    "PatchResult",
    "extract_bold_field",
    "extract_field",
    "replace_field",
    "patch_fields",
    # Appender
    "EMPTY_PLACEHOLDER",
    "RemovalResult",
    "is_placeholder",
    "append_table_row",
    "append_list_item",
    "remove_list_items",
    "list_items",
    "set_table_cell",
    "toggle_checkbox",
    "mark_phase_checkbox",
    "mark_requirement_checkbox",
]
