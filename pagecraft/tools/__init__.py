"""Agent-facing tools for pagecraft."""

from .blocks import (
    append_content, update_block, delete_blocks, replace_section,
    add_activity_log, complete_todo, get_page_outline, summarize_blocks
)
from .tables import add_table_row, update_table_row, add_table_column
from .pages import create_page, update_page, apply_relation_mode, checklist_scaffold
from .registry import ToolDefinition, ToolRegistry, tool_registry

__all__ = [
    "append_content",
    "update_block",
    "delete_blocks",
    "replace_section",
    "add_activity_log",
    "complete_todo",
    "get_page_outline",
    "summarize_blocks",
    "add_table_row",
    "update_table_row",
    "add_table_column",
    "create_page",
    "update_page",
    "apply_relation_mode",
    "checklist_scaffold",
    "ToolDefinition",
    "ToolRegistry",
    "tool_registry",
]
