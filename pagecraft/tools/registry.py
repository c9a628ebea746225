"""
Tool Registry for pagecraft.

This module defines the registry of agent-facing tools: their names,
descriptions, handlers and required parameters. Invoking a tool through
the registry checks required parameters before the handler runs.
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..store.base import BlockStore
from . import blocks, pages, tables

# Handler arguments supplied by Python callers only, never by tool parameters
INJECTED_PARAMS = ("compiler", "locator", "replacer", "merger", "resolver", "now")


@dataclass
class ToolDefinition:
    """
    Definition of an agent-facing tool.
    """
    name: str
    description: str
    handler: Callable[..., Dict[str, Any]]
    required_params: List[str] = field(default_factory=list)

    @property
    def parameters(self) -> List[str]:
        """Names of the parameters the handler accepts, besides the store."""
        names = list(inspect.signature(self.handler).parameters)
        return [name for name in names[1:] if name not in INJECTED_PARAMS]


class ToolRegistry:
    """
    Registry of all available tools.
    """

    def __init__(self):
        """Initialize the tool registry with default tools."""
        self._tools: Dict[str, ToolDefinition] = {}
        self._register_default_tools()

    def _register_default_tools(self):
        """Register the tools pagecraft ships with."""

        self.register_tool(ToolDefinition(
            name="append-content",
            description="Compile block markup (h1:, -, [], |tables|, callout: ...) and append it to a page or block",
            handler=blocks.append_content,
            required_params=["container_id", "content"],
        ))

        self.register_tool(ToolDefinition(
            name="update-block",
            description="Replace the text of a single text block, optionally setting a to-do's checked state",
            handler=blocks.update_block,
            required_params=["block_id", "content"],
        ))

        self.register_tool(ToolDefinition(
            name="delete-blocks",
            description="Delete blocks by id, by section name, or clear the whole page",
            handler=blocks.delete_blocks,
            required_params=["page_id"],
        ))

        self.register_tool(ToolDefinition(
            name="replace-section",
            description="Replace a named section (header and content) with new block markup",
            handler=blocks.replace_section,
            required_params=["page_id", "section_name", "content"],
        ))

        self.register_tool(ToolDefinition(
            name="add-activity-log",
            description="Add a timestamped entry to the page's Activity Log, grouped by date",
            handler=blocks.add_activity_log,
            required_params=["page_id", "entry"],
        ))

        self.register_tool(ToolDefinition(
            name="complete-todo",
            description="Check off the first to-do containing the given text and log the completion",
            handler=blocks.complete_todo,
            required_params=["page_id", "item_text"],
        ))

        self.register_tool(ToolDefinition(
            name="page-outline",
            description="One line per block summary of a page's structure",
            handler=blocks.get_page_outline,
            required_params=["page_id"],
        ))

        self.register_tool(ToolDefinition(
            name="add-table-row",
            description="Append a row to a table, fitted to the table width",
            handler=tables.add_table_row,
            required_params=["table_id", "cells"],
        ))

        self.register_tool(ToolDefinition(
            name="update-table-row",
            description="Replace the cells of a table row",
            handler=tables.update_table_row,
            required_params=["row_id", "cells"],
        ))

        self.register_tool(ToolDefinition(
            name="add-table-column",
            description="Add a column to a table; the header row gets the column name",
            handler=tables.add_table_column,
            required_params=["table_id", "column_name"],
        ))

        self.register_tool(ToolDefinition(
            name="create-page",
            description="Create a page with fuzzy-matched properties, an icon and initial content",
            handler=pages.create_page,
            required_params=["title"],
        ))

        self.register_tool(ToolDefinition(
            name="update-page",
            description="Update page properties with fuzzy matching and relation append/remove",
            handler=pages.update_page,
            required_params=["page_id"],
        ))

    def register_tool(self, tool: ToolDefinition) -> None:
        """
        Register a new tool definition.

        Args:
            tool: The tool definition to register
        """
        self._tools[tool.name] = tool

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """
        Get a tool definition by name.

        Args:
            name: The name of the tool

        Returns:
            The tool definition or None if not found
        """
        return self._tools.get(name)

    def list_tools(self) -> List[str]:
        """
        List all registered tool names.

        Returns:
            List of tool names
        """
        return list(self._tools.keys())

    def invoke(self, name: str, store: BlockStore, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Invoke a tool by name.

        Args:
            name: The tool to run
            store: Block store passed to the handler
            params: Tool parameters

        Returns:
            The tool's result dictionary, or an error result for unknown
            tools, missing required parameters or unknown parameters
        """
        tool = self.get_tool(name)
        if tool is None:
            return {"success": False, "error": f"Unknown tool: {name}"}

        for param in tool.required_params:
            value = params.get(param)
            if value is None or value == "" or value == []:
                return {"success": False, "error": f"{param} required"}

        unknown = sorted(set(params) - set(tool.parameters))
        if unknown:
            return {"success": False, "error": f"Unknown parameter(s) for {name}: {', '.join(unknown)}"}

        logging.info(f"Invoking tool {name}")
        return tool.handler(store, **params)


# Global tool registry instance
tool_registry = ToolRegistry()
