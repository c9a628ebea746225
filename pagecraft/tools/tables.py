"""
Table tools for pagecraft.

Rows and columns of an existing table. Every row written has exactly the
table's width.
"""

import logging
from typing import Any, Dict, List

from ..compiler.rich_text import rich_text_compiler
from ..models.blocks import BlockDescriptor, BlockKind, fit_cells
from ..models.rich_text import spans_to_api
from ..store.base import BlockStore


def _not_a(block: Dict[str, Any], block_id: str, expected: str) -> Dict[str, Any]:
    return {"success": False, "error": f"Block {block_id} is not a {expected} (type: {block.get('type')})"}


def add_table_row(store: BlockStore, table_id: str, cells: List[str]) -> Dict[str, Any]:
    """
    Append a row to a table, padding or truncating it to the table width.

    Returns:
        Result with the new row id and the cells actually written
    """
    if not isinstance(cells, list):
        return {"success": False, "error": "cells array required"}

    table = store.retrieve_block(table_id)
    if table.get("type") != BlockKind.TABLE.value:
        return _not_a(table, table_id, "table")

    width = table["table"].get("table_width", len(cells))
    row = BlockDescriptor.table_row(fit_cells([rich_text_compiler.compile(cell) for cell in cells], width))

    created = store.append_children(table_id, [row.to_api()])
    written = (list(cells) + [""] * width)[:width]
    return {
        "success": True,
        "row_id": created[0]["id"] if created else None,
        "cells": written,
    }


def update_table_row(store: BlockStore, row_id: str, cells: List[str]) -> Dict[str, Any]:
    """Replace every cell of a table row."""
    if not isinstance(cells, list):
        return {"success": False, "error": "cells array required"}

    row = store.retrieve_block(row_id)
    if row.get("type") != BlockKind.TABLE_ROW.value:
        return _not_a(row, row_id, "table_row")

    store.patch_block(row_id, {
        "table_row": {"cells": [spans_to_api(rich_text_compiler.compile(cell)) for cell in cells]}
    })
    return {"success": True, "row_id": row_id, "cells": cells}


def add_table_column(store: BlockStore, table_id: str, column_name: str,
                     column_default: str = "") -> Dict[str, Any]:
    """
    Widen a table by one column.

    The header row, when the table has one, gets `column_name` in the new
    cell; every other row gets `column_default`.

    Returns:
        Result with the new width and the number of rows updated
    """
    if not column_name:
        return {"success": False, "error": "column_name required"}

    table = store.retrieve_block(table_id)
    if table.get("type") != BlockKind.TABLE.value:
        return _not_a(table, table_id, "table")

    new_width = table["table"].get("table_width", 0) + 1
    has_header = bool(table["table"].get("has_column_header"))
    store.patch_block(table_id, {"table": {"table_width": new_width}})

    rows = [block for block in store.list_children(table_id) if block.get("type") == BlockKind.TABLE_ROW.value]
    for index, row in enumerate(rows):
        value = column_name if index == 0 and has_header else column_default
        cells = list(row["table_row"].get("cells") or [])
        cells.append(spans_to_api(rich_text_compiler.compile(value)))
        store.patch_block(row["id"], {"table_row": {"cells": cells}})

    logging.info(f"Added column {column_name!r} to table {table_id} ({len(rows)} rows)")
    return {
        "success": True,
        "column_name": column_name,
        "new_width": new_width,
        "rows_updated": len(rows),
    }
