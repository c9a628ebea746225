"""
Block tools for pagecraft.

Agent-facing operations on the blocks of a page. Every tool returns a
dictionary with a `success` flag. Input errors and lookup misses come back
as ``{"success": False, "error": ...}``; store failures raise StoreError,
except where an operation is documented as best effort.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..compiler.blocks import BlockCompiler, block_compiler
from ..compiler.rich_text import rich_text_compiler
from ..models.blocks import BlockKind
from ..models.rich_text import plain_text, spans_to_api
from ..sections.activity_log import ActivityLogMerger, make_entry
from ..sections.locator import SectionLocator, block_rich_text
from ..sections.replace import SectionReplacer
from ..store.base import BlockStore, StoreError

TEXT_UPDATE_KINDS = (
    BlockKind.PARAGRAPH,
    BlockKind.HEADING_1,
    BlockKind.HEADING_2,
    BlockKind.HEADING_3,
    BlockKind.BULLETED_LIST_ITEM,
    BlockKind.NUMBERED_LIST_ITEM,
    BlockKind.TO_DO,
    BlockKind.QUOTE,
    BlockKind.CALLOUT,
    BlockKind.TOGGLE,
)

PREVIEW_LENGTH = 50


def append_content(store: BlockStore, container_id: str, content: str,
                   after: Optional[str] = None,
                   compiler: Optional[BlockCompiler] = None) -> Dict[str, Any]:
    """
    Compile block markup and append it to a page or block.

    Args:
        store: Block store
        container_id: Page or block receiving the content
        content: Block markup
        after: Sibling to insert after; end of the container when None
        compiler: Block compiler (defaults to the global one)

    Returns:
        Result with the ids of the created blocks
    """
    blocks = (compiler or block_compiler).compile(content or "")
    if not blocks:
        return {"success": False, "error": "No content to append"}

    created = store.append_children(container_id, [block.to_api() for block in blocks], insert_after=after)
    logging.info(f"Appended {len(created)} blocks to {container_id}")
    return {
        "success": True,
        "blocks_added": len(created),
        "block_ids": [block["id"] for block in created if "id" in block],
    }


def update_block(store: BlockStore, block_id: str, content: str,
                 checked: Optional[bool] = None) -> Dict[str, Any]:
    """
    Replace the text of a single block, keeping its kind.

    Args:
        store: Block store
        block_id: Block to update
        content: New inline markup
        checked: For to-dos, the new checked state

    Returns:
        Result naming the updated block and its kind
    """
    block = store.retrieve_block(block_id)
    block_type = block.get("type", "")

    if block_type not in {kind.value for kind in TEXT_UPDATE_KINDS}:
        return {"success": False, "error": f'Block type "{block_type}" is not supported for content updates'}

    payload: Dict[str, Any] = {"rich_text": spans_to_api(rich_text_compiler.compile(content))}
    if block_type == BlockKind.TO_DO.value and isinstance(checked, bool):
        payload["checked"] = checked

    updated = store.patch_block(block_id, {block_type: payload})
    return {
        "success": True,
        "block_id": updated.get("id", block_id),
        "block_type": block_type,
        "updated_content": content,
    }


def delete_blocks(store: BlockStore, page_id: str, block_ids: Optional[List[str]] = None,
                  section_name: Optional[str] = None, clear_all: bool = False,
                  locator: Optional[SectionLocator] = None) -> Dict[str, Any]:
    """
    Delete blocks from a page, best effort.

    Exactly one selector is used, in this order of precedence: `clear_all`,
    explicit `block_ids`, then `section_name` (the header and every block up
    to the next section).

    Returns:
        Result with the deleted ids and one error line per failed deletion
    """
    if clear_all:
        targets = [block["id"] for block in store.list_children(page_id)]
    elif block_ids:
        targets = list(block_ids)
    elif section_name:
        blocks = store.list_children(page_id)
        locator = locator or SectionLocator()
        header = locator.locate(blocks, section_name)
        if header is None:
            return {"success": False, "error": f'Section "{section_name}" not found on page'}
        targets = [header.block_id] + [block["id"] for block in locator.section_blocks_after(blocks, header.index)]
    else:
        return {"success": False, "error": "Must specify block_ids, section_name, or clear_all=true"}

    deleted: List[str] = []
    errors: List[str] = []
    for target in targets:
        try:
            store.delete_block(target)
            deleted.append(target)
        except StoreError as e:
            errors.append(f"{target}: {e.message}")

    logging.info(f"Deleted {len(deleted)} of {len(targets)} blocks from {page_id}")
    result: Dict[str, Any] = {
        "success": not errors,
        "deleted_count": len(deleted),
        "deleted_block_ids": deleted,
    }
    if errors:
        result["errors"] = errors
    return result


def replace_section(store: BlockStore, page_id: str, section_name: str, content: str,
                    replacer: Optional[SectionReplacer] = None) -> Dict[str, Any]:
    """
    Replace a named section with new block markup.

    The old header and section blocks are deleted first, then the new
    blocks are inserted where the section stood. Failed deletions are
    reported and do not stop the insertion.

    Returns:
        Result with deletion and insertion details; `success` reflects the insertion
    """
    replacer = replacer or SectionReplacer()
    blocks = store.list_children(page_id)
    plan = replacer.plan(blocks, page_id, section_name, content or "")

    if plan is None:
        return {"success": False, "error": f'Section "{section_name}" not found on page'}
    if not plan.blocks:
        return {"success": False, "error": "No content to insert"}

    plan = replacer.apply(plan, store)
    insertion = plan.insertion

    result: Dict[str, Any] = {
        "success": bool(insertion and insertion.success),
        "section_name": section_name,
        "deleted_count": len(plan.deleted_ids),
        "deleted_block_ids": plan.deleted_ids,
        "inserted_count": len(insertion.block_ids) if insertion else 0,
        "inserted_block_ids": insertion.block_ids if insertion else [],
    }
    if plan.delete_errors:
        result["delete_errors"] = plan.delete_errors
    if insertion and not insertion.success:
        result["error"] = f"Insertion failed: {insertion.error}"
    if plan.warnings:
        result["warnings"] = plan.warnings
    return result


def add_activity_log(store: BlockStore, page_id: str, entry: str, timestamp: Optional[str] = None,
                     timezone_label: Optional[str] = None, now: Optional[datetime] = None,
                     merger: Optional[ActivityLogMerger] = None) -> Dict[str, Any]:
    """
    Add a timestamped line to a page's activity log.

    Args:
        store: Block store
        page_id: Page to log on
        entry: Text of the entry
        timestamp: Label replacing the default 'HH:MM TZ' time label
        timezone_label: Zone abbreviation for the default label
        now: Time of the entry (defaults to the current time)
        merger: Activity log merger (defaults to a new one)

    Returns:
        Result describing the logged line and what was created
    """
    if not entry or not entry.strip():
        return {"success": False, "error": "entry required"}

    merger = merger or ActivityLogMerger()
    log_entry = make_entry(entry, now=now, timestamp=timestamp, timezone_label=timezone_label)
    plan = merger.merge_entry(store.list_children(page_id), page_id, log_entry)
    return merger.apply(plan, store)


def complete_todo(store: BlockStore, page_id: str, item_text: str,
                  completion_note: Optional[str] = None, timezone_label: Optional[str] = None,
                  now: Optional[datetime] = None,
                  merger: Optional[ActivityLogMerger] = None) -> Dict[str, Any]:
    """
    Check off the first to-do containing `item_text` and log the completion.

    Returns:
        Result naming the completed item and the logged line
    """
    if not item_text or not item_text.strip():
        return {"success": False, "error": "item_text required"}

    merger = merger or ActivityLogMerger()
    plan = merger.plan_completion(store.list_children(page_id), page_id, item_text,
                                  note=completion_note, now=now, timezone_label=timezone_label)
    if plan is None:
        return {"success": False, "error": f'Checklist item containing "{item_text}" not found'}

    result = merger.apply(plan, store)
    result["completed_item"] = plan.completed_item
    return result


def summarize_blocks(blocks: List[Dict[str, Any]], indent: int = 0) -> List[str]:
    """
    One line per block: 'type: preview', indented by nesting depth.

    Blocks carrying a `children` list (as produced by `get_page_outline`)
    are followed by their children one level deeper.
    """
    lines: List[str] = []
    prefix = '  ' * indent
    for block in blocks:
        block_type = block.get("type", "")
        text = plain_text(block_rich_text(block))
        preview = text[:PREVIEW_LENGTH] + '...' if len(text) > PREVIEW_LENGTH else text
        children = block.get("children") or []
        child_count = f" [{len(children)} children]" if children else ""
        lines.append(f"{prefix}{block_type}{': ' + preview if preview else ''}{child_count}")
        if children:
            lines.extend(summarize_blocks(children, indent + 1))
    return lines


def _with_children(store: BlockStore, blocks: List[Dict[str, Any]], max_depth: int,
                   depth: int = 0) -> List[Dict[str, Any]]:
    if depth >= max_depth:
        return blocks
    for block in blocks:
        if block.get("has_children"):
            block["children"] = _with_children(store, store.list_children(block["id"]), max_depth, depth + 1)
    return blocks


def get_page_outline(store: BlockStore, page_id: str, limit: int = 50,
                     max_depth: int = 0) -> Dict[str, Any]:
    """
    Summarize the structure of a page.

    Args:
        store: Block store
        page_id: Page to outline
        limit: Maximum number of top-level blocks
        max_depth: How many levels of nested children to fetch

    Returns:
        Result with the outline lines and the number of top-level blocks
    """
    blocks = store.list_children(page_id)[:limit]
    blocks = _with_children(store, blocks, max_depth)
    return {
        "success": True,
        "block_count": len(blocks),
        "outline": summarize_blocks(blocks),
    }
