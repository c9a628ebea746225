"""
Page tools for pagecraft.

Creating and updating pages. Enumerated property values are fuzzy-resolved
against the parent data source before they are sent; substitutions come
back as warnings in the result.
"""

import logging
from typing import Any, Dict, List, Optional

from ..compiler.blocks import block_compiler
from ..compiler.icons import parse_icon
from ..compiler.rich_text import rich_text_compiler
from ..models.blocks import BlockDescriptor
from ..models.rich_text import spans_to_api
from ..properties.fuzzy import FuzzyPropertyResolver, fuzzy_resolver
from ..sections.registry import SectionRegistry, section_registry
from ..store.base import BlockStore

RELATION_MODES = ("replace", "append", "remove")
CHECKLIST_SECTION = "To Do"
ACTIVITY_SECTION = "Activity Log"


def checklist_scaffold(items: List[str],
                       registry: Optional[SectionRegistry] = None) -> List[BlockDescriptor]:
    """
    Blocks for a new checklist page: a To Do section holding one unchecked
    to-do per item, followed by an empty Activity Log section.
    """
    registry = registry or section_registry
    blocks = [registry.header_block(CHECKLIST_SECTION)]
    blocks.extend(BlockDescriptor.to_do(rich_text_compiler.compile(item)) for item in items if item.strip())
    blocks.append(registry.header_block(ACTIVITY_SECTION))
    return blocks


def apply_relation_mode(existing: List[str], ids: List[str], mode: str = "replace") -> List[str]:
    """
    Combine existing relation ids with new ones.

    Args:
        existing: Ids currently related
        ids: Ids supplied by the caller
        mode: 'replace', 'append' (keeps order, drops duplicates) or 'remove'

    Returns:
        The final list of related ids
    """
    if mode == "append":
        return list(dict.fromkeys(existing + ids))
    if mode == "remove":
        return [page_id for page_id in existing if page_id not in ids]
    if mode == "replace":
        return list(ids)
    raise ValueError(f"Unknown relation mode: {mode}")


def _source_id(parent: Dict[str, Any]) -> Optional[str]:
    return parent.get("data_source_id") or parent.get("database_id")


def _add_warnings(result: Dict[str, Any], fuzzy_warnings: List[str],
                  icon_error: Optional[str]) -> Dict[str, Any]:
    """Collect fuzzy and icon problems under `warnings`; fuzzy ones also under `fuzzy_matches`."""
    warnings = list(fuzzy_warnings)
    if fuzzy_warnings:
        result["fuzzy_matches"] = fuzzy_warnings
    if icon_error:
        warnings.append(icon_error)
    if warnings:
        result["warnings"] = warnings
    return result


def create_page(store: BlockStore, title: str, data_source_id: Optional[str] = None,
                parent_page_id: Optional[str] = None, properties: Optional[Dict[str, Any]] = None,
                icon: Optional[str] = None, initial_content: Optional[str] = None,
                initial_checklist: Optional[List[str]] = None,
                validate_icon: bool = False,
                resolver: Optional[FuzzyPropertyResolver] = None) -> Dict[str, Any]:
    """
    Create a page in a data source or under another page.

    Args:
        store: Block store
        title: Page title
        data_source_id: Data source to create the page in
        parent_page_id: Parent page, when not creating in a data source
        properties: Property values in the store's property shape
        icon: Emoji, 'notion:name_color' or image URL
        initial_content: Block markup for the page body
        initial_checklist: To-do items for a checklist scaffold, used when
            there is no initial content
        validate_icon: Check that a named icon exists before using it
        resolver: Fuzzy resolver (defaults to the global one)

    Returns:
        Result with the new page id and url, plus fuzzy and icon warnings
    """
    if not data_source_id and not parent_page_id:
        return {"success": False, "error": "data_source_id or parent_page_id required"}
    if not title:
        return {"success": False, "error": "title required"}

    resolved = dict(properties or {})
    warnings: List[str] = []
    if data_source_id and resolved:
        resolution = (resolver or fuzzy_resolver).resolve_with_store(store, data_source_id, resolved)
        resolved, warnings = resolution.resolved, resolution.warnings

    body: Dict[str, Any] = {
        "parent": {"type": "data_source_id", "data_source_id": data_source_id}
        if data_source_id else {"page_id": parent_page_id},
        "properties": {"title": {"title": spans_to_api(rich_text_compiler.compile(title))}, **resolved},
    }

    icon_result = parse_icon(icon, validate=validate_icon)
    if icon_result.icon is not None:
        body["icon"] = icon_result.icon.to_api()

    page = store.create_page(body)
    logging.info(f"Created page {page.get('id')}: {title}")

    if initial_content:
        blocks = block_compiler.compile(initial_content)
    elif initial_checklist:
        blocks = checklist_scaffold(initial_checklist)
    else:
        blocks = []
    if blocks:
        store.append_children(page["id"], [block.to_api() for block in blocks])

    result: Dict[str, Any] = {
        "success": True,
        "page_id": page.get("id"),
        "url": page.get("url"),
        "title": title,
        "blocks_added": len(blocks),
    }
    return _add_warnings(result, warnings, icon_result.error)


def update_page(store: BlockStore, page_id: str, properties: Optional[Dict[str, Any]] = None,
                relations: Optional[Dict[str, Dict[str, Any]]] = None, icon: Optional[str] = None,
                validate_icon: bool = False,
                resolver: Optional[FuzzyPropertyResolver] = None) -> Dict[str, Any]:
    """
    Update page properties, relations and icon.

    Args:
        store: Block store
        page_id: Page to update
        properties: Property values in the store's property shape
        relations: Property name -> {"ids": [...], "mode": "replace"|"append"|"remove"}
        icon: New icon, same forms as `create_page`
        validate_icon: Check that a named icon exists before using it
        resolver: Fuzzy resolver (defaults to the global one)

    Returns:
        Result listing the updated properties, plus fuzzy and icon warnings
    """
    final = dict(properties or {})
    relations = relations or {}
    warnings: List[str] = []

    for name, update in relations.items():
        if not isinstance(update, dict) or not isinstance(update.get("ids", []), list):
            return {"success": False, "error": f'Relation "{name}" needs an "ids" list'}
        mode = update.get("mode") or "replace"
        if mode not in RELATION_MODES:
            return {"success": False, "error": f'Unknown relation mode "{mode}" for {name}'}

    page: Dict[str, Any] = {}
    if final or relations:
        page = store.retrieve_page(page_id)

    if final:
        parent = page.get("parent") or {}
        source_id = _source_id(parent)
        if source_id:
            resolution = (resolver or fuzzy_resolver).resolve_with_store(store, source_id, final)
            final, warnings = resolution.resolved, resolution.warnings
        elif parent:
            warnings.append(
                f"Fuzzy matching skipped: page parent is {parent.get('type', 'unknown')}, not a database"
            )

    for name, update in relations.items():
        existing_prop = (page.get("properties") or {}).get(name) or {}
        existing = [item["id"] for item in existing_prop.get("relation") or []]
        ids = apply_relation_mode(existing, list(update.get("ids") or []), update.get("mode") or "replace")
        final[name] = {"relation": [{"id": related} for related in ids]}

    body: Dict[str, Any] = {"properties": final}
    icon_result = parse_icon(icon, validate=validate_icon)
    if icon_result.icon is not None:
        body["icon"] = icon_result.icon.to_api()

    if not final and "icon" not in body:
        return {"success": False, "error": "Nothing to update"}

    updated = store.update_page(page_id, body)
    result: Dict[str, Any] = {
        "success": True,
        "page_id": updated.get("id", page_id),
        "url": updated.get("url"),
        "updated_properties": list(final.keys()),
    }
    return _add_warnings(result, warnings, icon_result.error)
