"""
In-memory block store for pagecraft.

Holds blocks in the same wire shape the REST API returns, so that every
operation can run without network access. Used by the test suite and by
the CLI's dry-run mode.
"""

import copy
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from ..config import config
from .base import BlockStore, StoreError, normalize_schema


def _with_plain_text(item: Dict[str, Any]) -> Dict[str, Any]:
    """Add the plain_text the API derives for a rich text item."""
    item = copy.deepcopy(item)
    if "plain_text" in item:
        return item
    if item.get("type") == "mention":
        mention = item.get("mention") or {}
        if mention.get("type") == "date":
            item["plain_text"] = (mention.get("date") or {}).get("start", "")
        else:
            item["plain_text"] = ""
    else:
        item["plain_text"] = (item.get("text") or {}).get("content", "")
    return item


def _derive_plain_text(payload: Dict[str, Any]) -> Dict[str, Any]:
    if isinstance(payload.get("rich_text"), list):
        payload["rich_text"] = [_with_plain_text(item) for item in payload["rich_text"]]
    if isinstance(payload.get("cells"), list):
        payload["cells"] = [[_with_plain_text(item) for item in cell] for cell in payload["cells"]]
    return payload


class InMemoryBlockStore(BlockStore):
    """
    Block store kept entirely in memory.

    Every mutation is recorded in `self.calls` as ``(operation, target_id)``.
    """

    def __init__(self, pages: Optional[Dict[str, List[Dict[str, Any]]]] = None,
                 schemas: Optional[Dict[str, Dict[str, Any]]] = None):
        """
        Initialize the store.

        Args:
            pages: Initial page contents, page id -> top-level blocks in wire shape
            schemas: Raw data source property schemas, source id -> properties
        """
        self._blocks: Dict[str, Dict[str, Any]] = {}
        self._children: Dict[str, List[str]] = {}
        self._pages: Dict[str, Dict[str, Any]] = {}
        self._schemas: Dict[str, Dict[str, Any]] = dict(schemas or {})
        self.calls: List[Tuple[str, str]] = []

        for page_id, blocks in (pages or {}).items():
            self.add_page(page_id)
            for block in blocks:
                self._children[page_id].append(self._store_block(page_id, block)["id"])

    def add_page(self, page_id: str, properties: Optional[Dict[str, Any]] = None,
                 parent: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Register an empty page."""
        page = {
            "object": "page",
            "id": page_id,
            "url": f"{config.web_url.rstrip('/')}/{page_id.replace('-', '')}",
            "parent": parent or {"type": "workspace", "workspace": True},
            "properties": properties or {},
            "icon": None,
            "archived": False,
        }
        self._pages[page_id] = page
        self._children.setdefault(page_id, [])
        return copy.deepcopy(page)

    def add_schema(self, source_id: str, properties: Dict[str, Any]) -> None:
        self._schemas[source_id] = properties

    def _store_block(self, parent_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        block_type = payload["type"]
        body = copy.deepcopy(payload.get(block_type) or {})
        children = body.pop("children", None) or payload.get("children") or []

        block_id = payload.get("id") or str(uuid.uuid4())
        block = {
            "object": "block",
            "id": block_id,
            "type": block_type,
            block_type: _derive_plain_text(body),
            "has_children": bool(children),
            "archived": False,
            "parent": {"type": "page_id" if parent_id in self._pages else "block_id", "id": parent_id},
        }
        self._blocks[block_id] = block
        self._children[block_id] = []
        for child in children:
            self._children[block_id].append(self._store_block(block_id, child)["id"])
        return block

    def _get_block(self, block_id: str) -> Dict[str, Any]:
        block = self._blocks.get(block_id)
        if block is None or block.get("archived"):
            raise StoreError(f"Could not find block with ID: {block_id}", status=404, code="object_not_found")
        return block

    def _get_page(self, page_id: str) -> Dict[str, Any]:
        page = self._pages.get(page_id)
        if page is None:
            raise StoreError(f"Could not find page with ID: {page_id}", status=404, code="object_not_found")
        return page

    def _child_ids(self, container_id: str) -> List[str]:
        if container_id not in self._pages:
            self._get_block(container_id)
        return self._children.setdefault(container_id, [])

    def list_children(self, container_id: str) -> List[Dict[str, Any]]:
        return [copy.deepcopy(self._blocks[block_id]) for block_id in self._child_ids(container_id)]

    def append_children(self, container_id: str, blocks: List[Dict[str, Any]],
                        insert_after: Optional[str] = None) -> List[Dict[str, Any]]:
        child_ids = self._child_ids(container_id)

        if insert_after is None:
            position = len(child_ids)
        elif insert_after in child_ids:
            position = child_ids.index(insert_after) + 1
        else:
            raise StoreError(f"Block {insert_after} is not a child of {container_id}",
                             status=400, code="validation_error")

        self.calls.append(("append_children", container_id))
        created = []
        for payload in blocks:
            block = self._store_block(container_id, payload)
            child_ids.insert(position, block["id"])
            position += 1
            created.append(copy.deepcopy(block))

        if container_id in self._blocks:
            self._blocks[container_id]["has_children"] = bool(child_ids)

        logging.debug(f"Appended {len(created)} blocks to {container_id}")
        return created

    def patch_block(self, block_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        block = self._get_block(block_id)
        self.calls.append(("patch_block", block_id))

        for key, value in fields.items():
            if key == block["type"] and isinstance(value, dict):
                block[key].update(_derive_plain_text(copy.deepcopy(value)))
            else:
                block[key] = copy.deepcopy(value)
        return copy.deepcopy(block)

    def delete_block(self, block_id: str) -> Dict[str, Any]:
        block = self._get_block(block_id)
        self.calls.append(("delete_block", block_id))

        block["archived"] = True
        parent_id = block["parent"]["id"]
        siblings = self._children.get(parent_id, [])
        if block_id in siblings:
            siblings.remove(block_id)
        return copy.deepcopy(block)

    def retrieve_block(self, block_id: str) -> Dict[str, Any]:
        return copy.deepcopy(self._get_block(block_id))

    def fetch_schema(self, source_id: str) -> Dict[str, Dict[str, Any]]:
        if source_id not in self._schemas:
            raise StoreError(f"Could not find data source with ID: {source_id}",
                             status=404, code="object_not_found")
        return normalize_schema(self._schemas[source_id])

    def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        return copy.deepcopy(self._get_page(page_id))

    def create_page(self, body: Dict[str, Any]) -> Dict[str, Any]:
        parent = body.get("parent") or {}
        parent_id = parent.get("data_source_id") or parent.get("database_id") or parent.get("page_id")
        if parent_id and parent_id not in self._schemas and parent_id not in self._pages:
            raise StoreError(f"Could not find parent with ID: {parent_id}", status=404, code="object_not_found")

        page_id = str(uuid.uuid4())
        self.calls.append(("create_page", page_id))
        page = self.add_page(page_id, properties=copy.deepcopy(body.get("properties") or {}), parent=parent)
        if body.get("icon"):
            self._pages[page_id]["icon"] = copy.deepcopy(body["icon"])
            page["icon"] = copy.deepcopy(body["icon"])
        for child in body.get("children") or []:
            self._children[page_id].append(self._store_block(page_id, child)["id"])
        return page

    def update_page(self, page_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        page = self._get_page(page_id)
        self.calls.append(("update_page", page_id))

        page["properties"].update(copy.deepcopy(body.get("properties") or {}))
        for key in ("icon", "archived"):
            if key in body:
                page[key] = copy.deepcopy(body[key])
        return copy.deepcopy(page)
