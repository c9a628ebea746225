"""
Block store interface for pagecraft.

This module defines the abstract interface that every block store backend
implements, the error type they raise, and schema normalization shared by
all backends.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models.plans import StoreCall

ENUM_PROPERTY_TYPES = ("select", "multi_select", "status")


class StoreError(Exception):
    """
    A failed store request.

    Attributes:
        message: Human readable message, taken from the store response when present
        status: HTTP status code, if the store answered
        code: Store error code such as 'object_not_found'
        detail: The decoded error body
    """

    def __init__(self, message: str, status: Optional[int] = None,
                 code: Optional[str] = None, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.detail = detail or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "status": self.status, "code": self.code}


class BlockStore(ABC):
    """
    Abstract base class for block stores.

    Blocks and pages are exchanged as dictionaries in the store's wire shape,
    e.g. ``{"id": ..., "type": "paragraph", "paragraph": {"rich_text": [...]}}``.
    """

    @abstractmethod
    def list_children(self, container_id: str) -> List[Dict[str, Any]]:
        """
        List the direct children of a page or block, in order.

        Args:
            container_id: Page or block id

        Returns:
            Child blocks in their stored order
        """
        pass

    @abstractmethod
    def append_children(self, container_id: str, blocks: List[Dict[str, Any]],
                        insert_after: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Append blocks to a container.

        Args:
            container_id: Page or block id
            blocks: Blocks in wire shape, possibly with nested children
            insert_after: Sibling to insert after; end of the container when None

        Returns:
            The created blocks, with their ids
        """
        pass

    @abstractmethod
    def patch_block(self, block_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Update fields of a block and return the updated block."""
        pass

    @abstractmethod
    def fetch_schema(self, source_id: str) -> Dict[str, Dict[str, Any]]:
        """
        Fetch the property schema of a data source.

        Returns:
            Normalized schema, see `normalize_schema`
        """
        pass

    @abstractmethod
    def delete_block(self, block_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def retrieve_block(self, block_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def create_page(self, body: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def update_page(self, page_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        pass

    def execute(self, call: StoreCall) -> List[Dict[str, Any]]:
        """
        Execute a planned store call.

        Args:
            call: The call to run

        Returns:
            Blocks created or updated by the call
        """
        logging.debug(f"Executing {call.operation} on {call.target_id}")

        if call.operation == "append_children":
            return self.append_children(
                call.target_id,
                [block.to_api() for block in call.blocks],
                insert_after=call.insert_after,
            )
        if call.operation == "patch_block":
            return [self.patch_block(call.target_id, call.fields)]
        if call.operation == "delete_block":
            return [self.delete_block(call.target_id)]

        raise ValueError(f"Unsupported store operation: {call.operation}")


def _option_names(options: List[Dict[str, Any]]) -> List[str]:
    return [option["name"] for option in options if option.get("name")]


def normalize_schema(raw_properties: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """
    Convert a data source property schema into ``{name: {"type", "options"}}``.

    Status options are listed group by group when the schema carries groups,
    falling back to the flat option list otherwise. Non-enumerated properties
    keep their type with an empty option list.

    Args:
        raw_properties: The ``properties`` object of a data source

    Returns:
        Normalized schema keyed by property name
    """
    schema: Dict[str, Dict[str, Any]] = {}

    for name, prop in (raw_properties or {}).items():
        prop_type = prop.get("type", "")
        options: List[str] = []

        if prop_type in ENUM_PROPERTY_TYPES:
            definition = prop.get(prop_type) or {}
            flat = definition.get("options") or []

            if prop_type == "status":
                by_id = {option.get("id"): option for option in flat}
                for group in definition.get("groups") or []:
                    for option_id in group.get("option_ids") or []:
                        option = by_id.get(option_id)
                        if option and option.get("name"):
                            options.append(option["name"])

            if not options:
                options = _option_names(flat)

        schema[name] = {"type": prop_type, "options": options}

    return schema
