"""
Mutation plans for pagecraft.

Operations that touch the store first compute a plan of store calls from a
snapshot of the page, then execute it. Keeping the two apart lets the CLI
show a plan without running it and lets tests check planning on its own.
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from .blocks import BlockDescriptor
from .entities import ActivityLogEntry, SectionHeader


class StoreCall(BaseModel):
    """
    A single mutation to send to the block store.
    """

    operation: Literal["append_children", "patch_block", "delete_block"] = Field(
        ...,
        description="The store operation to invoke"
    )

    target_id: str = Field(
        ...,
        description="Container (for appends) or block (for patches and deletes) id"
    )

    blocks: List[BlockDescriptor] = Field(
        default_factory=list,
        description="Blocks to append"
    )

    insert_after: Optional[str] = Field(
        None,
        description="Sibling to insert the appended blocks after; end of container when None"
    )

    fields: Dict[str, Any] = Field(
        default_factory=dict,
        description="Fields to patch"
    )

    def describe(self) -> Dict[str, Any]:
        """Render the call for display, with blocks in wire shape."""
        description: Dict[str, Any] = {"operation": self.operation, "target_id": self.target_id}
        if self.blocks:
            description["blocks"] = [block.to_api() for block in self.blocks]
        if self.insert_after:
            description["insert_after"] = self.insert_after
        if self.fields:
            description["fields"] = self.fields
        return description


class MergePlan(BaseModel):
    """
    The store calls needed to merge an activity log entry into a page.
    """

    page_id: str = Field(..., description="Page the entry is merged into")
    entry: ActivityLogEntry = Field(..., description="The entry being merged")
    calls: List[StoreCall] = Field(default_factory=list, description="Calls in execution order")
    section_created: bool = Field(False, description="Whether the log section is created")
    container_created: bool = Field(False, description="Whether a new date container is created")
    container_id: Optional[str] = Field(
        None,
        description="Existing date container the entry is appended to"
    )
    completed_item: Optional[str] = Field(
        None,
        description="Text of the to-do marked complete, for completion plans"
    )
    warnings: List[str] = Field(default_factory=list, description="Non-fatal observations")


class CallOutcome(BaseModel):
    """
    Result of one step of a best-effort plan.
    """

    target_id: str = Field(..., description="Block or container the step targeted")
    success: bool = Field(..., description="Whether the store accepted the call")
    error: Optional[str] = Field(None, description="Store error message on failure")
    block_ids: List[str] = Field(default_factory=list, description="Ids of created blocks")


class ReplacePlan(BaseModel):
    """
    Two-phase replacement of a section: delete the old blocks, then insert
    the new ones where the section stood.

    Deletions are not rolled back when a later step fails; the outcome lists
    record what actually happened.
    """

    page_id: str = Field(..., description="Page holding the section")
    section_name: str = Field(..., description="Requested section name")
    header: SectionHeader = Field(..., description="The located section header")
    delete_ids: List[str] = Field(default_factory=list, description="Header and section block ids")
    insert_after: Optional[str] = Field(
        None,
        description="Block preceding the header; None when the header is the first block"
    )
    blocks: List[BlockDescriptor] = Field(default_factory=list, description="Replacement blocks")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal observations")

    deletions: List[CallOutcome] = Field(default_factory=list, description="Deletion outcomes")
    insertion: Optional[CallOutcome] = Field(None, description="Insertion outcome")

    @property
    def deleted_ids(self) -> List[str]:
        return [outcome.target_id for outcome in self.deletions if outcome.success]

    @property
    def delete_errors(self) -> List[str]:
        return [f"{outcome.target_id}: {outcome.error}" for outcome in self.deletions if not outcome.success]
