"""
Section replacement for pagecraft.

Replacing a section deletes its header and blocks, then inserts new blocks
where the section stood. Deletions are best effort and are never rolled
back; the insertion is attempted regardless of deletion failures.
"""

import logging
from typing import Any, Dict, List, Optional

from ..compiler.blocks import BlockCompiler, block_compiler
from ..models.plans import CallOutcome, ReplacePlan
from ..store.base import BlockStore, StoreError
from .locator import SectionLocator


class SectionReplacer:
    """
    Plans and applies section replacements.
    """

    def __init__(self, locator: Optional[SectionLocator] = None,
                 compiler: Optional[BlockCompiler] = None):
        self.locator = locator or SectionLocator()
        self.compiler = compiler or block_compiler

    def plan(self, blocks: List[Dict[str, Any]], page_id: str, section_name: str,
             content: str) -> Optional[ReplacePlan]:
        """
        Plan replacing a section.

        Args:
            blocks: Current top-level blocks of the page
            page_id: Id of the page
            section_name: Section to replace
            content: Block markup for the new section

        Returns:
            ReplacePlan, or None when the section does not exist
        """
        header = self.locator.locate(blocks, section_name)
        if header is None:
            return None

        section = self.locator.section_blocks_after(blocks, header.index)
        plan = ReplacePlan(
            page_id=page_id,
            section_name=section_name,
            header=header,
            delete_ids=[header.block_id] + [block["id"] for block in section],
            insert_after=blocks[header.index - 1]["id"] if header.index > 0 else None,
            blocks=self.compiler.compile(content),
        )
        if plan.insert_after is None:
            plan.warnings.append("Section was the first block of the page; new content was added at the end")
        return plan

    def apply(self, plan: ReplacePlan, store: BlockStore) -> ReplacePlan:
        """
        Execute a replacement plan, recording the outcome of every step.

        Returns:
            The same plan with `deletions` and `insertion` filled in
        """
        for block_id in plan.delete_ids:
            try:
                store.delete_block(block_id)
                plan.deletions.append(CallOutcome(target_id=block_id, success=True))
            except StoreError as e:
                logging.warning(f"Failed to delete block {block_id}: {e.message}")
                plan.deletions.append(CallOutcome(target_id=block_id, success=False, error=e.message))

        try:
            created = store.append_children(
                plan.page_id,
                [block.to_api() for block in plan.blocks],
                insert_after=plan.insert_after,
            )
            plan.insertion = CallOutcome(
                target_id=plan.page_id,
                success=True,
                block_ids=[block["id"] for block in created if "id" in block],
            )
        except StoreError as e:
            logging.error(f"Failed to insert replacement for section {plan.section_name}: {e.message}")
            plan.insertion = CallOutcome(target_id=plan.page_id, success=False, error=e.message)

        return plan
