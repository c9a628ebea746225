"""
Activity log merging for pagecraft.

A page's activity log is a section holding one toggle per day (a "date
container", labelled with a date reference). Each entry is a bulleted line
such as "14:05 ET — Sent the draft" inside the container for its date.

Merging an entry plans the store calls needed for one of three cases:

1. No log section: append the section header and a new date container,
   placed before any run of button blocks at the end of the page.
2. Section with a container for the entry's date: append the line to it.
3. Section without one: insert a new container after the section's
   trailing buttons, or right after the header when there are none.

Merging twice on the same day never creates a second container.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from ..config import config
from ..compiler.rich_text import RichTextCompiler, rich_text_compiler
from ..models.blocks import BlockDescriptor
from ..models.entities import ActivityLogEntry
from ..models.plans import MergePlan, StoreCall
from ..models.rich_text import date_mention, has_date_mention, plain_text
from ..store.base import BlockStore
from .locator import SectionLocator, trailing_buttons
from .registry import SectionRegistry, section_registry

LOG_SEPARATOR = " — "
CHECK_MARK = "✓"


def current_time(timezone_name: Optional[str] = None) -> datetime:
    """
    Current wall-clock time in the configured zone, or local time when unset.
    """
    timezone_name = timezone_name or config.timezone_name
    if timezone_name:
        return datetime.now(ZoneInfo(timezone_name))
    return datetime.now()


def make_entry(message: str, now: Optional[datetime] = None, timestamp: Optional[str] = None,
               timezone_label: Optional[str] = None,
               compiler: Optional[RichTextCompiler] = None) -> ActivityLogEntry:
    """
    Build an activity log entry.

    Args:
        message: Entry text; inline markup is compiled
        now: Time of the entry (defaults to the current time)
        timestamp: Caller supplied label replacing the 'HH:MM TZ' time label
        timezone_label: Zone abbreviation shown after the time (defaults to config value)
        compiler: Inline compiler for the line (defaults to the global one)

    Returns:
        ActivityLogEntry keyed by the calendar date of `now`
    """
    now = now or current_time()
    label = timezone_label or config.timezone_label
    time_label = timestamp or f"{now:%H:%M} {label}"
    line = f"{time_label}{LOG_SEPARATOR}{message}"

    return ActivityLogEntry(
        date_key=now.strftime("%Y-%m-%d"),
        time_label=time_label,
        text=(compiler or rich_text_compiler).compile(line),
    )


def find_todo(blocks: List[Dict[str, Any]], item_text: str) -> Optional[Dict[str, Any]]:
    """First to-do whose text contains `item_text`, ignoring case."""
    needle = item_text.lower()
    for block in blocks:
        if block.get("type") != "to_do":
            continue
        if needle in plain_text((block.get("to_do") or {}).get("rich_text")).lower():
            return block
    return None


class ActivityLogMerger:
    """
    Plans and applies activity log merges.
    """

    def __init__(self, locator: Optional[SectionLocator] = None,
                 registry: Optional[SectionRegistry] = None,
                 section_name: Optional[str] = None):
        """
        Initialize the merger.

        Args:
            locator: Section locator (defaults to one over `registry`)
            registry: Section registry used for the section header (defaults to global)
            section_name: Name of the log section (defaults to config value)
        """
        self.registry = registry or section_registry
        self.locator = locator or SectionLocator(self.registry)
        self.section_name = section_name or config.activity_log_section

    def date_container(self, entry: ActivityLogEntry) -> BlockDescriptor:
        return BlockDescriptor.toggle(date_mention(entry.date_key), children=[self.log_line(entry)])

    @staticmethod
    def log_line(entry: ActivityLogEntry) -> BlockDescriptor:
        return BlockDescriptor.bulleted(entry.text)

    @staticmethod
    def find_date_container(section_blocks: List[Dict[str, Any]], date_key: str) -> Optional[Dict[str, Any]]:
        """
        Find the toggle holding entries for `date_key`.

        A toggle matches when its label carries a date reference starting
        with the key, or when its plain text is exactly the key.
        """
        for block in section_blocks:
            if block.get("type") != "toggle":
                continue
            rich_text = (block.get("toggle") or {}).get("rich_text") or []
            if has_date_mention(rich_text, date_key) or plain_text(rich_text) == date_key:
                return block
        return None

    def merge_entry(self, blocks: List[Dict[str, Any]], page_id: str,
                    entry: ActivityLogEntry) -> MergePlan:
        """
        Plan merging an entry into a page.

        Args:
            blocks: Current top-level blocks of the page
            page_id: Id of the page
            entry: The entry to merge

        Returns:
            MergePlan whose calls perform the merge
        """
        header = self.locator.locate(blocks, self.section_name)

        if header is None:
            return self._plan_new_section(blocks, page_id, entry)

        section_blocks = self.locator.section_blocks_after(blocks, header.index)
        container = self.find_date_container(section_blocks, entry.date_key)

        if container is not None:
            logging.debug(f"Appending to date container {container['id']} for {entry.date_key}")
            return MergePlan(
                page_id=page_id,
                entry=entry,
                container_id=container["id"],
                calls=[StoreCall(operation="append_children", target_id=container["id"],
                                 blocks=[self.log_line(entry)])],
            )

        buttons = trailing_buttons(section_blocks)
        anchor = buttons[-1] if buttons else header.block
        return MergePlan(
            page_id=page_id,
            entry=entry,
            container_created=True,
            calls=[StoreCall(operation="append_children", target_id=page_id,
                             blocks=[self.date_container(entry)], insert_after=anchor["id"])],
        )

    def _plan_new_section(self, blocks: List[Dict[str, Any]], page_id: str,
                          entry: ActivityLogEntry) -> MergePlan:
        insert_after = None
        warnings: List[str] = []

        buttons = trailing_buttons(blocks)
        if buttons:
            first_button = len(blocks) - len(buttons)
            if first_button > 0:
                insert_after = blocks[first_button - 1]["id"]
            else:
                warnings.append(
                    f"Page holds only button blocks; the {self.section_name} section was added after them"
                )

        return MergePlan(
            page_id=page_id,
            entry=entry,
            section_created=True,
            container_created=True,
            warnings=warnings,
            calls=[StoreCall(
                operation="append_children",
                target_id=page_id,
                blocks=[self.registry.header_block(self.section_name), self.date_container(entry)],
                insert_after=insert_after,
            )],
        )

    def plan_completion(self, blocks: List[Dict[str, Any]], page_id: str, item_text: str,
                        note: Optional[str] = None, now: Optional[datetime] = None,
                        timezone_label: Optional[str] = None) -> Optional[MergePlan]:
        """
        Plan completing a to-do and logging the completion.

        Args:
            blocks: Current top-level blocks of the page
            page_id: Id of the page
            item_text: Text to search for among the page's to-dos
            note: Optional note appended to the log line
            now: Time of completion (defaults to the current time)
            timezone_label: Zone abbreviation for the time label

        Returns:
            MergePlan that checks the to-do and merges the log line,
            or None when no to-do matches
        """
        target = find_todo(blocks, item_text)
        if target is None:
            return None

        item = plain_text(target["to_do"].get("rich_text"))
        message = f"{CHECK_MARK} {item} ({note})" if note else f"{CHECK_MARK} {item}"
        entry = make_entry(message, now=now, timezone_label=timezone_label)

        plan = self.merge_entry(blocks, page_id, entry)
        plan.calls.insert(0, StoreCall(operation="patch_block", target_id=target["id"],
                                       fields={"to_do": {"checked": True}}))
        plan.completed_item = item
        return plan

    def apply(self, plan: MergePlan, store: BlockStore) -> Dict[str, Any]:
        """
        Execute a merge plan.

        Store errors propagate; calls already executed are not undone.

        Returns:
            Result dictionary describing what was created
        """
        block_ids: List[str] = []
        for call in plan.calls:
            results = store.execute(call)
            if call.operation == "append_children":
                block_ids.extend(result["id"] for result in results if "id" in result)

        logging.info(f"Logged activity on page {plan.page_id}: {plan.entry.line}")

        result: Dict[str, Any] = {
            "success": True,
            "entry": plan.entry.line,
            "date": plan.entry.date_key,
            "section_created": plan.section_created,
            "container_created": plan.container_created,
            "block_ids": block_ids,
        }
        if plan.warnings:
            result["warnings"] = plan.warnings
        return result
