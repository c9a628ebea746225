"""
Section location for pagecraft.

A section of a page starts at a header block and runs up to the next
header. Headers are headings of any level, and callouts or paragraphs
whose first rich text span is bold. Toggles can be located by their text
but never end a section, since date containers inside a section are
toggles.
"""

import re
from typing import Any, Dict, List, Optional

from ..models.entities import SectionHeader
from ..models.rich_text import plain_text
from .registry import SectionRegistry, section_registry

HEADING_TYPES = ("heading_1", "heading_2", "heading_3")
BOLD_HEADER_TYPES = ("callout", "paragraph")
BUTTON_TYPE = "button"


def normalize_text(text: str) -> str:
    """
    Normalize text for section matching.

    Lower-cases, turns '-' and '_' into spaces, drops punctuation and
    collapses whitespace.
    """
    text = text.lower()
    text = re.sub(r"[-_]", " ", text)
    text = re.sub(r"[^\w\s]", "", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def block_rich_text(block: Dict[str, Any]) -> List[Dict[str, Any]]:
    payload = block.get(block.get("type", "")) or {}
    return payload.get("rich_text") or []


def block_text(block: Dict[str, Any]) -> str:
    return plain_text(block_rich_text(block))


def starts_bold(block: Dict[str, Any]) -> bool:
    rich_text = block_rich_text(block)
    return bool(rich_text) and bool((rich_text[0].get("annotations") or {}).get("bold"))


def is_section_header(block: Dict[str, Any]) -> bool:
    """Check whether a block opens (and so ends the previous) section."""
    block_type = block.get("type")
    if block_type in HEADING_TYPES:
        return True
    return block_type in BOLD_HEADER_TYPES and starts_bold(block)


def trailing_buttons(blocks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Return the maximal run of button blocks at the end of `blocks`, in order.
    """
    start = len(blocks)
    while start > 0 and blocks[start - 1].get("type") == BUTTON_TYPE:
        start -= 1
    return blocks[start:]


class SectionLocator:
    """
    Finds named sections among a page's top-level blocks.
    """

    def __init__(self, registry: Optional[SectionRegistry] = None):
        self.registry = registry or section_registry

    def header_text(self, block: Dict[str, Any]) -> Optional[str]:
        """
        Text of a block that may be located as a section header.

        Returns:
            The block's text, or None when the block cannot be a header
        """
        if is_section_header(block) or block.get("type") == "toggle":
            return block_text(block)
        return None

    def match(self, text: str, section_name: str) -> Optional[str]:
        """
        Match header text against a section name and its aliases.

        Args:
            text: Header text
            section_name: Requested section name

        Returns:
            The name or alias that matched, or None
        """
        normalized = normalize_text(text)
        if not normalized:
            return None

        for candidate in (section_name,) + self.registry.aliases_for(section_name):
            needle = normalize_text(candidate)
            if needle and needle in normalized:
                return candidate
        return None

    def locate(self, blocks: List[Dict[str, Any]], section_name: str) -> Optional[SectionHeader]:
        """
        Find the first block that opens the named section.

        Args:
            blocks: Top-level blocks of a page, in order
            section_name: Requested section name

        Returns:
            SectionHeader for the first match, or None
        """
        for index, block in enumerate(blocks):
            text = self.header_text(block)
            if text is None:
                continue
            matched = self.match(text, section_name)
            if matched is not None:
                return SectionHeader(block=block, index=index, matched_name=matched)
        return None

    def section_blocks_after(self, blocks: List[Dict[str, Any]], index: int) -> List[Dict[str, Any]]:
        """
        Blocks belonging to the section whose header is at `index`.

        Returns:
            The blocks after the header, up to (not including) the next header
        """
        section: List[Dict[str, Any]] = []
        for block in blocks[index + 1:]:
            if is_section_header(block):
                break
            section.append(block)
        return section
