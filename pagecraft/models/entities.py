"""
Entity models for pagecraft.

This module defines the transient records produced while reading and
editing a page: located section headers, activity log entries and fuzzy
property matches.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .rich_text import RichTextSpan, spans_to_plain


class SectionHeader(BaseModel):
    """
    A block that opens a named section of a page.
    """

    block: Dict[str, Any] = Field(
        ...,
        description="The header block as returned by the store"
    )

    index: int = Field(
        ...,
        description="Position of the header among the page's top-level blocks"
    )

    matched_name: str = Field(
        ...,
        description="The section name or alias that matched the header text"
    )

    @property
    def block_id(self) -> str:
        return self.block["id"]

    @property
    def kind(self) -> str:
        return self.block.get("type", "")


class ActivityLogEntry(BaseModel):
    """
    One timestamped line destined for a page's activity log.
    """

    date_key: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="Calendar date of the entry (YYYY-MM-DD)"
    )

    time_label: str = Field(
        ...,
        description="Time-of-day label such as '14:05 ET', or a caller supplied timestamp"
    )

    text: List[RichTextSpan] = Field(
        default_factory=list,
        description="Rich text of the full log line"
    )

    @property
    def line(self) -> str:
        """The log line as plain text."""
        return spans_to_plain(self.text)


class FuzzyMatchResult(BaseModel):
    """
    Outcome of resolving one enumerated property value against its options.
    """

    property_name: str = Field(..., description="Name of the property")
    input_value: str = Field(..., description="Value supplied by the caller")
    resolved_value: Optional[str] = Field(
        None,
        description="Closest option, or None when nothing scored above the threshold"
    )
    score: float = Field(0.0, description="Similarity score of the chosen option")
    matched: bool = Field(False, description="Whether a substitution was made")
