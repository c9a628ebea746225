"""Data models for pagecraft."""

from .rich_text import (
    Annotations, MentionKind, PlainTextSpan, MentionSpan, RichTextSpan,
    text_span, date_mention, spans_to_api, spans_to_plain, plain_text, has_date_mention
)
from .blocks import BlockKind, BlockDescriptor, Icon, fit_cells, empty_cell
from .entities import SectionHeader, ActivityLogEntry, FuzzyMatchResult
from .plans import StoreCall, MergePlan, CallOutcome, ReplacePlan

__all__ = [
    "Annotations",
    "MentionKind",
    "PlainTextSpan",
    "MentionSpan",
    "RichTextSpan",
    "text_span",
    "date_mention",
    "spans_to_api",
    "spans_to_plain",
    "plain_text",
    "has_date_mention",
    "BlockKind",
    "BlockDescriptor",
    "Icon",
    "fit_cells",
    "empty_cell",
    "SectionHeader",
    "ActivityLogEntry",
    "FuzzyMatchResult",
    "StoreCall",
    "MergePlan",
    "CallOutcome",
    "ReplacePlan",
]
