"""Page sections: registry, locator, activity log and replacement."""

from .registry import SectionConfig, SectionRegistry, section_registry
from .locator import (
    SectionLocator, normalize_text, is_section_header, trailing_buttons, block_text
)
from .activity_log import ActivityLogMerger, make_entry, current_time, find_todo
from .replace import SectionReplacer

__all__ = [
    "SectionConfig",
    "SectionRegistry",
    "section_registry",
    "SectionLocator",
    "normalize_text",
    "is_section_header",
    "trailing_buttons",
    "block_text",
    "ActivityLogMerger",
    "make_entry",
    "current_time",
    "find_todo",
    "SectionReplacer",
]
