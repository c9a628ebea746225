"""
pagecraft: Structured page editing for hierarchical block stores.

Compiles lightweight markup into blocks, locates named page sections,
keeps per-day activity logs and fuzzy-matches enumerated property values.
"""

__version__ = "0.1.0"
__author__ = "pagecraft Project"

# Import main components
from .models import BlockDescriptor, BlockKind, ActivityLogEntry, SectionHeader, FuzzyMatchResult
from .compiler import RichTextCompiler, BlockCompiler, TableCompiler
from .sections import SectionRegistry, SectionLocator, ActivityLogMerger, SectionReplacer
from .properties import FuzzyPropertyResolver
from .store import BlockStore, StoreError, HttpBlockStore, InMemoryBlockStore
from .tools import ToolRegistry, tool_registry

__all__ = [
    "BlockDescriptor",
    "BlockKind",
    "ActivityLogEntry",
    "SectionHeader",
    "FuzzyMatchResult",
    "RichTextCompiler",
    "BlockCompiler",
    "TableCompiler",
    "SectionRegistry",
    "SectionLocator",
    "ActivityLogMerger",
    "SectionReplacer",
    "FuzzyPropertyResolver",
    "BlockStore",
    "StoreError",
    "HttpBlockStore",
    "InMemoryBlockStore",
    "ToolRegistry",
    "tool_registry",
]
