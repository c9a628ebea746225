"""Markup compilers for pagecraft."""

from .rich_text import RichTextCompiler, InlineRecognizer, rich_text_compiler, compile_rich_text
from .tables import TableCompiler, is_table_line, is_separator_row, split_row
from .blocks import BlockCompiler, block_compiler, compile_blocks, background_color
from .icons import IconResult, parse_icon

__all__ = [
    "RichTextCompiler",
    "InlineRecognizer",
    "rich_text_compiler",
    "compile_rich_text",
    "TableCompiler",
    "is_table_line",
    "is_separator_row",
    "split_row",
    "BlockCompiler",
    "block_compiler",
    "compile_blocks",
    "background_color",
    "IconResult",
    "parse_icon",
]
