"""
Pipe table compiler for pagecraft.

A table is a run of consecutive lines starting with '|'. Separator rows
such as `|---|:--:|` are consumed but never emitted; one appearing as the
first or second line of the run marks the first data row as a header.
"""

import re
from typing import List, Optional, Tuple

from ..models.blocks import BlockDescriptor
from .rich_text import RichTextCompiler, rich_text_compiler

SEPARATOR_START = re.compile(r"^\|[\s\-:]+\|")
SEPARATOR_FIELD = re.compile(r"^[\s\-:]*$")


def is_table_line(line: str) -> bool:
    """Check whether a line opens a table."""
    stripped = line.strip()
    return stripped.startswith('|') and stripped.endswith('|')


def is_separator_row(line: str) -> bool:
    stripped = line.strip()
    if not SEPARATOR_START.match(stripped):
        return False
    return all(SEPARATOR_FIELD.match(part) for part in stripped.split('|'))


def split_row(line: str) -> List[str]:
    """
    Split a table line into trimmed cell texts.

    Args:
        line: A line such as '| a | b |'

    Returns:
        Cell texts; empty when the line is not delimited by pipes on both ends
    """
    stripped = line.strip()
    if len(stripped) < 2 or not (stripped.startswith('|') and stripped.endswith('|')):
        return []
    return [cell.strip() for cell in stripped.split('|')[1:-1]]


class TableCompiler:
    """
    Compiles a run of pipe-delimited lines into a table descriptor.
    """

    def __init__(self, rich_text: Optional[RichTextCompiler] = None):
        self.rich_text = rich_text or rich_text_compiler

    def compile(self, lines: List[str], start: int) -> Tuple[Optional[BlockDescriptor], int]:
        """
        Consume table lines beginning at `start`.

        Args:
            lines: All lines of the document
            start: Index of the first table line

        Returns:
            Tuple of (table descriptor or None when no data rows were found,
            index of the first line after the table)
        """
        rows: List[List[str]] = []
        has_column_header = False
        index = start

        while index < len(lines):
            line = lines[index].strip()
            if not line.startswith('|'):
                break

            if is_separator_row(line):
                if index - start < 2:
                    has_column_header = True
            else:
                cells = split_row(line)
                if cells:
                    rows.append(cells)
            index += 1

        if not rows:
            return None, index

        table = BlockDescriptor.table(
            [[self.rich_text.compile(cell) for cell in row] for row in rows],
            has_column_header=has_column_header,
        )
        return table, index
