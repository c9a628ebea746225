"""
Block markup compiler for pagecraft.

Each non-blank line of a document becomes one block, except for pipe
tables which span several lines. Line patterns are tried in a fixed order
and the first that matches decides the kind:

    | a | b |                 table (consecutive pipe lines)
    ---                       divider
    h1: / h2: / h3:           headings
    - item                    bulleted list item
    1. item                   numbered list item
    [x] item / [] item        to-do, checked or not
    > text                    quote
    callout[icon,color]: text callout; also 'callout:' and '!> '
    ```lang                   empty code block tagged with lang
    anything else             paragraph

Only the opening fence line of a code block is read; lines that follow it
compile as ordinary blocks.
"""

import logging
import re
from typing import List, Optional

from ..config import config
from ..models.blocks import BlockDescriptor, Icon
from .rich_text import RichTextCompiler, rich_text_compiler
from .tables import TableCompiler, is_table_line

NUMBERED_ITEM = re.compile(r"^\d+\.\s")
CALLOUT_WITH_OPTIONS = re.compile(r"^callout\[([^,\]]+)(?:,([^\]]+))?\]:\s*(.*)$")
TABLE_LABELS = ("table:", "table")

HEADING_PREFIXES = (("h1:", 1), ("h2:", 2), ("h3:", 3))


def background_color(token: str) -> str:
    """Map a color token such as 'blue' to its stored tag 'blue_background'."""
    token = token.strip()
    if token.endswith("_background"):
        return token
    return f"{token}_background"


class BlockCompiler:
    """
    Compiles a multi-line document into block descriptors.
    """

    def __init__(self, rich_text: Optional[RichTextCompiler] = None,
                 default_icon: Optional[str] = None, default_color: Optional[str] = None):
        """
        Initialize the compiler.

        Args:
            rich_text: Inline compiler for line text; global instance when None
            default_icon: Callout icon when none is given; configured value when None
            default_color: Callout color token when none is given; configured value when None
        """
        self.rich_text = rich_text or rich_text_compiler
        self.tables = TableCompiler(self.rich_text)
        self.default_icon = default_icon or config.callout_icon
        self.default_color = default_color or config.callout_color

    def compile(self, document: str) -> List[BlockDescriptor]:
        """
        Compile a document.

        Args:
            document: Newline separated block markup

        Returns:
            Block descriptors in document order
        """
        lines = document.split('\n')
        blocks: List[BlockDescriptor] = []
        index = 0

        while index < len(lines):
            line = lines[index].strip()

            if not line:
                index += 1
                continue

            # A bare 'table:' label right before a table is dropped
            if line.lower() in TABLE_LABELS and index + 1 < len(lines) \
                    and is_table_line(lines[index + 1]):
                index += 1
                continue

            if is_table_line(line):
                table, index = self.tables.compile(lines, index)
                if table is not None:
                    blocks.append(table)
                continue

            blocks.append(self.compile_line(line))
            index += 1

        logging.debug(f"Compiled document into {len(blocks)} blocks")
        return blocks

    def compile_line(self, line: str) -> BlockDescriptor:
        """
        Compile a single non-table line.

        Args:
            line: A trimmed, non-blank line

        Returns:
            The block descriptor for the line
        """
        text = self.rich_text.compile

        if line == '---':
            return BlockDescriptor.divider()

        for prefix, level in HEADING_PREFIXES:
            if line.startswith(prefix):
                return BlockDescriptor.heading(level, text(line[len(prefix):].strip()))

        if line.startswith('- '):
            return BlockDescriptor.bulleted(text(line[2:]))

        numbered = NUMBERED_ITEM.match(line)
        if numbered:
            return BlockDescriptor.numbered(text(line[numbered.end():]))

        if line.startswith(('[x] ', '[X] ')):
            return BlockDescriptor.to_do(text(line[4:]), checked=True)

        if line.startswith('[] '):
            return BlockDescriptor.to_do(text(line[3:]), checked=False)

        if line.startswith('> '):
            return BlockDescriptor.quote(text(line[2:]))

        callout = self._compile_callout(line)
        if callout is not None:
            return callout

        if line.startswith('```'):
            return BlockDescriptor.code(line[3:].strip() or "plain text")

        return BlockDescriptor.paragraph(text(line))

    def _compile_callout(self, line: str) -> Optional[BlockDescriptor]:
        icon = self.default_icon
        color = self.default_color

        options = CALLOUT_WITH_OPTIONS.match(line)
        if options:
            icon = options.group(1).strip()
            if options.group(2):
                color = options.group(2)
            body = options.group(3).strip()
        elif line.startswith('!> '):
            body = line[3:]
        elif line.startswith('callout:'):
            body = line[len('callout:'):].strip()
        else:
            return None

        return BlockDescriptor.callout(
            self.rich_text.compile(body),
            icon=Icon.from_token(icon),
            color=background_color(color),
        )


# Global compiler instance
block_compiler = BlockCompiler()


def compile_blocks(document: str) -> List[BlockDescriptor]:
    """Compile a document with the global compiler."""
    return block_compiler.compile(document)
