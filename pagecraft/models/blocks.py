"""
Block descriptor models for pagecraft.

A BlockDescriptor is a transient description of a block to create in the
store. Kinds form a closed enumeration and `to_api()` dispatches over all of
them, so an unknown kind is a programming error rather than a silent default.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .rich_text import PlainTextSpan, RichTextSpan, spans_to_api, spans_to_plain


class BlockKind(str, Enum):
    """Block kinds pagecraft can create."""

    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    QUOTE = "quote"
    DIVIDER = "divider"
    CALLOUT = "callout"
    CODE = "code"
    PARAGRAPH = "paragraph"
    TABLE = "table"
    TABLE_ROW = "table_row"
    TOGGLE = "toggle"


HEADING_KINDS = (BlockKind.HEADING_1, BlockKind.HEADING_2, BlockKind.HEADING_3)

# Kinds whose payload is just rich text (plus optional children)
RICH_TEXT_KINDS = HEADING_KINDS + (
    BlockKind.BULLETED_LIST_ITEM,
    BlockKind.NUMBERED_LIST_ITEM,
    BlockKind.QUOTE,
    BlockKind.PARAGRAPH,
    BlockKind.TOGGLE,
)


class Icon(BaseModel):
    """
    An icon attached to a callout or page.
    """

    kind: Literal["emoji", "external"] = Field(
        ...,
        description="Whether the icon is an emoji glyph or an external image"
    )

    value: str = Field(
        ...,
        description="The emoji itself or the image URL"
    )

    @classmethod
    def from_token(cls, token: str) -> "Icon":
        """Tokens starting with http are external images, anything else an emoji."""
        token = token.strip()
        if token.startswith("http"):
            return cls(kind="external", value=token)
        return cls(kind="emoji", value=token)

    def to_api(self) -> Dict[str, Any]:
        if self.kind == "external":
            return {"type": "external", "external": {"url": self.value}}
        return {"type": "emoji", "emoji": self.value}


def empty_cell() -> List[RichTextSpan]:
    return [PlainTextSpan(content="")]


def fit_cells(cells: List[List[RichTextSpan]], width: int) -> List[List[RichTextSpan]]:
    """
    Pad a row with empty cells or truncate it so it has exactly `width` cells.

    Args:
        cells: Row cells, each a list of rich text spans
        width: Target cell count

    Returns:
        A new list of exactly `width` cells
    """
    fitted = list(cells[:width])
    while len(fitted) < width:
        fitted.append(empty_cell())
    return fitted


class BlockDescriptor(BaseModel):
    """
    A block to be created in the store.

    Only the fields relevant to `kind` are read when rendering; the class
    methods below are the intended way to build descriptors.
    """

    kind: BlockKind = Field(
        ...,
        description="The block kind"
    )

    rich_text: List[RichTextSpan] = Field(
        default_factory=list,
        description="Inline content of text-bearing kinds"
    )

    checked: Optional[bool] = Field(
        default=None,
        description="Checked state of a to-do"
    )

    icon: Optional[Icon] = Field(
        default=None,
        description="Icon of a callout"
    )

    color: Optional[str] = Field(
        default=None,
        description="Color tag of a callout, e.g. gray_background"
    )

    language: Optional[str] = Field(
        default=None,
        description="Language tag of a code block"
    )

    width: Optional[int] = Field(
        default=None,
        description="Column count of a table"
    )

    has_column_header: bool = Field(
        default=False,
        description="Whether the first table row is a header row"
    )

    cells: List[List[RichTextSpan]] = Field(
        default_factory=list,
        description="Cells of a table row"
    )

    children: List["BlockDescriptor"] = Field(
        default_factory=list,
        description="Nested child blocks (table rows for tables)"
    )

    @property
    def text(self) -> str:
        """Plain text of the descriptor's rich text."""
        return spans_to_plain(self.rich_text)

    # Constructors

    @classmethod
    def heading(cls, level: int, spans: List[RichTextSpan]) -> "BlockDescriptor":
        if level not in (1, 2, 3):
            raise ValueError(f"Heading level must be 1, 2 or 3, got {level}")
        return cls(kind=HEADING_KINDS[level - 1], rich_text=spans)

    @classmethod
    def paragraph(cls, spans: List[RichTextSpan]) -> "BlockDescriptor":
        return cls(kind=BlockKind.PARAGRAPH, rich_text=spans)

    @classmethod
    def bulleted(cls, spans: List[RichTextSpan]) -> "BlockDescriptor":
        return cls(kind=BlockKind.BULLETED_LIST_ITEM, rich_text=spans)

    @classmethod
    def numbered(cls, spans: List[RichTextSpan]) -> "BlockDescriptor":
        return cls(kind=BlockKind.NUMBERED_LIST_ITEM, rich_text=spans)

    @classmethod
    def to_do(cls, spans: List[RichTextSpan], checked: bool = False) -> "BlockDescriptor":
        return cls(kind=BlockKind.TO_DO, rich_text=spans, checked=checked)

    @classmethod
    def quote(cls, spans: List[RichTextSpan]) -> "BlockDescriptor":
        return cls(kind=BlockKind.QUOTE, rich_text=spans)

    @classmethod
    def divider(cls) -> "BlockDescriptor":
        return cls(kind=BlockKind.DIVIDER)

    @classmethod
    def callout(cls, spans: List[RichTextSpan], icon: Icon, color: str) -> "BlockDescriptor":
        return cls(kind=BlockKind.CALLOUT, rich_text=spans, icon=icon, color=color)

    @classmethod
    def code(cls, language: str) -> "BlockDescriptor":
        return cls(kind=BlockKind.CODE, rich_text=[PlainTextSpan(content="")], language=language)

    @classmethod
    def toggle(cls, spans: List[RichTextSpan],
               children: Optional[List["BlockDescriptor"]] = None) -> "BlockDescriptor":
        return cls(kind=BlockKind.TOGGLE, rich_text=spans, children=children or [])

    @classmethod
    def table_row(cls, cells: List[List[RichTextSpan]]) -> "BlockDescriptor":
        return cls(kind=BlockKind.TABLE_ROW, cells=cells)

    @classmethod
    def table(cls, rows: List[List[List[RichTextSpan]]],
              has_column_header: bool = False) -> "BlockDescriptor":
        """
        Build a table whose rows all have exactly the table width.

        Args:
            rows: Data rows, each a list of cells
            has_column_header: Whether the first row is a header row

        Returns:
            A table descriptor with one table_row child per data row
        """
        width = max((len(row) for row in rows), default=0)
        return cls(
            kind=BlockKind.TABLE,
            width=width,
            has_column_header=has_column_header,
            children=[cls.table_row(fit_cells(row, width)) for row in rows],
        )

    # Rendering

    def to_api(self) -> Dict[str, Any]:
        """
        Render the descriptor in the store's wire shape.

        Returns:
            Dictionary of the form ``{"type": kind, kind: payload}``
        """
        kind = self.kind

        if kind in RICH_TEXT_KINDS:
            payload: Dict[str, Any] = {"rich_text": spans_to_api(self.rich_text)}
        elif kind == BlockKind.TO_DO:
            payload = {"rich_text": spans_to_api(self.rich_text), "checked": bool(self.checked)}
        elif kind == BlockKind.DIVIDER:
            payload = {}
        elif kind == BlockKind.CALLOUT:
            payload = {"rich_text": spans_to_api(self.rich_text)}
            if self.icon is not None:
                payload["icon"] = self.icon.to_api()
            if self.color:
                payload["color"] = self.color
        elif kind == BlockKind.CODE:
            payload = {
                "rich_text": spans_to_api(self.rich_text),
                "language": self.language or "plain text",
            }
        elif kind == BlockKind.TABLE:
            payload = {
                "table_width": self.width or 0,
                "has_column_header": self.has_column_header,
                "has_row_header": False,
            }
        elif kind == BlockKind.TABLE_ROW:
            payload = {"cells": [spans_to_api(cell) for cell in self.cells]}
        else:
            raise ValueError(f"Unsupported block kind: {kind}")

        if self.children:
            payload["children"] = [child.to_api() for child in self.children]

        return {"type": kind.value, kind.value: payload}


BlockDescriptor.model_rebuild()
