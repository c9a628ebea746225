"""
Rich text models for pagecraft.

A rich text span is either a run of annotated text or a typed reference
("mention") to another entity. Compilers produce these models; `to_api()`
renders the wire shape the block store accepts.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union
from typing import Annotated

from pydantic import BaseModel, Field


class Annotations(BaseModel):
    """
    Inline emphasis flags carried by a text span.
    """

    bold: bool = Field(default=False, description="Render the span in bold")
    italic: bool = Field(default=False, description="Render the span in italics")
    strikethrough: bool = Field(default=False, description="Strike the span through")
    code: bool = Field(default=False, description="Render the span as inline code")

    def is_plain(self) -> bool:
        """Return True when no emphasis flag is set."""
        return not (self.bold or self.italic or self.strikethrough or self.code)

    def to_api(self) -> Dict[str, bool]:
        """Render only the flags that are set."""
        return {name: True for name, value in self.model_dump().items() if value}


class MentionKind(str, Enum):
    """Entity kinds a mention span can reference."""

    PAGE = "page"
    DATABASE = "database"
    USER = "user"
    DATE = "date"


class PlainTextSpan(BaseModel):
    """
    A run of text with optional link and emphasis.
    """

    type: Literal["text"] = "text"

    content: str = Field(
        ...,
        description="The visible text of the span"
    )

    link: Optional[str] = Field(
        default=None,
        description="URL the span links to, if any"
    )

    annotations: Annotations = Field(
        default_factory=Annotations,
        description="Emphasis applied to the span"
    )

    @property
    def plain_text(self) -> str:
        return self.content

    def to_api(self) -> Dict[str, Any]:
        text: Dict[str, Any] = {"content": self.content}
        if self.link:
            text["link"] = {"url": self.link}

        item: Dict[str, Any] = {"type": "text", "text": text}
        if not self.annotations.is_plain():
            item["annotations"] = self.annotations.to_api()
        return item


class MentionSpan(BaseModel):
    """
    A typed reference to a page, database, user or calendar date.
    """

    type: Literal["mention"] = "mention"

    kind: MentionKind = Field(
        ...,
        description="The kind of entity referenced"
    )

    target_id: str = Field(
        ...,
        description="Identifier of the referenced entity (ISO date for date mentions)"
    )

    block_anchor: Optional[str] = Field(
        default=None,
        description="Block inside the target page the reference points at"
    )

    display_text: str = Field(
        ...,
        description="Text shown for the mention"
    )

    @property
    def plain_text(self) -> str:
        return self.display_text

    def as_link(self, web_url: str) -> PlainTextSpan:
        """
        Convert an anchored page mention into a linked text span.

        The store has no mention type that targets a block, so the reference
        becomes a deep link of the form ``{web_url}/{page}#{block}``.

        Args:
            web_url: Base URL of the store's web application

        Returns:
            A PlainTextSpan carrying the display text and deep link
        """
        page_part = self.target_id.replace('-', '')
        url = f"{web_url.rstrip('/')}/{page_part}"
        if self.block_anchor:
            url = f"{url}#{self.block_anchor.replace('-', '')}"
        return PlainTextSpan(content=self.display_text, link=url)

    def to_api(self) -> Dict[str, Any]:
        if self.kind == MentionKind.DATE:
            return {
                "type": "mention",
                "mention": {
                    "type": "date",
                    "date": {"start": self.target_id, "end": None, "time_zone": None}
                }
            }
        return {
            "type": "mention",
            "mention": {"type": self.kind.value, self.kind.value: {"id": self.target_id}}
        }


RichTextSpan = Annotated[Union[PlainTextSpan, MentionSpan], Field(discriminator="type")]


def text_span(content: str, bold: bool = False) -> PlainTextSpan:
    """Build an unlinked text span, optionally bold."""
    return PlainTextSpan(content=content, annotations=Annotations(bold=bold))


def date_mention(date_key: str) -> List[RichTextSpan]:
    """Build the rich text of a date reference such as a date container label."""
    return [MentionSpan(kind=MentionKind.DATE, target_id=date_key, display_text=date_key)]


def spans_to_api(spans: List[RichTextSpan]) -> List[Dict[str, Any]]:
    return [span.to_api() for span in spans]


def spans_to_plain(spans: List[RichTextSpan]) -> str:
    return ''.join(span.plain_text for span in spans)


def plain_text(rich_text: Optional[List[Dict[str, Any]]]) -> str:
    """
    Extract the visible text from store-shaped rich text.

    Args:
        rich_text: Rich text items as returned by the store

    Returns:
        Concatenated text, using ``plain_text`` when the store supplied it
    """
    if not rich_text or not isinstance(rich_text, list):
        return ""
    parts = []
    for item in rich_text:
        text = item.get("plain_text")
        if text is None:
            text = (item.get("text") or {}).get("content", "")
        parts.append(text or "")
    return ''.join(parts)


def has_date_mention(rich_text: Optional[List[Dict[str, Any]]], date_key: str) -> bool:
    """Check whether store-shaped rich text holds a date reference starting on date_key."""
    if not rich_text or not isinstance(rich_text, list):
        return False
    for item in rich_text:
        mention = item.get("mention") or {}
        if item.get("type") == "mention" and mention.get("type") == "date":
            start = (mention.get("date") or {}).get("start") or ""
            if start.startswith(date_key):
                return True
    return False
