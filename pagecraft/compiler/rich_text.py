"""
Inline markup compiler for pagecraft.

Turns a single line of lightweight markup into rich text spans. Each
recognizer is a regular expression paired with a span builder. All
recognizers scan the whole line; the matches are ordered by position and a
greedy sweep keeps each match that starts at or after the end of the last
kept one. Text between kept matches becomes plain spans.

Supported markup, in recognizer order:

    @page[Title](id#block)   link to a block inside a page
    @page[Title](id)         page mention
    @db[Name](id)            database mention
    @user[Name](id)          user mention
    [text](url)              link
    **bold**  *italic*  ~~strikethrough~~  `code`
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Pattern

from ..config import config
from ..models.rich_text import (
    Annotations, MentionKind, MentionSpan, PlainTextSpan, RichTextSpan
)


@dataclass
class SpanCandidate:
    """A recognizer match waiting for the greedy sweep."""
    start: int
    end: int
    span: RichTextSpan


@dataclass(frozen=True)
class InlineRecognizer:
    """A named pattern and the function that turns its matches into spans."""
    name: str
    pattern: Pattern[str]
    build: Callable[["re.Match[str]"], RichTextSpan]

    def scan(self, text: str) -> Iterator[SpanCandidate]:
        for match in self.pattern.finditer(text):
            yield SpanCandidate(match.start(), match.end(), self.build(match))


def _mention(kind: MentionKind) -> Callable[["re.Match[str]"], RichTextSpan]:
    def build(match: "re.Match[str]") -> RichTextSpan:
        return MentionSpan(kind=kind, target_id=match.group(2), display_text=match.group(1))
    return build


def _emphasis(**flags: bool) -> Callable[["re.Match[str]"], RichTextSpan]:
    def build(match: "re.Match[str]") -> RichTextSpan:
        return PlainTextSpan(content=match.group(1), annotations=Annotations(**flags))
    return build


def _link(match: "re.Match[str]") -> RichTextSpan:
    return PlainTextSpan(content=match.group(1), link=match.group(2))


class RichTextCompiler:
    """
    Compiles inline markup into rich text spans.

    The recognizer list is ordered: when two recognizers match at the same
    position, the earlier one wins. Callers may append recognizers to
    `self.recognizers` to extend the markup.
    """

    def __init__(self, web_url: Optional[str] = None):
        """
        Initialize the compiler.

        Args:
            web_url: Base URL used for block deep links; configured value when None
        """
        self.web_url = (web_url or config.web_url).rstrip('/')
        self.recognizers: List[InlineRecognizer] = self._default_recognizers()

    def _default_recognizers(self) -> List[InlineRecognizer]:
        return [
            InlineRecognizer("page_anchor", re.compile(r"@page\[([^\]]+)\]\(([^)#]+)#([^)]+)\)"),
                             self._anchored_page),
            InlineRecognizer("page", re.compile(r"@page\[([^\]]+)\]\(([^)]+)\)"),
                             _mention(MentionKind.PAGE)),
            InlineRecognizer("database", re.compile(r"@db\[([^\]]+)\]\(([^)]+)\)"),
                             _mention(MentionKind.DATABASE)),
            InlineRecognizer("user", re.compile(r"@user\[([^\]]+)\]\(([^)]+)\)"),
                             _mention(MentionKind.USER)),
            InlineRecognizer("link", re.compile(r"\[([^\]]+)\]\(([^)]+)\)"), _link),
            InlineRecognizer("bold", re.compile(r"\*\*([^*]+)\*\*"), _emphasis(bold=True)),
            InlineRecognizer("italic", re.compile(r"(?<!\*)\*([^*]+)\*(?!\*)"), _emphasis(italic=True)),
            InlineRecognizer("strikethrough", re.compile(r"~~([^~]+)~~"), _emphasis(strikethrough=True)),
            InlineRecognizer("code", re.compile(r"`([^`]+)`"), _emphasis(code=True)),
        ]

    def _anchored_page(self, match: "re.Match[str]") -> RichTextSpan:
        mention = MentionSpan(
            kind=MentionKind.PAGE,
            target_id=match.group(2),
            block_anchor=match.group(3),
            display_text=match.group(1),
        )
        return mention.as_link(self.web_url)

    def compile(self, text: str) -> List[RichTextSpan]:
        """
        Compile a line of markup.

        Args:
            text: The line to compile

        Returns:
            Non-empty list of spans; a single plain span equal to the input
            when nothing was recognized
        """
        candidates: List[SpanCandidate] = []
        for recognizer in self.recognizers:
            candidates.extend(recognizer.scan(text))

        # sort is stable, so recognizer order breaks ties on equal starts
        candidates.sort(key=lambda candidate: candidate.start)

        spans: List[RichTextSpan] = []
        position = 0
        for candidate in candidates:
            if candidate.start < position:
                continue
            if candidate.start > position:
                spans.append(PlainTextSpan(content=text[position:candidate.start]))
            spans.append(candidate.span)
            position = candidate.end

        if position < len(text):
            spans.append(PlainTextSpan(content=text[position:]))

        if not spans:
            return [PlainTextSpan(content=text)]

        logging.debug(f"Compiled {len(text)} chars into {len(spans)} spans")
        return spans


# Global compiler instance
rich_text_compiler = RichTextCompiler()


def compile_rich_text(text: str) -> List[RichTextSpan]:
    """Compile a line of markup with the global compiler."""
    return rich_text_compiler.compile(text)
