"""
Unit tests for the inline markup compiler.
"""

import unittest

import pytest

from pagecraft.compiler.rich_text import RichTextCompiler
from pagecraft.models.rich_text import MentionKind, MentionSpan, PlainTextSpan, spans_to_plain


class TestRichTextCompiler(unittest.TestCase):
    """Test inline markup compilation."""

    def setUp(self):
        """Set up test fixtures."""
        self.compiler = RichTextCompiler(web_url="https://www.notion.so")

    def test_plain_text_is_single_span(self):
        spans = self.compiler.compile("hello world")

        self.assertEqual(len(spans), 1)
        self.assertEqual(spans[0].to_api(), {"type": "text", "text": {"content": "hello world"}})

    def test_empty_input_gives_one_empty_span(self):
        spans = self.compiler.compile("")

        self.assertEqual(len(spans), 1)
        self.assertEqual(spans[0].content, "")

    def test_bold_splits_surrounding_text(self):
        spans = self.compiler.compile("a **b** c")

        self.assertEqual([span.plain_text for span in spans], ["a ", "b", " c"])
        self.assertTrue(spans[1].annotations.bold)
        self.assertFalse(spans[0].annotations.bold)
        self.assertEqual(spans[1].to_api()["annotations"], {"bold": True})

    def test_bold_is_not_read_as_italic(self):
        spans = self.compiler.compile("**strong**")

        self.assertEqual(len(spans), 1)
        self.assertTrue(spans[0].annotations.bold)
        self.assertFalse(spans[0].annotations.italic)

    def test_italic_strikethrough_and_code(self):
        spans = self.compiler.compile("*i* ~~s~~ `c`")

        styled = [span for span in spans if span.plain_text.strip()]
        self.assertTrue(styled[0].annotations.italic)
        self.assertTrue(styled[1].annotations.strikethrough)
        self.assertTrue(styled[2].annotations.code)

    def test_link(self):
        spans = self.compiler.compile("see [docs](https://example.com) now")

        self.assertEqual(len(spans), 3)
        self.assertEqual(spans[1].to_api(), {
            "type": "text",
            "text": {"content": "docs", "link": {"url": "https://example.com"}}
        })

    def test_page_mention(self):
        spans = self.compiler.compile("@page[Plan](abc123)")

        self.assertEqual(len(spans), 1)
        self.assertIsInstance(spans[0], MentionSpan)
        self.assertEqual(spans[0].to_api(), {
            "type": "mention",
            "mention": {"type": "page", "page": {"id": "abc123"}}
        })

    def test_database_and_user_mentions(self):
        spans = self.compiler.compile("@db[Tasks](db1) by @user[Ana](u1)")

        self.assertEqual(spans[0].kind, MentionKind.DATABASE)
        self.assertEqual(spans[0].target_id, "db1")
        self.assertEqual(spans[2].kind, MentionKind.USER)
        self.assertEqual(spans[2].display_text, "Ana")

    def test_anchored_page_mention_becomes_deep_link(self):
        spans = self.compiler.compile("@page[Plan](1234-5678#ab-cd)")

        self.assertEqual(len(spans), 1)
        self.assertIsInstance(spans[0], PlainTextSpan)
        self.assertEqual(spans[0].content, "Plan")
        self.assertEqual(spans[0].link, "https://www.notion.so/12345678#abcd")

    def test_overlapping_candidates_keep_earliest(self):
        spans = self.compiler.compile("**a `b` c**")

        self.assertEqual(len(spans), 1)
        self.assertTrue(spans[0].annotations.bold)
        self.assertEqual(spans[0].content, "a `b` c")

    def test_content_is_preserved_without_delimiters(self):
        spans = self.compiler.compile("x **y** *z* ~~w~~ `v` end")

        self.assertEqual(spans_to_plain(spans), "x y z w v end")

    def test_unclosed_markup_stays_literal(self):
        spans = self.compiler.compile("2 * 3 = **6")

        self.assertEqual(len(spans), 1)
        self.assertEqual(spans[0].content, "2 * 3 = **6")

    def test_date_mention_wire_shape(self):
        mention = MentionSpan(kind=MentionKind.DATE, target_id="2025-03-14", display_text="2025-03-14")

        self.assertEqual(mention.to_api(), {
            "type": "mention",
            "mention": {"type": "date", "date": {"start": "2025-03-14", "end": None, "time_zone": None}}
        })


@pytest.mark.parametrize("markup,visible", [
    ("see @page[Plan](abc123) today", "see Plan today"),
    ("jump to @page[Plan](1234-5678#ab-cd)!", "jump to Plan!"),
    ("ask @user[Ana](u1) about @db[Tasks](db1)", "ask Ana about Tasks"),
    ("read [the docs](https://example.com) first", "read the docs first"),
    ("**bold** @page[T](p1) and [l](url) `x`", "bold T and l x"),
    ("@page[T](p1#blk) then ~~gone~~", "T then gone"),
])
def test_visible_text_is_markup_without_delimiters(markup, visible):
    spans = RichTextCompiler(web_url="https://www.notion.so").compile(markup)

    assert spans_to_plain(spans) == visible


if __name__ == '__main__':
    unittest.main()
