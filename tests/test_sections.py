"""
Unit tests for section registry and section location.
"""

import unittest

import pytest

from pagecraft.sections.locator import (
    SectionLocator, is_section_header, normalize_text, trailing_buttons
)
from pagecraft.sections.registry import SectionConfig, SectionRegistry


def block(block_id, block_type, text="", bold=False):
    """Build a store-shaped block."""
    item = {"type": "text", "text": {"content": text}, "plain_text": text}
    if bold:
        item["annotations"] = {"bold": True}
    return {"id": block_id, "type": block_type, block_type: {"rich_text": [item] if text else []}}


REGISTRY = SectionRegistry([
    SectionConfig(name="activity log", aliases=("history", "updates")),
    SectionConfig(name="to do", aliases=("todo", "checklist")),
])


class TestNormalizeText(unittest.TestCase):
    """Test section text normalization."""

    def test_normalization(self):
        self.assertEqual(normalize_text("Activity-Log!"), "activity log")
        self.assertEqual(normalize_text("  To_Do   list "), "to do list")
        self.assertEqual(normalize_text("\U0001F4CB History"), "history")


class TestSectionLocator(unittest.TestCase):
    """Test locating sections among a page's blocks."""

    def setUp(self):
        """Set up test fixtures."""
        self.locator = SectionLocator(REGISTRY)

    def test_locates_heading(self):
        blocks = [block("1", "paragraph", "Intro"), block("2", "heading_2", "Activity Log"), block("3", "bulleted_list_item", "x")]

        header = self.locator.locate(blocks, "Activity Log")

        self.assertEqual(header.index, 1)
        self.assertEqual(header.block_id, "2")

    def test_locates_bold_callout_by_alias(self):
        blocks = [block("1", "callout", "\U0001F4CB History", bold=True)]

        header = self.locator.locate(blocks, "Activity Log")

        self.assertIsNotNone(header)
        self.assertEqual(header.matched_name, "history")

    def test_ignores_callout_without_bold_start(self):
        blocks = [block("1", "callout", "Activity Log")]

        self.assertIsNone(self.locator.locate(blocks, "Activity Log"))

    def test_bold_paragraph_is_header_plain_is_not(self):
        plain = [block("1", "paragraph", "Activity Log")]
        bold = [block("1", "paragraph", "Activity Log", bold=True)]

        self.assertIsNone(self.locator.locate(plain, "Activity Log"))
        self.assertIsNotNone(self.locator.locate(bold, "Activity Log"))

    def test_match_ignores_case_and_punctuation(self):
        blocks = [block("1", "heading_1", "ACTIVITY-LOG:")]

        self.assertIsNotNone(self.locator.locate(blocks, "activity log"))

    def test_unknown_section_matches_by_name(self):
        blocks = [block("1", "heading_2", "Meeting Notes")]

        self.assertIsNotNone(self.locator.locate(blocks, "Notes"))
        self.assertIsNone(self.locator.locate(blocks, "Decisions"))

    def test_first_match_wins(self):
        blocks = [block("1", "heading_2", "To Do"), block("2", "heading_2", "Checklist")]

        self.assertEqual(self.locator.locate(blocks, "To Do").block_id, "1")

    def test_toggle_can_be_located(self):
        blocks = [block("1", "toggle", "Updates")]

        self.assertIsNotNone(self.locator.locate(blocks, "Activity Log"))

    def test_section_blocks_stop_at_next_header(self):
        blocks = [
            block("h", "heading_2", "Activity Log"),
            block("t", "toggle", "2025-03-14"),
            block("b", "bulleted_list_item", "note"),
            block("n", "heading_2", "Next"),
            block("p", "paragraph", "after"),
        ]

        section = self.locator.section_blocks_after(blocks, 0)

        self.assertEqual([b["id"] for b in section], ["t", "b"])

    def test_section_runs_to_end_of_page(self):
        blocks = [block("h", "heading_2", "Notes"), block("p", "paragraph", "a")]

        self.assertEqual(len(self.locator.section_blocks_after(blocks, 0)), 1)

    def test_is_section_header(self):
        self.assertTrue(is_section_header(block("1", "heading_3", "x")))
        self.assertTrue(is_section_header(block("1", "callout", "x", bold=True)))
        self.assertFalse(is_section_header(block("1", "toggle", "x", bold=True)))
        self.assertFalse(is_section_header(block("1", "divider")))

    def test_trailing_buttons(self):
        blocks = [block("1", "paragraph", "a"), block("2", "button"), block("3", "button")]

        self.assertEqual([b["id"] for b in trailing_buttons(blocks)], ["2", "3"])
        self.assertEqual(trailing_buttons(blocks[:1]), [])


class TestSectionRegistry(unittest.TestCase):
    """Test the section registry."""

    def test_from_config(self):
        registry = SectionRegistry.from_config({
            "activity log": {
                "aliases": ["log"],
                "icon_url": "https://www.notion.so/icons/timeline_gray.svg",
                "color": "gray_background",
            }
        })

        self.assertEqual(registry.aliases_for("Activity Log"), ("log",))
        self.assertEqual(registry.aliases_for("Unknown"), ())
        self.assertEqual(registry.list_sections(), ["activity log"])

    def test_registry_cannot_be_mutated(self):
        with self.assertRaises(TypeError):
            REGISTRY._sections["new"] = SectionConfig(name="new")

    def test_header_block(self):
        payload = REGISTRY.header_block("To Do").to_api()["callout"]

        self.assertEqual(payload["rich_text"][0]["text"]["content"], "To Do")
        self.assertEqual(payload["rich_text"][0]["annotations"], {"bold": True})
        self.assertEqual(payload["icon"]["type"], "external")

    def test_header_block_for_unknown_section(self):
        payload = REGISTRY.header_block("Notes").to_api()["callout"]

        self.assertEqual(payload["icon"]["external"]["url"], "https://www.notion.so/icons/document_gray.svg")
        self.assertEqual(payload["color"], "gray_background")


@pytest.mark.parametrize("heading", ["To Do", "To-Do", "TODOS", "Checklist", "\U0001F4CB My checklist:"])
@pytest.mark.parametrize("block_type", ["heading_1", "heading_2", "heading_3"])
def test_to_do_aliases_are_located(heading, block_type):
    blocks = [block("intro", "paragraph", "Intro"), block("h", block_type, heading)]

    header = SectionLocator(REGISTRY).locate(blocks, "to do")

    assert header is not None
    assert header.block_id == "h"


@pytest.mark.parametrize("heading", ["Done", "Tod", "Notes"])
def test_unrelated_headings_are_not_to_do(heading):
    assert SectionLocator(REGISTRY).locate([block("h", "heading_2", heading)], "to do") is None


if __name__ == '__main__':
    unittest.main()
