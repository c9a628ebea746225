"""
Unit tests for block descriptors and plan models.
"""

import unittest

from pydantic import ValidationError

from pagecraft.models import (
    ActivityLogEntry, BlockDescriptor, BlockKind, Icon, StoreCall
)
from pagecraft.models.rich_text import PlainTextSpan


def spans(text):
    return [PlainTextSpan(content=text)]


class TestBlockDescriptor(unittest.TestCase):
    """Test rendering descriptors in wire shape."""

    def test_every_kind_renders(self):
        descriptors = [
            BlockDescriptor.heading(1, spans("a")),
            BlockDescriptor.heading(2, spans("a")),
            BlockDescriptor.heading(3, spans("a")),
            BlockDescriptor.paragraph(spans("a")),
            BlockDescriptor.bulleted(spans("a")),
            BlockDescriptor.numbered(spans("a")),
            BlockDescriptor.to_do(spans("a")),
            BlockDescriptor.quote(spans("a")),
            BlockDescriptor.divider(),
            BlockDescriptor.callout(spans("a"), Icon(kind="emoji", value="\U0001F4A1"), "gray_background"),
            BlockDescriptor.code("python"),
            BlockDescriptor.toggle(spans("a")),
            BlockDescriptor.table([[spans("a")]]),
            BlockDescriptor.table_row([spans("a")]),
        ]

        rendered = {descriptor.to_api()["type"] for descriptor in descriptors}

        self.assertEqual(rendered, {kind.value for kind in BlockKind})

    def test_bad_heading_level(self):
        with self.assertRaises(ValueError):
            BlockDescriptor.heading(4, spans("a"))

    def test_to_do_payload(self):
        payload = BlockDescriptor.to_do(spans("task"), checked=True).to_api()["to_do"]

        self.assertTrue(payload["checked"])
        self.assertEqual(payload["rich_text"][0]["text"]["content"], "task")

    def test_callout_payload(self):
        icon = Icon.from_token("https://example.com/icon.svg")
        payload = BlockDescriptor.callout(spans("note"), icon, "blue_background").to_api()["callout"]

        self.assertEqual(payload["icon"], {"type": "external", "external": {"url": "https://example.com/icon.svg"}})
        self.assertEqual(payload["color"], "blue_background")

    def test_code_payload(self):
        payload = BlockDescriptor.code("python").to_api()["code"]

        self.assertEqual(payload["language"], "python")
        self.assertEqual(payload["rich_text"], [{"type": "text", "text": {"content": ""}}])

    def test_toggle_children_nest_in_payload(self):
        toggle = BlockDescriptor.toggle(spans("day"), [BlockDescriptor.bulleted(spans("line"))])

        payload = toggle.to_api()["toggle"]

        self.assertEqual(payload["children"][0]["type"], "bulleted_list_item")

    def test_emoji_icon_token(self):
        self.assertEqual(Icon.from_token("\U0001F4A1").to_api(), {"type": "emoji", "emoji": "\U0001F4A1"})


class TestPlanModels(unittest.TestCase):
    """Test entry and store call models."""

    def test_entry_line(self):
        entry = ActivityLogEntry(date_key="2025-03-14", time_label="09:05 ET", text=spans("09:05 ET — Sent"))

        self.assertEqual(entry.line, "09:05 ET — Sent")
        self.assertEqual(entry.text[0].to_api()["text"]["content"], entry.line)

    def test_entry_rejects_bad_date_key(self):
        with self.assertRaises(ValidationError):
            ActivityLogEntry(date_key="2025-3-14", time_label="09:05 ET")

    def test_store_call_rejects_unknown_operation(self):
        with self.assertRaises(ValidationError):
            StoreCall(operation="move_block", target_id="b1")

    def test_store_call_describe(self):
        call = StoreCall(operation="append_children", target_id="p1",
                         blocks=[BlockDescriptor.divider()], insert_after="b1")

        self.assertEqual(call.describe(), {
            "operation": "append_children",
            "target_id": "p1",
            "blocks": [{"type": "divider", "divider": {}}],
            "insert_after": "b1",
        })


if __name__ == '__main__':
    unittest.main()
