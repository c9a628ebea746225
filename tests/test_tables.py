"""
Unit tests for pipe table compilation.
"""

import unittest

from pagecraft.compiler.blocks import BlockCompiler
from pagecraft.compiler.tables import TableCompiler, is_separator_row, split_row
from pagecraft.models.blocks import BlockDescriptor, BlockKind
from pagecraft.models.rich_text import PlainTextSpan


def row_texts(table):
    return [[cell[0]["text"]["content"] for cell in row["table_row"]["cells"]]
            for row in table.to_api()["table"]["children"]]


class TestTableCompiler(unittest.TestCase):
    """Test table detection, separators and row fitting."""

    def setUp(self):
        """Set up test fixtures."""
        self.compiler = BlockCompiler()

    def test_table_with_header(self):
        blocks = self.compiler.compile("| A | B |\n|---|---|\n| 1 | 2 |")

        self.assertEqual(len(blocks), 1)
        payload = blocks[0].to_api()["table"]
        self.assertEqual(payload["table_width"], 2)
        self.assertTrue(payload["has_column_header"])
        self.assertFalse(payload["has_row_header"])
        self.assertEqual(row_texts(blocks[0]), [["A", "B"], ["1", "2"]])

    def test_table_without_separator_has_no_header(self):
        blocks = self.compiler.compile("| A | B |\n| 1 | 2 |")

        self.assertFalse(blocks[0].has_column_header)

    def test_late_separator_does_not_mark_header(self):
        blocks = self.compiler.compile("| a |\n| b |\n|---|\n| c |")

        self.assertFalse(blocks[0].has_column_header)
        self.assertEqual(row_texts(blocks[0]), [["a"], ["b"], ["c"]])

    def test_ragged_rows_are_padded(self):
        blocks = self.compiler.compile("| a |\n| b | c | d |")

        self.assertEqual(blocks[0].width, 3)
        self.assertEqual(row_texts(blocks[0]), [["a", "", ""], ["b", "c", "d"]])

    def test_blank_line_ends_table(self):
        blocks = self.compiler.compile("| a |\n\n| b |")

        self.assertEqual([block.kind for block in blocks], [BlockKind.TABLE, BlockKind.TABLE])

    def test_non_pipe_line_ends_table(self):
        blocks = self.compiler.compile("| a |\nafter")

        self.assertEqual([block.kind for block in blocks], [BlockKind.TABLE, BlockKind.PARAGRAPH])

    def test_separator_only_table_emits_nothing(self):
        self.assertEqual(self.compiler.compile("|---|---|"), [])

    def test_compile_returns_next_index(self):
        lines = ["intro", "| a |", "| b |", "outro"]
        table, index = TableCompiler().compile(lines, 1)

        self.assertIsNotNone(table)
        self.assertEqual(index, 3)

    def test_separator_detection(self):
        self.assertTrue(is_separator_row("| :--- | ---: |"))
        self.assertTrue(is_separator_row("|---|"))
        self.assertFalse(is_separator_row("| a | - |"))

    def test_split_row(self):
        self.assertEqual(split_row("| a |  b  |"), ["a", "b"])
        self.assertEqual(split_row("no pipes"), [])

    def test_table_descriptor_fits_rows_to_width(self):
        cell = [PlainTextSpan(content="x")]
        table = BlockDescriptor.table([[cell], [cell, cell]])

        self.assertEqual(table.width, 2)
        for row in table.children:
            self.assertEqual(len(row.cells), 2)


if __name__ == '__main__':
    unittest.main()
