"""
Unit tests for page and block reference parsing.
"""

import pytest

from pagecraft.ids import normalize_id, parse_page_reference

PAGE_HEX = "1234567890abcdef1234567890abcdef"
PAGE_UUID = "12345678-90ab-cdef-1234-567890abcdef"
BLOCK_HEX = "abcdefabcdefabcdefabcdefabcdef12"
BLOCK_UUID = "abcdefab-cdef-abcd-efab-cdefabcdef12"


def test_normalize_id_adds_dashes():
    assert normalize_id(PAGE_HEX) == PAGE_UUID
    assert normalize_id(PAGE_UUID) == PAGE_UUID
    assert normalize_id(PAGE_HEX.upper()) == PAGE_UUID


def test_normalize_id_leaves_other_values():
    assert normalize_id("p1") == "p1"


def test_empty_input():
    reference = parse_page_reference("")

    assert not reference.is_valid
    assert reference.error == "Empty input"


@pytest.mark.parametrize("value", [PAGE_HEX, PAGE_UUID, f"  {PAGE_UUID}  "])
def test_bare_ids(value):
    reference = parse_page_reference(value)

    assert reference.is_valid
    assert reference.page_id == PAGE_UUID
    assert reference.block_id is None


def test_short_form_with_block():
    reference = parse_page_reference(f"{PAGE_HEX}#{BLOCK_HEX}")

    assert reference.page_id == PAGE_UUID
    assert reference.block_id == BLOCK_UUID


def test_short_form_block_only():
    reference = parse_page_reference(f"#{BLOCK_HEX}")

    assert reference.is_valid
    assert reference.page_id is None
    assert reference.block_id == BLOCK_UUID


def test_store_url_with_title_slug_and_fragment():
    reference = parse_page_reference(f"https://www.notion.so/team/Project-Plan-{PAGE_HEX}#{BLOCK_HEX}")

    assert reference.is_valid
    assert reference.page_id == PAGE_UUID
    assert reference.block_id == BLOCK_UUID


def test_store_url_on_workspace_subdomain():
    reference = parse_page_reference(f"https://acme.notion.so/{PAGE_HEX}?pvs=4")

    assert reference.page_id == PAGE_UUID


def test_foreign_url_is_rejected():
    reference = parse_page_reference(f"https://example.com/{PAGE_HEX}")

    assert not reference.is_valid
    assert reference.error == "Not a store URL"


def test_store_url_without_id():
    reference = parse_page_reference("https://www.notion.so/team/settings")

    assert not reference.is_valid
    assert "Could not extract" in reference.error


def test_ids_embedded_in_text():
    reference = parse_page_reference(f"page {PAGE_HEX} block {BLOCK_HEX}")

    assert reference.page_id == PAGE_UUID
    assert reference.block_id == BLOCK_UUID


def test_garbage_is_invalid():
    reference = parse_page_reference("not an id")

    assert not reference.is_valid
    assert reference.error == "Invalid input format"
