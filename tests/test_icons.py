"""
Unit tests for page icon parsing.
"""

import httpx
import pytest

from pagecraft.compiler.icons import is_emoji, named_icon_url, parse_icon


def mock_client(status=200, error=None):
    def handler(request):
        if error is not None:
            raise error("unreachable", request=request)
        return httpx.Response(status)
    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.mark.parametrize("value", ["\U0001F3AF", "✅", "\U0001F44D\U0001F3FD"])
def test_emoji(value):
    result = parse_icon(value)

    assert result.validated
    assert result.icon.to_api() == {"type": "emoji", "emoji": value}


def test_text_is_not_emoji():
    assert not is_emoji("nope")
    assert not is_emoji("")


def test_named_icon_urls():
    assert named_icon_url("rocket") == "https://www.notion.so/icons/rocket_gray.svg"
    assert named_icon_url("rocket_blue") == "https://www.notion.so/icons/rocket_blue.svg"
    assert named_icon_url("arrow_up") == "https://www.notion.so/icons/arrow_up_gray.svg"


def test_named_icon_without_validation():
    result = parse_icon("notion:rocket_blue")

    assert not result.validated
    assert result.error is None
    assert result.icon.to_api() == {"type": "external",
                                    "external": {"url": "https://www.notion.so/icons/rocket_blue.svg"}}


def test_named_icon_validated():
    result = parse_icon("notion:rocket", validate=True, client=mock_client(200))

    assert result.validated
    assert result.icon is not None


def test_missing_named_icon():
    result = parse_icon("notion:nosuch_red", validate=True, client=mock_client(404))

    assert result.icon is None
    assert result.error == "Icon not found: nosuch_red"


def test_unreachable_icon_host_keeps_icon():
    result = parse_icon("notion:rocket", validate=True, client=mock_client(error=httpx.ConnectError))

    assert result.icon is not None
    assert result.error == "Could not validate icon URL"


def test_image_url():
    result = parse_icon("https://example.com/icon.png")

    assert result.icon.to_api() == {"type": "external", "external": {"url": "https://example.com/icon.png"}}


def test_invalid_value():
    result = parse_icon("nope")

    assert result.icon is None
    assert result.error == "Invalid icon format: nope"


def test_empty_value():
    result = parse_icon(None)

    assert result.icon is None
    assert result.error is None
