"""
Page icon parsing for pagecraft.

Accepted forms:
    an emoji                 "🎯"
    a named store icon       "notion:rocket" or "notion:rocket_blue"
    an image URL             "https://example.com/icon.png"
"""

import logging
import unicodedata
from typing import Optional

import httpx
from pydantic import BaseModel, Field

from ..models.blocks import Icon

ICON_COLORS = ('lightgray', 'gray', 'brown', 'orange', 'yellow', 'green', 'blue', 'purple', 'pink', 'red')
ICON_URL_TEMPLATE = "https://www.notion.so/icons/{name}_{color}.svg"
DEFAULT_ICON_COLOR = "gray"

# Symbol, modifier, combining mark and format characters make up emoji sequences
EMOJI_CATEGORIES = {"So", "Sk", "Mn", "Me", "Cf"}


class IconResult(BaseModel):
    """
    Outcome of parsing an icon value.
    """

    icon: Optional[Icon] = Field(None, description="Parsed icon, or None when the value was rejected")
    validated: bool = Field(False, description="Whether the icon is known to be usable")
    error: Optional[str] = Field(None, description="Why the icon was rejected or left unvalidated")


def is_emoji(value: str) -> bool:
    if not value or len(value) > 8:
        return False
    categories = [unicodedata.category(ch) for ch in value]
    return "So" in categories and all(category in EMOJI_CATEGORIES for category in categories)


def named_icon_url(value: str) -> str:
    """
    Build the URL of a named store icon.

    Args:
        value: 'name' or 'name_color'; unknown color suffixes stay part of the name

    Returns:
        Icon URL with the color defaulting to gray
    """
    name, color = value, DEFAULT_ICON_COLOR
    head, sep, tail = value.rpartition('_')
    if sep and head and tail in ICON_COLORS:
        name, color = head, tail
    return ICON_URL_TEMPLATE.format(name=name, color=color)


def parse_icon(value: Optional[str], validate: bool = False,
               client: Optional[httpx.Client] = None) -> IconResult:
    """
    Parse a page icon value.

    Args:
        value: The icon value supplied by the caller
        validate: Whether to check that a named icon exists with a HEAD request
        client: httpx client used for validation; a short-lived one when None

    Returns:
        IconResult describing the icon or the reason it was rejected
    """
    if not value:
        return IconResult()

    value = value.strip()

    if is_emoji(value):
        return IconResult(icon=Icon(kind="emoji", value=value), validated=True)

    if value.startswith("notion:"):
        url = named_icon_url(value[len("notion:"):])
        icon = Icon(kind="external", value=url)
        if not validate:
            return IconResult(icon=icon, validated=False)
        return _validate_named_icon(icon, client)

    if value.startswith(("http://", "https://")):
        return IconResult(icon=Icon(kind="external", value=value), validated=True)

    return IconResult(error=f"Invalid icon format: {value}")


def _validate_named_icon(icon: Icon, client: Optional[httpx.Client]) -> IconResult:
    try:
        if client is not None:
            response = client.head(icon.value)
        else:
            with httpx.Client(timeout=3.0) as short_lived:
                response = short_lived.head(icon.value)
    except httpx.HTTPError as e:
        logging.warning(f"Could not validate icon {icon.value}: {e}")
        return IconResult(icon=icon, validated=False, error="Could not validate icon URL")

    if response.is_success:
        return IconResult(icon=icon, validated=True)

    name = icon.value.rsplit('/', 1)[-1].removesuffix('.svg')
    return IconResult(error=f"Icon not found: {name}")
