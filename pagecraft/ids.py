"""
Page and block identifier parsing for pagecraft.

Accepts bare ids (with or without dashes), the short form `page#block`,
and page URLs whose fragment names a block.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from .config import config

HEX_ID = re.compile(r"^[a-f0-9]{32}$")
UUID_ID = re.compile(r"^[a-f0-9]{8}-?[a-f0-9]{4}-?[a-f0-9]{4}-?[a-f0-9]{4}-?[a-f0-9]{12}$", re.IGNORECASE)
TRAILING_HEX = re.compile(r"([a-f0-9]{32})$", re.IGNORECASE)
TRAILING_UUID = re.compile(r"([a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12})$", re.IGNORECASE)
ANY_HEX = re.compile(r"[a-f0-9]{32}", re.IGNORECASE)


class PageReference(BaseModel):
    """
    A parsed page or block reference.
    """

    page_id: Optional[str] = Field(None, description="Dashed page id")
    block_id: Optional[str] = Field(None, description="Dashed block id")
    is_valid: bool = Field(False, description="Whether any id was found")
    error: Optional[str] = Field(None, description="Why parsing failed")


def normalize_id(value: str) -> str:
    """
    Convert a 32 hex digit id, dashed or not, into dashed UUID form.

    Values that are not such ids are returned unchanged.
    """
    clean = value.replace('-', '').lower()
    if HEX_ID.match(clean):
        return f"{clean[:8]}-{clean[8:12]}-{clean[12:16]}-{clean[16:20]}-{clean[20:]}"
    return value


def _is_store_host(hostname: str) -> bool:
    web_host = urlparse(config.web_url).hostname or ""
    # www.notion.so and notion.so share a registered domain
    domain = web_host[4:] if web_host.startswith("www.") else web_host
    return bool(domain) and hostname.endswith(domain)


def parse_page_reference(value: Optional[str]) -> PageReference:
    """
    Parse a page id, `page#block` short form, or page URL.

    Args:
        value: The reference supplied by the caller

    Returns:
        PageReference with whatever ids could be extracted
    """
    if not value:
        return PageReference(error="Empty input")

    value = value.strip()

    if '#' in value and not value.startswith('http'):
        page_part, _, block_part = value.partition('#')
        page_id = normalize_id(page_part) if page_part else None
        block_id = normalize_id(block_part) if block_part else None
        return PageReference(page_id=page_id, block_id=block_id, is_valid=bool(page_id or block_id))

    if UUID_ID.match(value):
        return PageReference(page_id=normalize_id(value), is_valid=True)

    parsed = urlparse(value)
    if parsed.scheme in ("http", "https") and parsed.hostname:
        if not _is_store_host(parsed.hostname):
            return PageReference(error="Not a store URL")

        page_id = None
        for part in reversed(parsed.path.split('/')):
            if not part:
                continue
            match = TRAILING_HEX.search(part) or TRAILING_UUID.search(part)
            if match:
                page_id = normalize_id(match.group(1))
                break

        block_id = None
        if parsed.fragment and UUID_ID.match(parsed.fragment):
            block_id = normalize_id(parsed.fragment)

        if not page_id and not block_id:
            return PageReference(error="Could not extract page or block ID from URL")
        return PageReference(page_id=page_id, block_id=block_id, is_valid=True)

    found = ANY_HEX.findall(value)
    if found:
        return PageReference(
            page_id=normalize_id(found[0]),
            block_id=normalize_id(found[1]) if len(found) > 1 else None,
            is_valid=True,
        )
    return PageReference(error="Invalid input format")
