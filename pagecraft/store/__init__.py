"""Block store backends for pagecraft."""

from .base import BlockStore, StoreError, normalize_schema
from .http import HttpBlockStore
from .memory import InMemoryBlockStore

__all__ = [
    "BlockStore",
    "StoreError",
    "normalize_schema",
    "HttpBlockStore",
    "InMemoryBlockStore",
]
