"""Persistence layer – each store owns its file path, data format, and I/O."""

from ._base import KeyValueStore, StoreCorruptError
from .tabs import KEY_ACTIVE_TAB, KEY_TABS, LoadResult, LoadStatus, TabStateStore

__all__ = [
    "KEY_ACTIVE_TAB",
    "KEY_TABS",
    "KeyValueStore",
    "LoadResult",
    "LoadStatus",
    "StoreCorruptError",
    "TabStateStore",
]
