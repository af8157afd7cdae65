"""Framework-agnostic core: tab records, the tab store and persistence."""

from .host import BrowserHost
from .tab import DEFAULT_TITLE, DEFAULT_URL, Tab, TabSchemaError
from .tab_store import (
    DuplicateTabError,
    TabNotFoundError,
    TabStore,
    TabStoreError,
    TabStoreProvider,
    open_tab_store,
)

__all__ = [
    "BrowserHost",
    "DEFAULT_TITLE",
    "DEFAULT_URL",
    "DuplicateTabError",
    "Tab",
    "TabNotFoundError",
    "TabSchemaError",
    "TabStore",
    "TabStoreError",
    "TabStoreProvider",
    "open_tab_store",
]
