"""OpenText Browser: multi-tab state with durable persistence."""

from .core import (
    BrowserHost,
    DuplicateTabError,
    Tab,
    TabNotFoundError,
    TabStore,
    TabStoreError,
    TabStoreProvider,
    open_tab_store,
)

__version__ = "0.1.0"

__all__ = [
    "BrowserHost",
    "DuplicateTabError",
    "Tab",
    "TabNotFoundError",
    "TabStore",
    "TabStoreError",
    "TabStoreProvider",
    "__version__",
    "open_tab_store",
]
