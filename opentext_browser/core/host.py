"""Host-side calls into the tab store.

A rendering surface reports navigation through :class:`BrowserHost`; the
host keeps track of which tab it is showing and forwards state changes.
"""

from __future__ import annotations

from .tab import Tab
from .tab_store import TabStore
from ..log import logger


class BrowserHost:
    """The UI shell's view of the store: one tab shown at a time."""

    def __init__(self, store: TabStore) -> None:
        self.store = store
        self.current_tab_id: str | None = None

    def resolve_initial_tab(self, requested_id: str | None = None) -> Tab:
        """Pick the tab to show on startup.

        A *requested_id* from the picker wins when it still exists;
        otherwise the store's active tab is shown.
        """
        if requested_id is not None:
            tab = self.switch_to(requested_id)
            if tab is not None:
                return tab
            logger.debug("requested tab %r is gone; showing active tab", requested_id)
        tab = self.store.active_tab()
        if tab is None:  # pragma: no cover - store guarantees an active tab
            tab = self.store.create()
        self.current_tab_id = tab.id
        return tab

    def switch_to(self, tab_id: str) -> Tab | None:
        if not self.store.set_active(tab_id):
            return None
        self.current_tab_id = tab_id
        return self.store.get(tab_id)

    def navigation_started(self, url: str | None = None) -> bool:
        if self.current_tab_id is None:
            return False
        return self.store.update(self.current_tab_id, url=url, is_loading=True)

    def navigation_finished(self, url: str, title: str | None = None) -> bool:
        if self.current_tab_id is None:
            return False
        return self.store.update(
            self.current_tab_id, url=url, title=title, is_loading=False
        )

    def suspend(self) -> None:
        """Backgrounding hook."""
        self.store.flush()

    def teardown(self) -> None:
        self.store.flush()
        self.current_tab_id = None
