"""Tab store: the ordered tab list, the active tab, and their persistence.

The store is never observably empty.  Any operation that would leave no
tabs synthesizes a default tab in the same call, and after every public
operation ``active_tab()`` resolves to a member of ``list()``.

Access after construction is expected from one thread (the UI thread).
Only construction is guarded, see :class:`TabStoreProvider`.
"""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Callable, Iterator
from pathlib import Path

from .persistence import LoadResult, LoadStatus, TabStateStore
from .tab import DEFAULT_TITLE, DEFAULT_URL, Tab
from ..log import logger

Listener = Callable[["TabStore"], None]


class TabStoreError(Exception):
    """Base class for tab store errors."""


class TabNotFoundError(TabStoreError, KeyError):
    """An operation that requires an existing tab was given an unknown id."""

    def __init__(self, tab_id: str) -> None:
        super().__init__(tab_id)
        self.tab_id = tab_id

    def __str__(self) -> str:
        return f"no tab with id {self.tab_id!r}"


class DuplicateTabError(TabStoreError, ValueError):
    """A tab with the same id is already in the store."""


class TabStore:
    """Owns the tab sequence and the active-tab pointer.

    Every mutation is written to *state* before the call returns, then
    listeners are notified.
    """

    def __init__(self, state: TabStateStore, *, home_url: str = DEFAULT_URL) -> None:
        self._state = state
        self._home_url = home_url or DEFAULT_URL
        self._tabs: list[Tab] = []
        self._active_tab_id: str | None = None
        self._listeners: list[Listener] = []
        self.load_result: LoadResult = self._load()

    # -- loading --------------------------------------------------------------

    def _load(self) -> LoadResult:
        result = self._state.load()
        if result.tabs:
            self._tabs = list(result.tabs)
            ids = {tab.id for tab in self._tabs}
            if result.active_tab_id in ids:
                self._active_tab_id = result.active_tab_id
                return result
            self._active_tab_id = self._tabs[0].id
            result.active_fallback = True
            logger.info(
                "stored active tab %r not found; using first tab",
                result.active_tab_id,
            )
        else:
            if result.status is LoadStatus.RESTORED:
                # parsed, but an empty list
                result.active_fallback = True
            tab = self._new_tab()
            self._tabs = [tab]
            self._active_tab_id = tab.id
        self._save()
        return result

    # -- reads ----------------------------------------------------------------

    @property
    def home_url(self) -> str:
        return self._home_url

    @property
    def active_tab_id(self) -> str | None:
        return self._active_tab_id

    def list(self) -> list[Tab]:
        """Snapshot of all tabs in display order."""
        return [dataclasses.replace(tab) for tab in self._tabs]

    def count(self) -> int:
        return len(self._tabs)

    def get(self, tab_id: str) -> Tab | None:
        for tab in self._tabs:
            if tab.id == tab_id:
                return tab
        return None

    def get_at(self, index: int) -> Tab | None:
        """Tab at *index*, or ``None`` when out of range (negatives included)."""
        if 0 <= index < len(self._tabs):
            return self._tabs[index]
        return None

    def active_tab(self) -> Tab | None:
        if self._active_tab_id is None:
            return None
        return self.get(self._active_tab_id)

    def active_index(self) -> int:
        """Position of the active tab, ``-1`` when unresolved."""
        return self._index_of(self._active_tab_id)

    def __len__(self) -> int:
        return len(self._tabs)

    def __contains__(self, tab_id: object) -> bool:
        return any(tab.id == tab_id for tab in self._tabs)

    def __iter__(self) -> Iterator[Tab]:
        return iter(self.list())

    # -- mutations ------------------------------------------------------------

    def create(self, tab: Tab | None = None) -> Tab:
        """Append *tab* (a default tab when omitted) and make it active."""
        if tab is None:
            tab = self._new_tab()
        elif tab.id in self:
            raise DuplicateTabError(f"tab {tab.id!r} already exists")
        self._tabs.append(tab)
        self._active_tab_id = tab.id
        self._commit()
        return tab

    def remove(self, tab_id: str) -> bool:
        """Remove a tab; returns False when *tab_id* is unknown.

        Closing the active tab activates the last remaining tab.  Closing the
        only tab replaces it with a default tab.
        """
        index = self._index_of(tab_id)
        if index == -1:
            return False
        del self._tabs[index]
        if self._active_tab_id == tab_id:
            if self._tabs:
                self._active_tab_id = self._tabs[-1].id
            else:
                replacement = self._new_tab()
                self._tabs.append(replacement)
                self._active_tab_id = replacement.id
        self._commit()
        return True

    def set_active(self, tab_id: str) -> bool:
        if tab_id not in self:
            return False
        self._active_tab_id = tab_id
        self._commit()
        return True

    def update(
        self,
        tab_id: str,
        *,
        url: str | None = None,
        title: str | None = None,
        is_loading: bool | None = None,
    ) -> bool:
        """Set the given fields on a tab; omitted fields are left alone.

        Returns False without writing when *tab_id* is unknown.
        """
        tab = self.get(tab_id)
        if tab is None:
            return False
        if url is not None:
            tab.url = url
        if title is not None:
            tab.title = title
        if is_loading is not None:
            tab.is_loading = is_loading
        self._commit()
        return True

    def close_others(self, keep_id: str) -> None:
        """Keep only *keep_id* and make it active.

        Raises :class:`TabNotFoundError` without changing anything when
        *keep_id* is not in the store.
        """
        keep = self.get(keep_id)
        if keep is None:
            raise TabNotFoundError(keep_id)
        self._tabs = [keep]
        self._active_tab_id = keep_id
        self._commit()

    def close_all(self) -> None:
        """Drop every tab and start over with one default tab."""
        tab = self._new_tab()
        self._tabs = [tab]
        self._active_tab_id = tab.id
        self._commit()

    def flush(self) -> None:
        """Write current state now (suspend/teardown hook)."""
        self._save()

    # -- listeners ------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        """Call *listener* with the store after each persisted mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    # -- internals ------------------------------------------------------------

    def _new_tab(self) -> Tab:
        return Tab(url=self._home_url, title=DEFAULT_TITLE)

    def _index_of(self, tab_id: str | None) -> int:
        for i, tab in enumerate(self._tabs):
            if tab.id == tab_id:
                return i
        return -1

    def _save(self) -> None:
        self._state.save(self._tabs, self._active_tab_id)

    def _commit(self) -> None:
        self._save()
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("tab store listener %r failed", listener)


def open_tab_store(path: Path, *, home_url: str = DEFAULT_URL) -> TabStore:
    """Build a store bound to the state file at *path*."""
    return TabStore(TabStateStore(path), home_url=home_url)


class TabStoreProvider:
    """Builds the process's tab store on first use, exactly once.

    Create one provider at startup and hand it to every consumer.  Concurrent
    first calls to :meth:`get` all receive the instance built by the winner.
    """

    def __init__(self, factory: Callable[[], TabStore]) -> None:
        self._factory = factory
        self._instance: TabStore | None = None
        self._lock = threading.Lock()

    @classmethod
    def for_path(cls, path: Path, *, home_url: str = DEFAULT_URL) -> TabStoreProvider:
        return cls(lambda: open_tab_store(path, home_url=home_url))

    def get(self) -> TabStore:
        instance = self._instance
        if instance is None:
            with self._lock:
                instance = self._instance
                if instance is None:
                    instance = self._factory()
                    self._instance = instance
        return instance
