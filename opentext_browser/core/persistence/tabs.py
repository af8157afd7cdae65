"""Tab-state persistence store."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from pathlib import Path

from ..tab import Tab, TabSchemaError
from ._base import KeyValueStore, StoreCorruptError
from ...log import logger

KEY_TABS = "tabs"
KEY_ACTIVE_TAB = "active_tab_id"


class LoadStatus(enum.Enum):
    """How the persisted tab state was obtained at startup."""

    FRESH = "fresh"  # nothing stored yet
    RESTORED = "restored"  # stored state parsed
    RECOVERED = "recovered"  # stored state was corrupt and discarded


@dataclass
class LoadResult:
    """Outcome of :meth:`TabStateStore.load`.

    ``tabs`` is empty for ``FRESH`` and ``RECOVERED``; the caller decides
    what a default tab looks like.  ``active_tab_id`` is the stored id,
    which may not match any loaded tab.
    """

    status: LoadStatus
    tabs: list[Tab] = field(default_factory=list)
    active_tab_id: str | None = None
    error: str | None = None
    # set by the owner when the stored active id had to be replaced
    active_fallback: bool = False

    @property
    def recovered(self) -> bool:
        return self.status is LoadStatus.RECOVERED


class TabStateStore(KeyValueStore):
    """The ordered tab list and the active tab id, written as one pair."""

    def __init__(self, path: Path) -> None:
        super().__init__(path)

    def save(self, tabs: list[Tab], active_tab_id: str | None) -> None:
        """Persist *tabs* and *active_tab_id* together."""
        payload = json.dumps([tab.to_dict() for tab in tabs], ensure_ascii=False)
        self.set_many({KEY_TABS: payload, KEY_ACTIVE_TAB: active_tab_id})
        logger.debug("saved %d tab(s) to %s", len(tabs), self.path)

    def load(self) -> LoadResult:
        """Read the stored pair, classifying missing and corrupt data."""
        try:
            entries = self.read_all()
        except StoreCorruptError as exc:
            return self._corrupt(str(exc))

        raw_tabs = entries.get(KEY_TABS)
        if raw_tabs is None:
            logger.debug("no stored tabs in %s", self.path)
            return LoadResult(LoadStatus.FRESH)

        try:
            data = json.loads(raw_tabs)
        except (ValueError, RecursionError) as exc:
            return self._corrupt(f"tabs entry is not JSON: {exc}")
        if not isinstance(data, list):
            return self._corrupt(f"tabs entry is a {type(data).__name__}, not a list")

        tabs: list[Tab] = []
        seen: set[str] = set()
        for index, item in enumerate(data):
            try:
                tab = Tab.from_dict(item)
            except TabSchemaError as exc:
                return self._corrupt(f"tab #{index}: {exc}")
            if tab.id in seen:
                return self._corrupt(f"tab #{index}: duplicate id {tab.id!r}")
            seen.add(tab.id)
            tabs.append(tab)

        logger.debug("restored %d tab(s) from %s", len(tabs), self.path)
        return LoadResult(
            LoadStatus.RESTORED, tabs=tabs, active_tab_id=entries.get(KEY_ACTIVE_TAB)
        )

    def _corrupt(self, reason: str) -> LoadResult:
        logger.warning("discarding stored tabs in %s: %s", self.path, reason)
        return LoadResult(LoadStatus.RECOVERED, error=reason)
