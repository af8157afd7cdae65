"""Shared test fixtures for opentext-browser test suite."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from opentext_browser.core.persistence import TabStateStore
from opentext_browser.core.tab_store import TabStore


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    """Location of the tab state file for one test."""
    return tmp_path / "state" / "browser-tabs.json"


@pytest.fixture
def store(state_path: Path) -> TabStore:
    """A fresh store with a single default tab."""
    return TabStore(TabStateStore(state_path))


@pytest.fixture
def reopen(state_path: Path):
    """Simulate a process restart: build a new store over the same file."""

    def _reopen(**kwargs) -> TabStore:
        return TabStore(TabStateStore(state_path), **kwargs)

    return _reopen


@pytest.fixture
def write_state(state_path: Path):
    """Write raw key-value entries to the state file as the durable store would."""

    def _write(entries: dict) -> None:
        state_path.parent.mkdir(parents=True, exist_ok=True)
        state_path.write_text(json.dumps(entries), encoding="utf-8")

    return _write


@pytest.fixture
def tab_entry():
    """Build one persisted tab object."""

    def _entry(
        tab_id: str, url: str = "https://example.com", title: str = "Example"
    ) -> dict:
        return {
            "id": tab_id,
            "url": url,
            "title": title,
            "favicon": None,
            "isLoading": False,
            "scrollPosition": 0,
        }

    return _entry
