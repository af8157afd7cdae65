"""Tests for persistence stores.

Each store is tested for:
  1. load on a non-existent file returns the empty/fresh state
  2. save then load round-trips correctly
  3. load on corrupt data degrades gracefully instead of raising
  4. Store-specific features
"""

from __future__ import annotations

import json

import pytest

from opentext_browser.core.persistence import (
    KEY_ACTIVE_TAB,
    KEY_TABS,
    KeyValueStore,
    LoadStatus,
    StoreCorruptError,
    TabStateStore,
)
from opentext_browser.core.tab import Tab


# ---------------------------------------------------------------------------
# Base KeyValueStore
# ---------------------------------------------------------------------------


class TestKeyValueStore:
    def test_read_all_nonexistent(self, tmp_path):
        store = KeyValueStore(tmp_path / "nope.json")
        assert store.read_all() == {}

    def test_set_many_writes_all_entries(self, tmp_path):
        path = tmp_path / "kv.json"
        store = KeyValueStore(path)
        store.set_many({"a": "1", "b": "2"})
        assert json.loads(path.read_text()) == {"a": "1", "b": "2"}

    def test_set_many_keeps_unnamed_entries(self, tmp_path):
        store = KeyValueStore(tmp_path / "kv.json")
        store.set_many({"a": "1", "b": "2"})
        store.set_many({"b": "3"})
        assert store.read_all() == {"a": "1", "b": "3"}

    def test_none_removes_key(self, tmp_path):
        store = KeyValueStore(tmp_path / "kv.json")
        store.set_many({"a": "1", "b": "2"})
        store.set_many({"a": None})
        assert store.read_all() == {"b": "2"}

    def test_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "deep" / "nested" / "kv.json"
        store = KeyValueStore(path)
        store.set_many({"a": "1"})
        assert path.exists()

    def test_no_temp_files_left_behind(self, tmp_path):
        store = KeyValueStore(tmp_path / "kv.json")
        store.set_many({"a": "1"})
        store.set_many({"a": "2"})
        assert [p.name for p in tmp_path.iterdir()] == ["kv.json"]

    @pytest.mark.parametrize(
        "content",
        [
            "not valid json{{{",
            json.dumps({"a": 1}),
            '{"a": ' + "1" * 5000 + "}",
            "[" * 100000 + "]" * 100000,
        ],
        ids=["syntax", "non-string-value", "long-int", "deep-nesting"],
    )
    def test_corrupt_file_raises_on_read_all(self, tmp_path, content):
        path = tmp_path / "kv.json"
        path.write_text(content)
        with pytest.raises(StoreCorruptError):
            KeyValueStore(path).read_all()

    def test_set_many_overwrites_corrupt_file(self, tmp_path):
        path = tmp_path / "kv.json"
        path.write_text("garbage")
        store = KeyValueStore(path)
        store.set_many({"a": "1"})
        assert store.read_all() == {"a": "1"}


# ---------------------------------------------------------------------------
# TabStateStore
# ---------------------------------------------------------------------------


class TestTabStateStore:
    def test_load_fresh(self, state_path):
        result = TabStateStore(state_path).load()
        assert result.status is LoadStatus.FRESH
        assert result.tabs == []
        assert result.active_tab_id is None
        assert not result.recovered

    def test_round_trip(self, state_path):
        store = TabStateStore(state_path)
        tabs = [
            Tab(url="https://a.example", title="A"),
            Tab(url="https://b.example", title="B", favicon="b.ico", scroll_position=40),
        ]
        store.save(tabs, tabs[1].id)
        result = store.load()
        assert result.status is LoadStatus.RESTORED
        assert result.tabs == tabs
        assert result.active_tab_id == tabs[1].id

    def test_writes_both_keys(self, state_path):
        store = TabStateStore(state_path)
        tab = Tab()
        store.save([tab], tab.id)
        raw = json.loads(state_path.read_text())
        assert set(raw) == {KEY_TABS, KEY_ACTIVE_TAB}
        assert json.loads(raw[KEY_TABS])[0]["id"] == tab.id
        assert raw[KEY_ACTIVE_TAB] == tab.id

    def test_none_active_id_drops_key(self, state_path):
        store = TabStateStore(state_path)
        store.save([Tab()], None)
        assert KEY_ACTIVE_TAB not in json.loads(state_path.read_text())

    def test_preserves_order(self, state_path):
        store = TabStateStore(state_path)
        tabs = [Tab(title=str(i)) for i in range(5)]
        store.save(tabs, tabs[0].id)
        assert [t.title for t in store.load().tabs] == ["0", "1", "2", "3", "4"]

    @pytest.mark.parametrize(
        "raw_tabs",
        [
            "not json at all",
            json.dumps({"id": "x"}),
            json.dumps([{"id": "x", "url": "u"}]),
            json.dumps([{"id": 5, "url": "u", "title": "t"}]),
            json.dumps([{"id": "x", "url": "u", "title": "t", "isLoading": "yes"}]),
            "[" + "1" * 5000 + "]",
            "[" * 100000 + "]" * 100000,
        ],
    )
    def test_corrupt_tabs_entry_is_recovered(self, state_path, write_state, raw_tabs):
        write_state({KEY_TABS: raw_tabs, KEY_ACTIVE_TAB: "x"})
        result = TabStateStore(state_path).load()
        assert result.status is LoadStatus.RECOVERED
        assert result.recovered
        assert result.tabs == []
        assert result.error

    def test_duplicate_ids_are_recovered(self, state_path, write_state, tab_entry):
        write_state({KEY_TABS: json.dumps([tab_entry("a"), tab_entry("a")])})
        result = TabStateStore(state_path).load()
        assert result.status is LoadStatus.RECOVERED
        assert "duplicate" in result.error

    @pytest.mark.parametrize(
        "content",
        ["{{{", '{"x": ' + "1" * 5000 + "}", "[" * 100000 + "]" * 100000],
    )
    def test_unreadable_file_is_recovered(self, state_path, content):
        state_path.parent.mkdir(parents=True)
        state_path.write_text(content)
        result = TabStateStore(state_path).load()
        assert result.status is LoadStatus.RECOVERED

    def test_corruption_is_logged(self, state_path, write_state, caplog):
        write_state({KEY_TABS: "[broken"})
        with caplog.at_level("WARNING", logger="opentext_browser"):
            TabStateStore(state_path).load()
        assert any("discarding stored tabs" in r.getMessage() for r in caplog.records)

    def test_missing_optional_fields_use_defaults(self, state_path, write_state):
        write_state({KEY_TABS: json.dumps([{"id": "a", "url": "u", "title": "t"}])})
        (tab,) = TabStateStore(state_path).load().tabs
        assert tab.favicon is None
        assert tab.is_loading is False
        assert tab.scroll_position == 0
