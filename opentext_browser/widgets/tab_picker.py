"""Tab picker for OpenText Browser.

Lists the open tabs and lets the user switch to one, open a new one, or
close tabs.  The app exits with the id of the tab to show, or ``None``
when dismissed.
"""

from __future__ import annotations

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, OptionList, Static
from textual.widgets.option_list import Option

from ..core.tab import Tab
from ..core.tab_store import TabStore


def format_tab_count(count: int) -> str:
    return f"{count} {'tab' if count == 1 else 'tabs'}"


def tab_label(tab: Tab, active: bool = False) -> Text:
    """Two-line row: marker and title, then the address."""
    label = Text()
    label.append("● " if active else "  ", style="bold green")
    label.append(tab.display_title, style="bold" if active else "")
    if tab.is_loading:
        label.append("  …", style="dim")
    label.append(f"\n  {tab.url}", style="dim")
    return label


class TabPickerApp(App[str | None]):
    """Tab switcher over a :class:`TabStore`."""

    TITLE = "Tabs"

    CSS = """
    #tab-count {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }
    #tab-list {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("n", "new_tab", "New tab", show=True),
        Binding("x", "close_tab", "Close", show=True),
        Binding("delete", "close_tab", "Close", show=False),
        Binding("escape", "dismiss_picker", "Back", show=True),
        Binding("q", "dismiss_picker", "Back", show=False),
    ]

    def __init__(self, store: TabStore) -> None:
        super().__init__()
        self.store = store

    def compose(self) -> ComposeResult:
        yield Static("", id="tab-count")
        yield OptionList(id="tab-list")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_tabs(highlight=self.store.active_index())
        self.query_one("#tab-list", OptionList).focus()

    def refresh_tabs(self, highlight: int | None = None) -> None:
        """Rebuild the rows from the store."""
        option_list = self.query_one("#tab-list", OptionList)
        active_id = self.store.active_tab_id
        option_list.clear_options()
        option_list.add_options(
            [Option(tab_label(tab, tab.id == active_id), id=tab.id) for tab in self.store]
        )
        count = self.store.count()
        if highlight is not None and count:
            option_list.highlighted = max(0, min(highlight, count - 1))
        self.query_one("#tab-count", Static).update(format_tab_count(count))

    def highlighted_tab_id(self) -> str | None:
        option_list = self.query_one("#tab-list", OptionList)
        index = option_list.highlighted
        if index is None:
            return None
        return option_list.get_option_at_index(index).id

    # -- actions --------------------------------------------------------------

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        tab_id = event.option.id
        if tab_id is not None and self.store.set_active(tab_id):
            self.exit(tab_id)

    def action_new_tab(self) -> None:
        tab = self.store.create()
        self.exit(tab.id)

    def action_close_tab(self) -> None:
        option_list = self.query_one("#tab-list", OptionList)
        index = option_list.highlighted
        tab_id = self.highlighted_tab_id()
        if tab_id is None:
            return
        self.store.remove(tab_id)
        self.refresh_tabs(highlight=index)

    def action_dismiss_picker(self) -> None:
        self.exit(None)


def run_picker(store: TabStore) -> str | None:
    """Show the picker and return the chosen tab id."""
    return TabPickerApp(store).run()
