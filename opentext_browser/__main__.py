"""Entry point for OpenText Browser tab management."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from . import __version__
from .core.tab import Tab
from .core.tab_store import TabNotFoundError, TabStore, TabStoreProvider
from .log import logger, setup_logging
from .preferences import load_preferences, save_home_url


def _print_tabs(store: TabStore, console: Console) -> None:
    table = Table(title=f"{store.count()} tab(s)", box=None)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("", width=1, no_wrap=True)
    table.add_column("Title", no_wrap=True)
    table.add_column("URL", overflow="fold")
    table.add_column("ID", style="dim", no_wrap=True)
    active_id = store.active_tab_id
    for i, tab in enumerate(store.list()):
        table.add_row(
            str(i),
            "*" if tab.id == active_id else "",
            tab.display_title,
            tab.url,
            tab.id,
        )
    console.print(table)


def _fail(message: str) -> None:
    print(message, file=sys.stderr)
    sys.exit(1)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="OpenText Browser tabs")
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"opentext-browser {__version__}",
    )
    parser.add_argument(
        "--state",
        type=Path,
        help="Tab state file (default: from preferences)",
    )
    parser.add_argument(
        "--prefs",
        type=Path,
        help="Preferences file (default: ~/.opentext/browser-preferences.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    actions = parser.add_mutually_exclusive_group()
    actions.add_argument(
        "--list",
        "-l",
        action="store_true",
        help="List open tabs",
    )
    actions.add_argument(
        "--new",
        nargs="?",
        const="",
        metavar="URL",
        help="Open a new tab (at URL, or the home page)",
    )
    actions.add_argument("--activate", metavar="ID", help="Make a tab active")
    actions.add_argument("--close", metavar="ID", help="Close a tab")
    actions.add_argument(
        "--close-others", metavar="ID", help="Close every tab except ID"
    )
    actions.add_argument(
        "--close-all",
        action="store_true",
        help="Close every tab and start with a fresh one",
    )
    actions.add_argument(
        "--set-home",
        metavar="URL",
        help="Save URL as the address of new tabs",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the OpenText Browser tab CLI."""
    args = _build_parser().parse_args(argv)

    prefs = load_preferences(args.prefs)
    setup_logging("DEBUG" if args.verbose else prefs.logging.level)

    if args.set_home:
        save_home_url(args.set_home, args.prefs)
        return

    state_path = args.state or prefs.storage.resolved_state_path()
    provider = TabStoreProvider.for_path(state_path, home_url=prefs.tabs.home_url)
    store = provider.get()
    if store.load_result.recovered:
        print(
            f"Warning: stored tabs were unreadable and have been reset "
            f"({store.load_result.error})",
            file=sys.stderr,
        )

    console = Console()

    if args.list:
        _print_tabs(store, console)
    elif args.new is not None:
        tab = store.create(Tab(url=args.new) if args.new else None)
        print(tab.id)
    elif args.activate:
        if not store.set_active(args.activate):
            _fail(f"No tab with id {args.activate}")
    elif args.close:
        if not store.remove(args.close):
            _fail(f"No tab with id {args.close}")
    elif args.close_others:
        try:
            store.close_others(args.close_others)
        except TabNotFoundError as exc:
            _fail(f"No tab with id {exc.tab_id}")
    elif args.close_all:
        store.close_all()
    else:
        from .widgets.tab_picker import run_picker

        try:
            selected = run_picker(store)
        except KeyboardInterrupt:
            selected = None
        finally:
            store.flush()
        if selected:
            print(selected)

    logger.debug("tab state at %s: %d tab(s)", state_path, store.count())


if __name__ == "__main__":
    main()
