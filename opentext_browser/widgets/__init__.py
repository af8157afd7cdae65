"""Textual widgets for OpenText Browser."""

from .tab_picker import TabPickerApp, format_tab_count, run_picker, tab_label

__all__ = [
    "TabPickerApp",
    "format_tab_count",
    "run_picker",
    "tab_label",
]
