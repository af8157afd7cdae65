"""Tab record shared by the store, the host and the picker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import uuid

DEFAULT_URL = "https://www.google.com"
DEFAULT_TITLE = "New Tab"


class TabSchemaError(ValueError):
    """A persisted tab entry does not match the expected layout."""


@dataclass
class Tab:
    """One browsing session slot.

    ``id`` is generated at creation and never reassigned.  ``scroll_position``
    is carried through persistence but nothing in the store writes it.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    url: str = DEFAULT_URL
    title: str = DEFAULT_TITLE
    favicon: str | None = None
    is_loading: bool = False
    scroll_position: int = 0

    @property
    def display_title(self) -> str:
        """Title to show in lists; blank titles fall back to the placeholder."""
        return self.title or DEFAULT_TITLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "favicon": self.favicon,
            "isLoading": self.is_loading,
            "scrollPosition": self.scroll_position,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Tab:
        """Build a tab from its persisted form.

        Raises :class:`TabSchemaError` when *data* is not an object, a
        required key is missing, or a present key has the wrong type.
        """
        if not isinstance(data, dict):
            raise TabSchemaError(f"tab entry must be an object, got {type(data).__name__}")
        for key in ("id", "url", "title"):
            if not isinstance(data.get(key), str):
                raise TabSchemaError(f"tab entry has no string {key!r}")
        if not data["id"]:
            raise TabSchemaError("tab entry has an empty id")

        favicon = data.get("favicon")
        if favicon is not None and not isinstance(favicon, str):
            raise TabSchemaError("tab favicon must be a string or null")
        is_loading = data.get("isLoading", False)
        if not isinstance(is_loading, bool):
            raise TabSchemaError("tab isLoading must be a boolean")
        scroll = data.get("scrollPosition", 0)
        # bool is an int subclass; reject it explicitly
        if isinstance(scroll, bool) or not isinstance(scroll, int):
            raise TabSchemaError("tab scrollPosition must be an integer")

        return cls(
            id=data["id"],
            url=data["url"],
            title=data["title"],
            favicon=favicon,
            is_loading=is_loading,
            scroll_position=scroll,
        )
