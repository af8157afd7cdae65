"""Base key-value persistence store."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from ...log import logger


class StoreCorruptError(ValueError):
    """The backing file exists but does not hold a JSON object of strings."""


class KeyValueStore:
    """String entries kept in one JSON object on disk.

    Every write replaces the whole file through a temp file and
    ``os.replace``, so entries committed together by :meth:`set_many`
    are never observed half-written.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    # -- core I/O -------------------------------------------------------------

    def read_all(self) -> dict[str, str]:
        """Return every entry, or ``{}`` when the file does not exist.

        Raises :class:`StoreCorruptError` when the file is unreadable or is
        not a JSON object of string values.
        """
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, RecursionError) as exc:
            # ValueError covers decode errors and over-long integer literals
            raise StoreCorruptError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict) or not all(
            isinstance(v, str) for v in data.values()
        ):
            raise StoreCorruptError(f"{self.path} is not an object of strings")
        return data

    def set_many(self, entries: dict[str, str | None]) -> None:
        """Commit *entries* together; a ``None`` value removes that key.

        Entries not named in *entries* are kept.  A corrupt file is
        overwritten rather than merged.
        """
        try:
            data = self.read_all()
        except StoreCorruptError:
            data = {}
        for key, value in entries.items():
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
        self._write(data)

    # -- internals ------------------------------------------------------------

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except OSError:
            logger.error("failed to write %s", self.path, exc_info=True)
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
