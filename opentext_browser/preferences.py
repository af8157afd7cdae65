"""User preferences for OpenText Browser.

Loads settings from ~/.opentext/browser-preferences.yaml.
Falls back to sensible defaults if the file doesn't exist or is invalid.
Creates a default file on first run so users can discover and edit it.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .core.tab import DEFAULT_URL
from .log import logger

OPENTEXT_HOME = Path.home() / ".opentext"
PREFS_PATH = OPENTEXT_HOME / "browser-preferences.yaml"
DEFAULT_STATE_PATH = OPENTEXT_HOME / "browser-tabs.json"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_DEFAULT_YAML = """\
# OpenText Browser Preferences
# Delete this file to reset to defaults.

tabs:
  home_url: "https://www.google.com"   # address of every new tab

storage:
  state_path: ""                        # tab state file (empty = ~/.opentext/browser-tabs.json)

logging:
  level: "WARNING"                      # DEBUG, INFO, WARNING, ERROR
"""


@dataclass
class TabPreferences:
    """Settings applied to newly created tabs."""

    home_url: str = DEFAULT_URL


@dataclass
class StoragePreferences:
    """Where tab state lives on disk."""

    state_path: str = ""  # Empty means DEFAULT_STATE_PATH

    def resolved_state_path(self) -> Path:
        if self.state_path:
            return Path(self.state_path).expanduser()
        return DEFAULT_STATE_PATH


@dataclass
class LoggingPreferences:
    level: str = "WARNING"


@dataclass
class Preferences:
    """Top-level browser preferences."""

    tabs: TabPreferences = field(default_factory=TabPreferences)
    storage: StoragePreferences = field(default_factory=StoragePreferences)
    logging: LoggingPreferences = field(default_factory=LoggingPreferences)


def load_preferences(path: Path | None = None) -> Preferences:
    """Load preferences from YAML file.

    Falls back to sensible defaults if the file doesn't exist or is invalid.
    Creates a default preferences file on first run.
    """
    path = path or PREFS_PATH
    prefs = Preferences()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
            if not isinstance(data, dict):
                raise ValueError("preferences root is not a mapping")
            if isinstance(data.get("tabs"), dict):
                tdata = data["tabs"]
                if tdata.get("home_url"):
                    prefs.tabs.home_url = str(tdata["home_url"])
            if isinstance(data.get("storage"), dict):
                sdata = data["storage"]
                if "state_path" in sdata:
                    prefs.storage.state_path = str(sdata["state_path"] or "")
            if isinstance(data.get("logging"), dict):
                ldata = data["logging"]
                level = str(ldata.get("level") or "").upper()
                if level in _LOG_LEVELS:
                    prefs.logging.level = level
        except (OSError, ValueError, yaml.YAMLError):
            logger.debug("failed to load preferences from %s", path, exc_info=True)
            return Preferences()
    else:
        # Create default file for user to customize
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML)
        except OSError:
            logger.debug("could not write default preferences to %s", path, exc_info=True)

    return prefs


def save_home_url(url: str, path: Path | None = None) -> None:
    """Persist the home URL to the preferences file.

    Surgically updates only the ``home_url`` line, preserving the rest of
    the file (including user comments) as-is.
    """
    path = path or PREFS_PATH
    try:
        if path.exists():
            text = path.read_text()
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            text = _DEFAULT_YAML

        # a JSON string is also a valid YAML double-quoted scalar
        value = json.dumps(url, ensure_ascii=False)
        if re.search(r"^\s+home_url:", text, re.MULTILINE):
            text = re.sub(
                r'^(\s+home_url:)\s*(?:"(?:[^"\\]|\\.)*"|\S+)?(.*?)$',
                lambda m: f"{m.group(1)} {value}{m.group(2)}",
                text,
                count=1,
                flags=re.MULTILINE,
            )
        elif re.search(r"^tabs:", text, re.MULTILINE):
            text = re.sub(
                r"^(tabs:.*?)$",
                lambda m: f"{m.group(1)}\n  home_url: {value}",
                text,
                count=1,
                flags=re.MULTILINE,
            )
        else:
            text = text.rstrip("\n") + f"\n\ntabs:\n  home_url: {value}\n"

        path.write_text(text)
    except OSError:
        logger.debug("failed to save home url", exc_info=True)
