"""Read-only JSON settings for library locations."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from decksweep.utils import xdg_config_home, xdg_data_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "decksweep"
_SETTINGS_FILE = "settings.json"

DEFAULT_MOUNT_PARENTS = ("/run/media/deck", "/media")


class Settings:
    """Settings backed by a JSON file.

    Uses dot-notation keys for nested access::

        settings.get("library.mount_parents")  # reads data["library"]["mount_parents"]

    Nothing is ever written back; the tool keeps no state between runs.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or (xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE)
        self._data: dict[str, Any] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def mount_parents(self) -> list[Path]:
        """Directories whose immediate subdirectories are external mounts."""
        value = self.get("library.mount_parents")
        if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
            if value is not None:
                log.warning("Ignoring invalid library.mount_parents in %s", self._path)
            value = DEFAULT_MOUNT_PARENTS
        return [Path(p).expanduser() for p in value]

    def internal_root(self) -> Path:
        """Base directory of the internal Steam installation."""
        value = self.get("library.internal_root")
        if isinstance(value, str) and value:
            return Path(value).expanduser()
        if value is not None:
            log.warning("Ignoring invalid library.internal_root in %s", self._path)
        return xdg_data_home() / "Steam"

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            return
        if isinstance(data, dict):
            self._data = data
        else:
            log.warning("Settings file %s does not contain an object, ignoring", self._path)
