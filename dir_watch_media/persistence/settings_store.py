"""Persistent storage for the watch settings record."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from ..library.models import DEFAULT_SORT_MODE, S_DIRECTORY, S_EXTENSION, S_FILTER, S_SORT_BY

DEFAULT_SETTINGS: Dict[str, Any] = {
    S_DIRECTORY: "",
    S_SORT_BY: int(DEFAULT_SORT_MODE),
    S_FILTER: "",
    S_EXTENSION: "",
}


class SettingsStore:
    """Manages the persisted watch settings stored as JSON."""

    def __init__(self, settings_file: Path):
        """Initialize settings store.

        Args:
            settings_file: Path to settings JSON file
        """
        self.settings_file = Path(settings_file)
        self._log = logging.getLogger("settings")
        self._settings: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load settings from file."""
        if not self.settings_file.exists():
            self._log.info("No settings file found, using defaults")
            self._settings = {}
            return

        try:
            with self.settings_file.open("r") as f:
                data = json.load(f)
            self._settings = data if isinstance(data, dict) else {}
            self._log.info(f"Loaded settings from {self.settings_file}")
        except Exception as e:
            self._log.warning(f"Failed to load settings: {e}, using defaults")
            self._settings = {}

    def save(self) -> None:
        """Save settings to file."""
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
            with self.settings_file.open("w") as f:
                json.dump(self._settings, f, indent=2)
            self._log.info(f"Saved settings to {self.settings_file}")
        except Exception as e:
            self._log.warning(f"Failed to save settings: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        return self._settings.get(key, default)

    def update(self, values: Dict[str, Any]) -> None:
        """Merge several values and save once."""
        self._settings.update(values)
        self.save()

    def ensure_defaults(self, defaults: Dict[str, Any] = DEFAULT_SETTINGS) -> None:
        """Ensure provided defaults exist without overwriting existing values.

        Args:
            defaults: Mapping of key->default_value
        """
        changed = False
        for k, v in defaults.items():
            if k not in self._settings:
                self._settings[k] = v
                changed = True
        if changed:
            self.save()

    def watch_settings(self) -> Dict[str, Any]:
        """Snapshot of the keys the watcher consumes, with defaults filled in."""
        return {k: self._settings.get(k, v) for k, v in DEFAULT_SETTINGS.items()}
