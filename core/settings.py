"""
App-level settings persisted to config.json in the data directory.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


DEFAULT_SETTINGS = {
    "paths_to_search": "",
    "confirm_before_delete": True,
    "warn_if_studio_running": True,
    "log_level": "INFO",
    "window_geometry": "",
}


class AppSettings:
    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)
        self._data: dict = dict(DEFAULT_SETTINGS)
        self.load()

    def load(self):
        if self.config_path.exists():
            try:
                loaded = json.loads(self.config_path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning(f"Ignoring unreadable settings file {self.config_path}: {e}")
                return
            if isinstance(loaded, dict):
                self._data.update(loaded)
            else:
                logger.warning(f"Ignoring settings file {self.config_path}: expected a JSON object")

    def save(self):
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(
            json.dumps(self._data, indent=2),
            encoding="utf-8",
        )

    def get(self, key: str, default=None):
        return self._data.get(key, default)

    def set(self, key: str, value):
        self._data[key] = value
        self.save()
