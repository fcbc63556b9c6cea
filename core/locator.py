"""
Settings Locator
Finds SqlStudio.bin by probing candidate directories in order.

Default candidates (per-user application data):
  %APPDATA%\\Microsoft\\Microsoft SQL Server\\100\\Tools\\Shell        -- SSMS 2008 / 2008 R2
  %APPDATA%\\Microsoft\\SQL Server Management Studio\\<ver>            -- SSMS 2012 and later

Extra directories come from the `paths_to_search` setting, separated by ';'.
Both %NAME% and $NAME environment references are expanded.
"""

from __future__ import annotations
import os
import re
import logging
from pathlib import Path
from typing import Iterable

from core.errors import PathNotFound

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "SqlStudio.bin"

# SSMS 2012, 2014, 2016, 17.x (14.0), 18.x, 19.x, 20.x
STUDIO_VERSIONS = ["11.0", "12.0", "13.0", "14.0", "18.0", "19.0", "20.0"]

_WINDOWS_VAR = re.compile(r"%([^%]+)%")


def _appdata_dir() -> str:
    return os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming"))


def default_candidates() -> list[str]:
    appdata = _appdata_dir()
    candidates = [os.path.join(appdata, "Microsoft", "Microsoft SQL Server", "100", "Tools", "Shell")]
    for version in STUDIO_VERSIONS:
        candidates.append(os.path.join(appdata, "Microsoft", "SQL Server Management Studio", version))
    return candidates


def split_search_paths(value: str | None) -> list[str]:
    """Parse a semicolon-separated path list, dropping blank segments."""
    if not value:
        return []
    return [part.strip() for part in value.split(";") if part.strip()]


def expand_path(path: str) -> str:
    """Expand %NAME%, $NAME and ~ references. Unknown %NAME% are left as-is."""
    def _sub(match: re.Match) -> str:
        return os.environ.get(match.group(1), match.group(0))

    expanded = _WINDOWS_VAR.sub(_sub, path.strip())
    return os.path.expanduser(os.path.expandvars(expanded))


class SettingsLocator:
    """Resolves and caches the settings file path for one session."""

    def __init__(self, candidates: Iterable[str] | None = None, extra_paths: str | None = None):
        base = list(candidates) if candidates is not None else default_candidates()
        self.candidates: list[str] = base + split_search_paths(extra_paths)
        self._resolved: Path | None = None

    def probe(self) -> list[tuple[Path, bool]]:
        """Every candidate settings file with whether it exists."""
        results = []
        for directory in self.candidates:
            path = Path(expand_path(directory)) / SETTINGS_FILE_NAME
            results.append((path, path.is_file()))
        return results

    def resolve(self) -> Path:
        if self._resolved is not None:
            if self._resolved.is_file():
                return self._resolved
            logger.warning(f"Cached settings file vanished: {self._resolved}")
            self._resolved = None

        for path, exists in self.probe():
            if exists:
                logger.info(f"Settings file found: {path}")
                self._resolved = path
                return path
            logger.debug(f"No settings file at {path}")

        raise PathNotFound(
            f"Unable to find {SETTINGS_FILE_NAME} in {len(self.candidates)} candidate "
            f"director{'y' if len(self.candidates) == 1 else 'ies'}; add its folder to "
            f"paths_to_search in config.json"
        )

    @property
    def resolved(self) -> Path | None:
        return self._resolved
