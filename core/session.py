"""
Settings Session
Owns the loaded Document for one run of the tool and exposes the operations
the GUI binds to: list servers/logins, delete login, delete server, save,
refresh.

The server index is a cache over the Document. It is dropped whenever a
mutation changes which ServerEntry objects exist and rebuilt on next read.
Deletions match by instance across every server type group: the same
physical instance may be registered under several connection types, and
"delete server" means removing it everywhere.
"""

from __future__ import annotations
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

from core import codec
from core.document import Document
from core.errors import DecodeError, EntryNotFound
from core.locator import SettingsLocator
from core.persistence import save_document
from core.server_index import ServerIndex

logger = logging.getLogger(__name__)


class SettingsSession:

    def __init__(self, locator: SettingsLocator, now: Callable[[], datetime] = datetime.now):
        self.locator = locator
        self._now = now
        self._document: Document | None = None
        self._index: ServerIndex | None = None
        self._dirty = False
        self._display_names: list[str] = []
        self.selected_index: int | None = None
        self.last_backup: Path | None = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def resolve_settings_path(self) -> Path:
        return self.locator.resolve()

    def load_document(self) -> Document:
        """Read and decode the settings file, discarding any in-memory edits."""
        path = self.resolve_settings_path()
        try:
            data = path.read_bytes()
        except OSError as e:
            raise DecodeError(f"Could not read {path}: {e}") from e
        try:
            document = codec.decode(data)
        except DecodeError as e:
            raise DecodeError(f"{path}: {e}") from e

        self._document = document
        self._index = None
        self._dirty = False
        logger.info(f"Loaded {document.server_count} server(s) in {len(document.groups)} group(s) from {path}")
        return document

    @property
    def document(self) -> Document:
        if self._document is None:
            return self.load_document()
        return self._document

    @property
    def server_index(self) -> ServerIndex:
        if self._index is None:
            self._index = ServerIndex.build(self.document)
        return self._index

    def invalidate_index(self):
        self._index = None

    @property
    def has_unsaved_changes(self) -> bool:
        return self._dirty

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_server_display_names(self) -> list[str]:
        return self.server_index.sorted_names()

    def list_logins_for(self, server_display_name: str) -> list[str]:
        return self.server_index.get(server_display_name).user_names()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def delete_login(self, server_display_name: str, user_name: str) -> int:
        """Remove `user_name` from every entry sharing the server's instance."""
        server = self.server_index.get(server_display_name)
        targets = self.document.servers_with_instance(server.instance)
        if not any(login.user_name == user_name for s in targets for login in s.logins):
            raise EntryNotFound(f"No login '{user_name}' for server '{server_display_name}'")

        removed = 0
        for entry in targets:
            kept = [login for login in entry.logins if login.user_name != user_name]
            removed += len(entry.logins) - len(kept)
            entry.logins[:] = kept

        self._dirty = True
        logger.info(f"Deleted login '{user_name}' from {server.instance} ({removed} entr{'y' if removed == 1 else 'ies'})")
        return removed

    def delete_server(self, server_display_name: str) -> int:
        """Remove the server's instance from every server type group."""
        index = self.server_index
        server = index.get(server_display_name)
        removed = self.document.remove_instance(server.instance)
        index.remove(server_display_name)
        # Other display names may have pointed at entries for the same instance.
        self.invalidate_index()

        self._dirty = True
        logger.info(f"Deleted server '{server_display_name}' ({removed} entr{'y' if removed == 1 else 'ies'})")
        return removed

    # ------------------------------------------------------------------
    # Save / refresh
    # ------------------------------------------------------------------

    def save(self) -> Path:
        """Back up the settings file, write the document, then reload from disk."""
        path = self.resolve_settings_path()
        self.last_backup = save_document(path, self.document, now=self._now)
        self._dirty = False
        self.refresh(reload_from_disk=True)
        return self.last_backup

    def refresh(self, reload_from_disk: bool = True) -> list[str]:
        """
        Rebuild the display-name list, optionally re-reading the file first.
        Keeps `selected_index` stable: an unset selection becomes 0, a selection
        that fell off the end moves to the new last item.
        """
        if reload_from_disk:
            self.load_document()
        self._index = ServerIndex.build(self.document)
        self._display_names = self._index.sorted_names()

        count = len(self._display_names)
        index = self.selected_index
        if count == 0:
            index = None
        elif index is None or index < 0:
            index = 0
        elif index >= count:
            index = count - 1
        self.selected_index = index
        return list(self._display_names)

    @property
    def selected_server(self) -> str | None:
        """Display name at `selected_index` as of the last refresh, if any."""
        index = self.selected_index
        if index is None or not 0 <= index < len(self._display_names):
            return None
        return self._display_names[index]
