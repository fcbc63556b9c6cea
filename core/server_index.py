"""
Server Index
Maps a unique display name to each ServerEntry of a Document.

Display names are "<instance> (<Windows|Sql>)". Entries are visited in
(group, entry) order; the first holder of a name keeps it bare, later ones
get the lowest free " <n>" suffix starting at 2.
"""

from __future__ import annotations
import logging

from core.document import Document, ServerEntry
from core.errors import EntryNotFound, IndexCorruption

logger = logging.getLogger(__name__)


def unique_display_name(base: str, taken) -> str:
    """Lowest-suffix name for `base` not present in `taken`."""
    if base not in taken:
        return base
    n = 2
    while f"{base} {n}" in taken:
        n += 1
    return f"{base} {n}"


class ServerIndex:
    """Display name → ServerEntry snapshot of a Document."""

    def __init__(self, entries: dict[str, ServerEntry] | None = None):
        self._entries: dict[str, ServerEntry] = entries or {}

    @classmethod
    def build(cls, document: Document) -> "ServerIndex":
        entries: dict[str, ServerEntry] = {}
        seen: set[int] = set()
        for server in document.iter_servers():
            if id(server) in seen:
                raise IndexCorruption(
                    f"Server entry '{server.instance}' appears more than once in the document"
                )
            seen.add(id(server))
            name = unique_display_name(server.base_display_name, entries)
            entries[name] = server
        logger.debug(f"Built server index with {len(entries)} entr{'y' if len(entries) == 1 else 'ies'}")
        return cls(entries)

    def get(self, display_name: str) -> ServerEntry:
        try:
            return self._entries[display_name]
        except KeyError:
            raise EntryNotFound(f"No server named '{display_name}'") from None

    def remove(self, display_name: str) -> ServerEntry:
        server = self.get(display_name)
        del self._entries[display_name]
        return server

    def sorted_names(self) -> list[str]:
        return sorted(self._entries)

    def names(self) -> list[str]:
        """Display names in document order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
