"""
Document Model
In-memory form of a decoded SqlStudio.bin.

  Document
    groups: {server_type_key: ServerTypeGroup}
      servers: [ServerEntry]
        logins: [LoginEntry]

Every record keeps an opaque `extra` blob holding the fields this tool does
not interpret; the codec writes them back untouched.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator

WINDOWS_AUTHENTICATION = 0
SQL_AUTHENTICATION = 1


@dataclass
class LoginEntry:
    user_name: str
    extra: bytes = b""


@dataclass
class ServerEntry:
    instance: str
    authentication_method: int = WINDOWS_AUTHENTICATION
    logins: list[LoginEntry] = field(default_factory=list)
    extra: bytes = b""

    @property
    def auth_label(self) -> str:
        return "Windows" if self.authentication_method == WINDOWS_AUTHENTICATION else "Sql"

    @property
    def base_display_name(self) -> str:
        return f"{self.instance} ({self.auth_label})"

    def user_names(self) -> list[str]:
        """Login user names ordered for display."""
        return sorted(login.user_name for login in self.logins)


@dataclass
class ServerTypeGroup:
    key: str
    servers: list[ServerEntry] = field(default_factory=list)
    extra: bytes = b""


@dataclass
class Document:
    groups: dict[str, ServerTypeGroup] = field(default_factory=dict)
    extra: bytes = b""

    def iter_servers(self) -> Iterator[ServerEntry]:
        """All server entries in natural (group, then entry) order."""
        for group in self.groups.values():
            yield from group.servers

    def servers_with_instance(self, instance: str) -> list[ServerEntry]:
        """Every entry registered for `instance`, across all groups."""
        return [s for s in self.iter_servers() if s.instance == instance]

    def remove_instance(self, instance: str) -> int:
        """Drop `instance` from every group. Returns the number of entries removed."""
        removed = 0
        for group in self.groups.values():
            kept = [s for s in group.servers if s.instance != instance]
            removed += len(group.servers) - len(kept)
            group.servers[:] = kept
        return removed

    @property
    def server_count(self) -> int:
        return sum(len(g.servers) for g in self.groups.values())
