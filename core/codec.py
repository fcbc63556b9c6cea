"""
Settings Codec
Schema-driven binary encoding of a Document.

Layout (little-endian):
  header   : b"SQMR", uint16 version
  document : blob extra, uint32 group count, group*
  group    : str key, blob extra, uint32 server count, server*
  server   : str instance, int32 auth method, blob extra, uint32 login count, login*
  login    : str user_name, blob extra

str is a uint32 byte length followed by UTF-8; blob is a uint32 byte length
followed by raw bytes.
"""

from __future__ import annotations
import struct

from core.document import Document, LoginEntry, ServerEntry, ServerTypeGroup
from core.errors import DecodeError

MAGIC = b"SQMR"
FORMAT_VERSION = 1

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_I32 = struct.Struct("<i")


class _Reader:
    def __init__(self, data: bytes):
        self._data = memoryview(data)
        self._pos = 0

    def take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise DecodeError(
                f"Truncated settings data: wanted {size} byte(s) at offset {self._pos}, "
                f"only {len(self._data) - self._pos} left"
            )
        chunk = self._data[self._pos:end].tobytes()
        self._pos = end
        return chunk

    def u16(self) -> int:
        return _U16.unpack(self.take(_U16.size))[0]

    def u32(self) -> int:
        return _U32.unpack(self.take(_U32.size))[0]

    def i32(self) -> int:
        return _I32.unpack(self.take(_I32.size))[0]

    def blob(self) -> bytes:
        return self.take(self.u32())

    def text(self) -> str:
        raw = self.blob()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid UTF-8 string near offset {self._pos}: {e}") from e

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos


def decode(data: bytes) -> Document:
    """Parse settings bytes into a Document. Raises DecodeError on bad input."""
    reader = _Reader(data)
    magic = reader.take(len(MAGIC))
    if magic != MAGIC:
        raise DecodeError(
            f"Not an SQMR settings file (magic {magic!r}). Files written by Management Studio "
            f"itself use its .NET binary format, which this tool does not read"
        )
    version = reader.u16()
    if version != FORMAT_VERSION:
        raise DecodeError(f"Unsupported settings format version {version}")

    document = Document(extra=reader.blob())
    for _ in range(reader.u32()):
        group = _read_group(reader)
        if group.key in document.groups:
            raise DecodeError(f"Duplicate server type key '{group.key}'")
        document.groups[group.key] = group

    if reader.remaining:
        raise DecodeError(f"{reader.remaining} trailing byte(s) after document")
    return document


def _read_group(reader: _Reader) -> ServerTypeGroup:
    group = ServerTypeGroup(key=reader.text(), extra=reader.blob())
    for _ in range(reader.u32()):
        server = ServerEntry(
            instance=reader.text(),
            authentication_method=reader.i32(),
            extra=reader.blob(),
        )
        for _ in range(reader.u32()):
            server.logins.append(LoginEntry(user_name=reader.text(), extra=reader.blob()))
        group.servers.append(server)
    return group


def encode(document: Document) -> bytes:
    """Serialize a Document. Unencodable fields raise struct.error or UnicodeEncodeError."""
    out = bytearray(MAGIC)
    out += _U16.pack(FORMAT_VERSION)
    _put_blob(out, document.extra)
    out += _U32.pack(len(document.groups))
    for key, group in document.groups.items():
        _put_text(out, key)
        _put_blob(out, group.extra)
        out += _U32.pack(len(group.servers))
        for server in group.servers:
            _put_text(out, server.instance)
            out += _I32.pack(server.authentication_method)
            _put_blob(out, server.extra)
            out += _U32.pack(len(server.logins))
            for login in server.logins:
                _put_text(out, login.user_name)
                _put_blob(out, login.extra)
    return bytes(out)


def _put_blob(out: bytearray, value: bytes):
    out += _U32.pack(len(value))
    out += value


def _put_text(out: bytearray, value: str):
    _put_blob(out, value.encode("utf-8"))
