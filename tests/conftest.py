from __future__ import annotations

from pathlib import Path

import pytest

from core import codec
from core.document import (
    SQL_AUTHENTICATION,
    WINDOWS_AUTHENTICATION,
    Document,
    LoginEntry,
    ServerEntry,
    ServerTypeGroup,
)
from core.locator import SETTINGS_FILE_NAME, SettingsLocator
from core.session import SettingsSession


def make_document() -> Document:
    """Two groups; PROD01 is registered under both."""
    engine = ServerTypeGroup(
        key="8c91a03d-f9b4-46c0-a305-b5dcc79ff907",
        extra=b"\x01engine",
        servers=[
            ServerEntry(
                instance="PROD01",
                authentication_method=WINDOWS_AUTHENTICATION,
                logins=[LoginEntry("alice", b"pw-a"), LoginEntry("bob", b"pw-b")],
                extra=b"\x00\x01",
            ),
            ServerEntry(
                instance="DEV02",
                authentication_method=SQL_AUTHENTICATION,
                logins=[LoginEntry("sa")],
            ),
            ServerEntry(instance="TEST03"),
        ],
    )
    analysis = ServerTypeGroup(
        key="3f4a2e7d-6c2a-4b91-9d8b-0a1b2c3d4e5f",
        servers=[
            ServerEntry(
                instance="PROD01",
                authentication_method=SQL_AUTHENTICATION,
                logins=[LoginEntry("alice", b"other")],
            ),
        ],
    )
    return Document(groups={engine.key: engine, analysis.key: analysis}, extra=b"header")


def write_settings(directory: Path, document: Document) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / SETTINGS_FILE_NAME
    path.write_bytes(codec.encode(document))
    return path


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    return write_settings(tmp_path / "Shell", make_document())


@pytest.fixture
def session(settings_file: Path) -> SettingsSession:
    locator = SettingsLocator(candidates=[str(settings_file.parent)])
    return SettingsSession(locator)


@pytest.fixture
def sample_document() -> Document:
    return make_document()


@pytest.fixture(name="write_settings")
def write_settings_fixture():
    return write_settings
