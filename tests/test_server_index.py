from __future__ import annotations

import pytest

from core.document import (
    SQL_AUTHENTICATION,
    Document,
    ServerEntry,
    ServerTypeGroup,
)
from core.errors import EntryNotFound, IndexCorruption
from core.server_index import ServerIndex, unique_display_name


def _document(*groups: list[ServerEntry]) -> Document:
    document = Document()
    for i, servers in enumerate(groups):
        document.groups[f"group-{i}"] = ServerTypeGroup(key=f"group-{i}", servers=servers)
    return document


def test_duplicate_instances_get_numbered_suffixes_in_document_order() -> None:
    servers = [ServerEntry("A"), ServerEntry("A"), ServerEntry("A")]
    index = ServerIndex.build(_document(servers))

    assert index.names() == ["A (Windows)", "A (Windows) 2", "A (Windows) 3"]
    assert index.get("A (Windows)") is servers[0]
    assert index.get("A (Windows) 2") is servers[1]
    assert index.get("A (Windows) 3") is servers[2]


def test_auth_label_distinguishes_names() -> None:
    index = ServerIndex.build(_document([ServerEntry("A"), ServerEntry("A", SQL_AUTHENTICATION)]))
    assert index.names() == ["A (Windows)", "A (Sql)"]


def test_any_non_zero_auth_method_is_sql() -> None:
    index = ServerIndex.build(_document([ServerEntry("A", 7)]))
    assert index.names() == ["A (Sql)"]


def test_collisions_span_groups() -> None:
    index = ServerIndex.build(_document([ServerEntry("A")], [ServerEntry("A")]))
    assert index.names() == ["A (Windows)", "A (Windows) 2"]


def test_index_is_a_bijection(sample_document: Document) -> None:
    index = ServerIndex.build(sample_document)
    entries = [index.get(name) for name in index.names()]

    assert len(index) == sample_document.server_count
    assert len({id(e) for e in entries}) == sample_document.server_count


def test_lowest_free_suffix_is_used() -> None:
    taken = {"X", "X 3"}
    assert unique_display_name("X", taken) == "X 2"
    assert unique_display_name("Y", taken) == "Y"
    assert unique_display_name("X", {"X", "X 2", "X 3"}) == "X 4"


def test_rebuild_reuses_freed_suffix() -> None:
    servers = [ServerEntry("A"), ServerEntry("A"), ServerEntry("A")]
    document = _document(servers)
    document.groups["group-0"].servers.pop(1)

    assert ServerIndex.build(document).names() == ["A (Windows)", "A (Windows) 2"]


def test_same_entry_reachable_twice_is_corruption() -> None:
    shared = ServerEntry("A")
    with pytest.raises(IndexCorruption):
        ServerIndex.build(_document([shared], [shared]))


def test_sorted_names_and_missing_lookup(sample_document: Document) -> None:
    index = ServerIndex.build(sample_document)

    assert index.sorted_names() == [
        "DEV02 (Sql)",
        "PROD01 (Sql)",
        "PROD01 (Windows)",
        "TEST03 (Windows)",
    ]
    with pytest.raises(EntryNotFound):
        index.get("NOPE (Windows)")


def test_remove_drops_name() -> None:
    index = ServerIndex.build(_document([ServerEntry("A"), ServerEntry("B")]))
    index.remove("A (Windows)")

    assert "A (Windows)" not in index.names()
    assert index.names() == ["B (Windows)"]
