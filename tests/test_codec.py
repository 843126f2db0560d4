"""Tests for the record and index encodings."""

import msgspec
import pytest

from oxidoc.codec import (
    INDEX_SCHEMA_VERSION,
    decode_documentation,
    decode_index,
    encode_documentation,
    encode_index,
)
from oxidoc.crate_info import CrateInfo
from oxidoc.index_crate import document_source


def test_record_round_trip_keeps_payload_and_links() -> None:
    """Verify that a struct record with fields and links survives encoding."""
    source = "/// A point.\npub struct Point { pub x: i32 }\nimpl Point { pub fn norm(&self) -> f64 { 0.0 } }"
    docs = document_source(source, CrateInfo("geo", "1.2.3"))
    point = next(doc for doc in docs if doc.name == "Point")
    decoded = decode_documentation(encode_documentation(point))
    assert decoded == point
    assert decoded.signature() == "pub struct Point"


def test_record_encoding_is_deterministic() -> None:
    """Verify that encoding the same record twice gives the same bytes."""
    [root] = document_source("", CrateInfo("geo", "1.2.3"))
    assert encode_documentation(root) == encode_documentation(root)


@pytest.mark.parametrize("raw", [b"", b"\xc1", msgspec.msgpack.encode([1, 2]), msgspec.msgpack.encode({"kind": "?"})])
def test_decode_documentation_rejects_garbage(raw: bytes) -> None:
    """Verify that malformed records raise ValueError."""
    with pytest.raises(ValueError):
        decode_documentation(raw)


def test_index_round_trip_is_sorted() -> None:
    """Verify that the index stores locations in sort order."""
    docs = document_source("pub mod b {} pub mod a {}", CrateInfo("c", "1.0.0"))
    locations = [doc.location() for doc in docs]
    decoded = decode_index(encode_index(locations))
    assert [str(loc.mod_path) for loc in decoded] == ["c", "c::a", "c::b"]


def test_index_schema_version_is_checked() -> None:
    """Verify that an index with a different schema version is rejected."""
    raw = msgspec.msgpack.encode({"schema_version": INDEX_SCHEMA_VERSION + 1, "locations": []})
    with pytest.raises(ValueError, match="schema version"):
        decode_index(raw)
