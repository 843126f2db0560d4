"""Tests for the documentation store."""

from pathlib import Path

import pytest

from oxidoc.crate_info import CrateInfo
from oxidoc.doc_kind import DocKind
from oxidoc.errors import StoreIOError
from oxidoc.index_crate import document_source
from oxidoc.qualified_path import QualifiedPath
from oxidoc.store import INDEX_TMP_FILE, Store, record_name_of

TEST_CRATE = CrateInfo("test", "0.1.0")


@pytest.fixture
def store(tmp_path: Path) -> Store:
    """Create a store below a temporary registry."""
    return Store(tmp_path / "registry")


def write(store: Store, source: str, crate_info: CrateInfo = TEST_CRATE):
    """Index ``source`` as ``crate_info`` into ``store``."""
    return store.write_crate(crate_info, document_source(source, crate_info))


def snapshot(root: Path) -> dict[str, bytes]:
    return {str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


def test_record_path_layout(store: Store) -> None:
    """Verify the on-disk location of a nested struct record."""
    locations = write(store, "pub mod thing { pub struct Test; }")
    struct = next(loc for loc in locations if loc.kind is DocKind.STRUCT)
    path = store.record_path(struct)
    assert path.is_file()
    assert path.relative_to(store.root).parts == ("test-0.1.0", "test", "thing", "sdesc-Test.odoc")


def test_write_then_load(store: Store) -> None:
    """Verify that stored records load back unchanged."""
    crate_info = TEST_CRATE
    records = document_source("/// Docs\npub struct Test;\nimpl Test { pub fn go(&self) {} }", crate_info)
    locations = store.write_crate(crate_info, records)
    loaded = [store.load(loc) for loc in locations]
    assert loaded == records
    assert store.all_locations() == sorted(locations, key=lambda loc: loc.sort_key())


def test_reindexing_is_byte_identical(store: Store) -> None:
    """Verify that indexing the same crate twice writes the same bytes."""
    source = "pub mod a { pub struct S { pub x: u8 } impl S { pub fn f() {} } }"
    write(store, source)
    first = snapshot(store.root)
    write(store, source)
    assert snapshot(store.root) == first
    assert not (store.root / INDEX_TMP_FILE).exists()


def test_reindexing_removes_stale_records(store: Store) -> None:
    """Verify that a re-indexed crate version loses items no longer present."""
    write(store, "pub struct Old; pub struct Kept;")
    write(store, "pub struct Kept;")
    assert [str(loc.mod_path) for loc in store.all_locations()] == ["test", "test::Kept"]
    assert not (store.root / "test-0.1.0" / "test" / "sdesc-Old.odoc").exists()


def test_index_keeps_other_crates(store: Store) -> None:
    """Verify that writing one crate leaves other crates in the index."""
    write(store, "pub struct A;", CrateInfo("alpha", "1.0.0"))
    write(store, "pub struct B;", CrateInfo("beta", "1.0.0"))
    names = {loc.crate_info.name for loc in Store(store.registry).all_locations()}
    assert names == {"alpha", "beta"}


def test_missing_index_falls_back_to_scan(store: Store) -> None:
    """Verify that locations are rebuilt from record files without an index."""
    locations = write(store, "pub mod a { pub fn f() {} }")
    store.index_file.unlink()
    fresh = Store(store.registry)
    assert fresh.all_locations() == sorted(locations, key=lambda loc: loc.sort_key())


def test_corrupt_index_falls_back_to_scan(store: Store) -> None:
    """Verify that an unreadable index is ignored in favour of a scan."""
    locations = write(store, "pub struct Test;")
    store.index_file.write_bytes(b"\xc1 not msgpack")
    fresh = Store(store.registry)
    assert fresh.all_locations() == sorted(locations, key=lambda loc: loc.sort_key())


def test_scan_skips_malformed_file_names(store: Store, caplog: pytest.LogCaptureFixture) -> None:
    """Verify that record files with undecodable names are skipped."""
    write(store, "pub struct Test;")
    (store.root / "test-0.1.0" / "test" / "sdesc-Bad%x2.odoc").write_bytes(b"junk")
    locations = store.scan()
    assert [str(loc.mod_path) for loc in locations] == ["test", "test::Test"]
    assert "malformed file name" in caplog.text


def test_load_falls_back_when_file_moved(store: Store) -> None:
    """Verify that load finds a record whose file was renamed."""
    locations = write(store, "pub struct Test;")
    struct = next(loc for loc in locations if loc.kind is DocKind.STRUCT)
    path = store.record_path(struct)
    path.rename(path.with_name("moved.odoc"))
    assert store.load(struct).name == "Test"


def test_load_missing_record_raises(store: Store) -> None:
    """Verify that a record absent from disk raises StoreIOError."""
    locations = write(store, "pub struct Test;")
    struct = next(loc for loc in locations if loc.kind is DocKind.STRUCT)
    store.record_path(struct).unlink()
    with pytest.raises(StoreIOError):
        store.load(struct)


def test_colliding_records_get_discriminators(store: Store) -> None:
    """Verify that same-named methods from two trait impls are both kept."""
    source = """
pub struct S;
pub trait A { fn go(&self); }
pub trait B { fn go(&self); }
impl A for S { fn go(&self) {} }
impl B for S { fn go(&self) {} }
"""
    locations = write(store, source)
    methods = [loc for loc in locations if loc.mod_path == QualifiedPath.parse("test::S::go")]
    assert len(methods) == 2
    assert methods[0].discriminator == ""
    assert len(methods[1].discriminator) == 6
    assert all(store.record_path(loc).is_file() for loc in methods)
    assert {store.load(loc).impl_context.trait_ref_text for loc in methods} == {"A", "B"}


def test_record_name_of() -> None:
    """Verify that file names decode back to item names."""
    assert record_name_of("sdesc-My%x5F;Struct.odoc") == "My_Struct"
    assert record_name_of("go~a1b2c3.odoc") == "go"


def test_lookup_is_case_insensitive(store: Store) -> None:
    """Verify that a lower-case query finds a capitalised item."""
    write(store, "pub struct Test;", CrateInfo("crate", "0.1.0"))
    found = [str(loc.mod_path) for loc in store.lookup_name("test")]
    assert "crate::Test" in found


def test_lookup_by_segment(store: Store) -> None:
    """Verify that a segment query returns every path containing it."""
    write(store, "pub mod a { pub mod b { pub fn test() {} } }", CrateInfo("crate", "0.1.0"))
    found = [str(loc.mod_path) for loc in store.lookup_name("a")]
    assert {"crate::a", "crate::a::b", "crate::a::b::test"} <= set(found)
    assert found[0] == "crate::a"


def test_lookup_qualified_name(store: Store) -> None:
    """Verify that a qualified query finds the exact item first."""
    write(store, "pub struct Nyanko;", CrateInfo("nyanko", "0.1.0"))
    found = [str(loc.mod_path) for loc in store.lookup_name("nyanko::Nyanko")]
    assert found == ["nyanko::Nyanko"]


def test_lookup_prefers_newest_version(store: Store) -> None:
    """Verify that each item is reported from the newest version that has it."""
    write(store, "pub struct Test; pub struct Old;", CrateInfo("test", "0.1.0"))
    write(store, "pub struct Test;", CrateInfo("test", "0.10.0"))
    [test] = [loc for loc in store.lookup_name("test::test") if loc.kind is DocKind.STRUCT]
    assert test.crate_info.version == "0.10.0"
    [old] = store.lookup_name("old")
    assert old.crate_info.version == "0.1.0"


def test_lookup_empty_query(store: Store) -> None:
    """Verify that a blank query finds nothing."""
    write(store, "pub struct Test;")
    assert store.lookup_name("  ") == []
