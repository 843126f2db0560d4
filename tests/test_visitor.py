"""Tests for the syntax tree visitor."""

from pathlib import Path

import pytest

from oxidoc.errors import ParseError
from oxidoc.qualified_path import QualifiedPath
from oxidoc.semantic_items import (
    Abi,
    Constness,
    EnumDef,
    FnKind,
    Function,
    Module,
    Struct,
    Trait,
    Unsafety,
)
from oxidoc.visibility import Visibility
from oxidoc.visitor import build_crate_tree


def p(text: str) -> QualifiedPath:
    return QualifiedPath.parse(text)


def test_empty_source_gives_crate_root() -> None:
    """Verify that an empty crate still has a root module."""
    tree = build_crate_tree("", "crate")
    assert tree.root.path == p("crate")
    assert tree.root.is_crate_root
    assert tree.root.items == []
    assert tree.impls == []


def test_inner_docs_attach_to_crate_root() -> None:
    """Verify that //! comments document the enclosing module."""
    tree = build_crate_tree("//! Crate docs\n\n/// A thing\npub struct Thing;\n", "crate")
    assert tree.root.attrs.doc_strings == ["Crate docs"]
    struct = tree.root.children(Struct)[0]
    assert struct.attrs.doc_strings == ["A thing"]
    assert struct.visibility is Visibility.PUBLIC


def test_use_table_bindings() -> None:
    """Verify plain, aliased, self and glob imports."""
    source = """
pub mod a {
    use crate::x::Y;
    use std::fmt::{self, Display as Show};
    use super::*;
    use std::io::Write as _;
}
"""
    tree = build_crate_tree(source, "crate")
    module = tree.root.children(Module)[0]
    assert module.use_table["Y"] == [p("crate::x::Y")]
    assert module.use_table["fmt"] == [p("crate::std::fmt"), p("crate::a::std::fmt")]
    assert module.use_table["Show"] == [p("crate::std::fmt::Display"), p("crate::a::std::fmt::Display")]
    assert module.use_table["*"] == [p("crate")]
    assert "_" not in module.use_table
    assert "Write" not in module.use_table


def test_hidden_items_are_skipped() -> None:
    """Verify that #[doc(hidden)] items are left out and remembered."""
    source = """
#[doc(hidden)]
pub struct Hidden;
pub struct Shown;
"""
    tree = build_crate_tree(source, "crate")
    assert [s.ident for s in tree.root.children(Struct)] == ["Shown"]
    assert p("crate::Hidden") in tree.hidden_paths


def test_hidden_items_kept_when_not_skipping() -> None:
    """Verify that hidden items survive with skip_doc_hidden disabled."""
    tree = build_crate_tree("#[doc(hidden)]\npub struct Hidden;\n", "crate", skip_doc_hidden=False)
    assert [s.ident for s in tree.root.children(Struct)] == ["Hidden"]


def test_struct_fields_and_enum_variants() -> None:
    """Verify field and variant extraction."""
    source = """
pub struct Point {
    /// Horizontal
    pub x: i32,
    y: i32,
}
pub struct Pair(pub u8, u16);
pub enum Shape {
    Dot,
    Line(u32),
    Rect { w: u32, h: u32 },
    Code = 4,
}
"""
    tree = build_crate_tree(source, "crate")
    point, pair = tree.root.children(Struct)
    assert [(f.ident, f.type_text) for f in point.fields] == [("x", "i32"), ("y", "i32")]
    assert point.fields[0].attrs.doc_strings == ["Horizontal"]
    assert point.fields[0].visibility is Visibility.PUBLIC
    assert point.fields[1].visibility is Visibility.INHERITED
    assert not point.tuple_like
    assert pair.tuple_like
    assert [f.type_text for f in pair.fields] == ["u8", "u16"]

    shape = tree.root.children(EnumDef)[0]
    assert [v.ident for v in shape.variants] == ["Dot", "Line", "Rect", "Code"]
    assert shape.variants[1].data_text == "(u32)"
    assert shape.variants[2].data_text == "{ w: u32, h: u32 }"
    assert shape.variants[3].data_text == "= 4"


def test_function_signature_qualifiers() -> None:
    """Verify that signatures drop the body and record qualifiers."""
    source = 'pub const unsafe extern "system" fn call(x: u8) -> u8 { x }\n'
    tree = build_crate_tree(source, "crate")
    function = tree.root.children(Function)[0].function
    assert function.signature == 'const unsafe extern "system" fn call(x: u8) -> u8'
    assert function.unsafety is Unsafety.UNSAFE
    assert function.constness is Constness.CONST
    assert function.abi is Abi.SYSTEM
    assert function.kind is FnKind.FREE_FN


def test_extern_block_functions_use_block_abi() -> None:
    """Verify that foreign functions are recorded with the block's ABI."""
    tree = build_crate_tree('extern "C" {\n    pub fn strlen(s: *const u8) -> usize;\n}\n', "crate")
    function = tree.root.children(Function)[0]
    assert function.path == p("crate::strlen")
    assert function.function.abi is Abi.C


def test_trait_items_and_unsafe_traits() -> None:
    """Verify trait items and unsafe traits."""
    source = """
pub trait Shape {
    const SIDES: u32;
    fn area(&self) -> f64;
    type Output: Clone;
}
pub unsafe trait Marker {}
"""
    tree = build_crate_tree(source, "crate")
    shape, marker = tree.root.children(Trait)
    assert [i.ident for i in shape.items] == ["SIDES", "area", "Output"]
    assert shape.items[1].function.kind is FnKind.TRAIT_METHOD
    assert shape.items[2].type_text == "Clone"
    assert marker.unsafety is Unsafety.UNSAFE
    assert tree.default_impls == []


def test_impls_record_declaration_order() -> None:
    """Verify impl order and trait references."""
    source = """
pub struct S;
impl S { pub fn a() {} }
impl Clone for S { fn clone(&self) -> S { S } }
unsafe impl Send for S {}
"""
    tree = build_crate_tree(source, "crate")
    assert [i.order for i in tree.impls] == [0, 1, 2]
    assert tree.impls[0].trait_ref_text is None
    assert tree.impls[0].items[0].function.kind is FnKind.INHERENT_METHOD
    assert tree.impls[1].trait_ref_text == "Clone"
    assert tree.impls[2].trait_ref_text == "Send"
    assert tree.impls[2].unsafety is Unsafety.UNSAFE


def test_out_of_line_modules(tmp_path: Path) -> None:
    """Verify that mod declarations load files and keep depth-first order."""
    src = tmp_path / "src"
    (src / "a").mkdir(parents=True)
    (src / "lib.rs").write_text("pub struct T;\npub mod a;\nimpl T { pub fn second() {} }\n")
    (src / "a.rs").write_text("pub mod b;\nimpl super::T { pub fn first() {} }\n")
    (src / "a" / "b.rs").write_text("pub struct Deep;\n")
    entry = src / "lib.rs"

    tree = build_crate_tree(entry.read_text(), "crate", entry)
    a = tree.root.children(Module)[0]
    b = a.children(Module)[0]
    assert a.file == src / "a.rs"
    assert b.path == p("crate::a::b")
    assert [s.ident for s in b.children(Struct)] == ["Deep"]
    assert [impl.items[0].ident for impl in tree.impls] == ["first", "second"]


def test_path_attribute_overrides_module_file(tmp_path: Path) -> None:
    """Verify that #[path] names the module file relative to the declaring file."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "lib.rs").write_text('#[path = "elsewhere.rs"]\npub mod x;\n')
    (src / "elsewhere.rs").write_text("pub fn found() {}\n")
    entry = src / "lib.rs"

    tree = build_crate_tree(entry.read_text(), "crate", entry)
    x = tree.root.children(Module)[0]
    assert [f.ident for f in x.children(Function)] == ["found"]


def test_missing_module_file_is_tolerated(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Verify that a missing module file is warned about, not fatal."""
    src = tmp_path / "src"
    src.mkdir()
    entry = src / "lib.rs"
    entry.write_text("pub mod missing;\n")

    tree = build_crate_tree(entry.read_text(), "crate", entry)
    assert [m.ident for m in tree.root.children(Module)] == ["missing"]
    assert "missing" in caplog.text


def test_parse_error_reports_line() -> None:
    """Verify that syntax errors raise ParseError with a line number."""
    with pytest.raises(ParseError) as excinfo:
        build_crate_tree("pub struct Ok;\n\npub fn (\n", "crate")
    assert excinfo.value.file == "<string>"
    assert excinfo.value.line >= 3
