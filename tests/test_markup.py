"""Tests for the documentation page layout."""

from oxidoc.crate_info import CrateInfo
from oxidoc.doc_kind import DocKind
from oxidoc.documentation import Documentation
from oxidoc.index_crate import document_source
from oxidoc.markdown_renderer import RenderOptions
from oxidoc.markup import context_line, format_documentation, kind_title

PLAIN = RenderOptions(color=False)

SOURCE = """
//! Root docs.
pub mod shapes {
    /// A square.
    ///
    /// Has four equal sides.
    pub struct Square { pub side: f64 }
    impl Square { pub fn area(&self) -> f64 { self.side * self.side } }
    impl Clone for Square { fn clone(&self) -> Self { Square { side: self.side } } }
    pub trait Shape { fn sides(&self) -> u32; }
    pub enum Kind { Flat }
}
"""


def docs() -> dict[str, Documentation]:
    return {str(doc.mod_path): doc for doc in document_source(SOURCE, CrateInfo("geo", "0.3.0"))}


def test_kind_title() -> None:
    """Verify that kind names are split into words."""
    assert kind_title(DocKind.STRUCT_FIELD) == "Struct Field"
    assert kind_title(DocKind.TRAIT_ITEM_METHOD) == "Trait Item Method"
    assert kind_title(DocKind.MODULE) == "Module"


def test_context_lines() -> None:
    """Verify where each kind of record says it comes from."""
    records = docs()
    assert context_line(records["geo"]) is None
    assert context_line(records["geo::shapes::Square"]) == "In module geo::shapes"
    assert context_line(records["geo::shapes::Square::side"]) == "In struct geo::shapes::Square"
    assert context_line(records["geo::shapes::Kind::Flat"]) == "In enum geo::shapes::Kind"
    assert context_line(records["geo::shapes::Shape::sides"]) == "From trait geo::shapes::Shape"
    assert context_line(records["geo::shapes::Square::area"]) == "Impl on type Square"
    assert context_line(records["geo::shapes::Square::clone"]) == "From trait Clone on type Square"


def test_struct_page() -> None:
    """Verify the header, signature, body and link sections of a page."""
    page = format_documentation(docs()["geo::shapes::Square"], 60, PLAIN)
    lines = page.split("\n")
    assert lines[0] == "crate geo 0.3.0"
    assert lines[1] == "Struct geo::shapes::Square"
    assert lines[2] == "In module geo::shapes"
    assert lines[3] == "-" * 60
    assert lines[4] == "pub struct Square"
    assert "A square." in lines
    assert "Has four equal sides." in lines
    assert lines.index("Struct Fields") < lines.index("Functions")
    assert "  side" in lines
    assert "  area" in lines
    assert "  clone" in lines


def test_undocumented_page() -> None:
    """Verify the placeholder for items without doc text."""
    page = format_documentation(docs()["geo::shapes::Kind"], 40, PLAIN)
    assert "No documentation." in page
    assert "Variants" in page


def test_crate_page() -> None:
    """Verify the crate root page."""
    page = format_documentation(docs()["geo"], 40, PLAIN)
    assert "crate geo" in page.split("\n")
    assert "Root docs." in page
    assert "Modules" in page
