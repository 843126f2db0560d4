"""Logic for parsing Rust source with tree-sitter and printing node text."""

from __future__ import annotations

from functools import cache
from typing import TYPE_CHECKING

import tree_sitter_rust
from tree_sitter import Language, Parser

from oxidoc.errors import ParseError

if TYPE_CHECKING:
    from tree_sitter import Node, Tree


@cache
def rust_language() -> Language:
    """Return the tree-sitter language object for Rust."""
    return Language(tree_sitter_rust.language())


def make_parser() -> Parser:
    """Create a parser bound to the Rust grammar."""
    return Parser(rust_language())


def first_error(node: Node) -> Node | None:
    """Return the first ERROR or MISSING node in document order."""
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = first_error(child)
        if found is not None:
            return found
    return node


def parse_source(text: str, file: str | None = None) -> Tree:
    """Parse ``text`` into a syntax tree.

    Raises ParseError naming ``file`` and the 1-based line of the first
    error or missing node when the source does not parse cleanly.
    """
    tree = make_parser().parse(text.encode("utf-8"))
    if tree.root_node.has_error:
        bad = first_error(tree.root_node)
        line = bad.start_point[0] + 1 if bad is not None else 1
        detail = f"unexpected {bad.type}" if bad is not None and bad.type != "ERROR" else ""
        raise ParseError(file or "<string>", line, detail)
    return tree


def pretty(node: Node | None) -> str:
    """Return the node's source text with whitespace runs collapsed."""
    if node is None:
        return ""
    return " ".join(node.text.decode("utf-8", errors="replace").split())
