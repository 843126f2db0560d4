"""Logic for collecting doc strings and marker attributes from syntax nodes."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from oxidoc.attributes import Attributes
from oxidoc.unescape_rust_string import unescape_rust_string

DOC_VALUE_RE = re.compile(r"^doc\s*=\s*(.+)$", re.DOTALL)
DOC_LIST_RE = re.compile(r"^doc\s*\((.*)\)$", re.DOTALL)
PATH_VALUE_RE = re.compile(r"^path\s*=\s*(.+)$", re.DOTALL)
BLOCK_LINE_RE = re.compile(r"^\s*\* ?")


@dataclass
class ExtractedAttributes:
    """Doc strings plus the few non-doc attributes the indexer honours."""

    attrs: Attributes = field(default_factory=Attributes)
    hidden: bool = False
    path_override: str | None = None


def line_comment_doc(text: str, *, inner: bool) -> str | None:
    """Return the doc text of a ``///`` or ``//!`` comment, else None."""
    text = text.rstrip("\r\n")
    if inner:
        if not text.startswith("//!"):
            return None
    elif not text.startswith("///") or text.startswith("////"):
        return None
    body = text[3:]
    return body[1:] if body.startswith(" ") else body


def block_comment_doc(text: str, *, inner: bool) -> str | None:
    """Return the doc text of a ``/** */`` or ``/*! */`` comment, else None."""
    if not text.endswith("*/") or len(text) < 5:
        return None
    if inner:
        if not text.startswith("/*!"):
            return None
    elif not text.startswith("/**") or text.startswith("/***"):
        return None
    lines = text[3:-2].split("\n")
    cleaned = [lines[0].strip()] + [BLOCK_LINE_RE.sub("", line, count=1).rstrip() for line in lines[1:]]
    while cleaned and not cleaned[0]:
        cleaned.pop(0)
    while cleaned and not cleaned[-1]:
        cleaned.pop()
    return "\n".join(cleaned)


def attribute_body(text: str) -> str | None:
    """Return the text between ``#[`` / ``#![`` and the closing bracket."""
    text = text.strip()
    if text.startswith("#!["):
        start = 3
    elif text.startswith("#["):
        start = 2
    else:
        return None
    end = text.rfind("]")
    if end < start:
        return None
    return text[start:end].strip()


def node_text(node: Any) -> str:
    """Decode the source text of a tree-sitter node."""
    return node.text.decode("utf-8", errors="replace")


def extract_attributes(nodes: Iterable[Any], *, inner: bool = False) -> ExtractedAttributes:
    """Collect doc strings and markers from comment and attribute nodes.

    With ``inner`` set, only ``//!``, ``/*! */`` and ``#![...]`` contribute;
    otherwise only their outer forms do. Other attributes are discarded.
    """
    result = ExtractedAttributes()
    attr_type = "inner_attribute_item" if inner else "attribute_item"
    for node in nodes:
        if node.type == "line_comment":
            doc = line_comment_doc(node_text(node), inner=inner)
            if doc is not None:
                result.attrs.doc_strings.append(doc)
        elif node.type == "block_comment":
            doc = block_comment_doc(node_text(node), inner=inner)
            if doc is not None:
                result.attrs.doc_strings.append(doc)
        elif node.type == attr_type:
            apply_attribute(result, node_text(node))
    return result


def apply_attribute(result: ExtractedAttributes, text: str) -> None:
    """Fold one ``#[...]`` attribute into ``result``."""
    body = attribute_body(text)
    if body is None:
        return
    match = DOC_VALUE_RE.match(body)
    if match:
        result.attrs.doc_strings.append(unescape_rust_string(match.group(1)))
        return
    match = DOC_LIST_RE.match(body)
    if match:
        args = {a.strip() for a in match.group(1).split(",")}
        if "hidden" in args:
            result.hidden = True
        return
    match = PATH_VALUE_RE.match(body)
    if match:
        result.path_override = unescape_rust_string(match.group(1))
