"""Logic for turning ``use`` declarations into use-table bindings."""

from __future__ import annotations

from typing import Any

from oxidoc.qualified_path import SEPARATOR, QualifiedPath
from oxidoc.semantic_items import GLOB_KEY

ANCHORS = ("crate", "self", "super")
GLOBAL_ANCHOR = "::"
PATH_LEAVES = ("identifier", "crate", "self", "super", "metavariable", "type_identifier")


def node_str(node: Any) -> str:
    return node.text.decode("utf-8", errors="replace")


def path_segments(node: Any | None) -> list[str]:
    """Flatten a (scoped) path node into its raw segments.

    A path that starts with ``::`` gets the ``"::"`` anchor as its first
    segment.
    """
    if node is None:
        return []
    if node.type in PATH_LEAVES:
        return [node_str(node)]
    if node.type == "scoped_identifier":
        inner = node.child_by_field_name("path")
        name = node.child_by_field_name("name")
        head = path_segments(inner) if inner is not None else [GLOBAL_ANCHOR]
        return head + ([node_str(name)] if name is not None else [])
    return [s for s in "".join(node_str(node).split()).split(SEPARATOR) if s]


def collect_use_bindings(node: Any, prefix: list[str] | None = None) -> list[tuple[str, list[str]]]:
    """Return ``(identifier, raw segments)`` pairs for one use-tree node.

    Glob imports bind the ``"*"`` key to the path of the globbed module.
    ``use a::b::{self}`` binds ``b``; ``use x as _`` binds nothing.
    """
    prefix = prefix or []
    kind = node.type
    if kind in PATH_LEAVES or kind == "scoped_identifier":
        segments = prefix + path_segments(node)
        if segments[-1] == "self" and len(segments) > 1:
            segments = segments[:-1]
        return [(segments[-1], segments)]
    if kind == "use_as_clause":
        alias = node.child_by_field_name("alias")
        segments = prefix + path_segments(node.child_by_field_name("path"))
        if segments and segments[-1] == "self" and len(segments) > 1:
            segments = segments[:-1]
        if alias is None or node_str(alias) == "_" or not segments:
            return []
        return [(node_str(alias), segments)]
    if kind == "use_wildcard":
        base = node.named_children[0] if node.named_children else None
        return [(GLOB_KEY, prefix + path_segments(base))]
    if kind == "scoped_use_list":
        base = node.child_by_field_name("path")
        inner_prefix = prefix + (path_segments(base) if base is not None else [GLOBAL_ANCHOR])
        use_list = node.child_by_field_name("list")
        return collect_use_bindings(use_list, inner_prefix) if use_list is not None else []
    if kind == "use_list":
        bindings: list[tuple[str, list[str]]] = []
        for child in node.named_children:
            if child.type in ("line_comment", "block_comment"):
                continue
            bindings.extend(collect_use_bindings(child, prefix))
        return bindings
    return []


def absolute_candidates(
    segments: list[str], module_path: QualifiedPath, crate_root: QualifiedPath
) -> list[QualifiedPath]:
    """Interpret raw use segments as absolute paths, most likely first.

    Anchored paths (``crate``, ``self``, ``super``, ``::``) have exactly one
    reading. An unanchored path is read relative to the crate root first
    (2015 edition) and relative to the declaring module second (2018).
    """
    if not segments:
        return []
    head = segments[0]
    if head == "crate" or head == GLOBAL_ANCHOR:
        return [crate_root.join(QualifiedPath(tuple(segments[1:])))]
    if head in ("self", "super"):
        base = module_path
        rest = list(segments)
        if rest[0] == "self":
            rest.pop(0)
        while rest and rest[0] == "super":
            rest.pop(0)
            if len(base) > len(crate_root):
                base = base.pop()
        return [base.join(QualifiedPath(tuple(rest)))]
    tail = QualifiedPath(tuple(segments))
    candidates = [crate_root.join(tail)]
    relative = module_path.join(tail)
    if relative not in candidates:
        candidates.append(relative)
    return candidates
