"""Logic for attaching impl blocks to the qualified path of their target type."""

from __future__ import annotations

import logging
import re

from oxidoc.qualified_path import SEPARATOR, QualifiedPath
from oxidoc.semantic_items import GLOB_KEY, EnumDef, Impl, Item, Module, Struct, Trait
from oxidoc.use_table import ANCHORS, GLOBAL_ANCHOR, absolute_candidates
from oxidoc.visitor import CrateTree

logger = logging.getLogger(__name__)

MAX_REEXPORT_DEPTH = 8
LEADING_NOISE_RE = re.compile(r"^(?:&\s*|'\w+\s*|mut\s+|dyn\s+|impl\s+|\*\s*(?:const|mut)\s+)+")


def strip_generics(text: str) -> str:
    """Remove every balanced ``<...>`` group from a type expression."""
    out: list[str] = []
    depth = 0
    for c in text:
        if c == "<":
            depth += 1
        elif c == ">" and depth:
            depth -= 1
        elif depth == 0:
            out.append(c)
    return "".join(out)


def type_segments(type_text: str) -> list[str]:
    """Normalize an impl target such as ``&'a mut a::T<U>`` to ``[a, T]``."""
    text = LEADING_NOISE_RE.sub("", type_text.strip())
    text = "".join(strip_generics(text).split())
    if text.startswith(SEPARATOR):
        return [GLOBAL_ANCHOR] + [s for s in text.split(SEPARATOR) if s]
    return [s for s in text.split(SEPARATOR) if s]


def collect_modules(module: Module, into: dict[QualifiedPath, Module]) -> None:
    into[module.path] = module
    for child in module.children(Module):
        collect_modules(child, into)


def collect_types(modules: dict[QualifiedPath, Module]) -> dict[QualifiedPath, Item]:
    """Build the ``path -> type entity`` index over structs, enums and traits."""
    index: dict[QualifiedPath, Item] = {}
    for module in modules.values():
        for item in module.items:
            if isinstance(item, (Struct, EnumDef, Trait)):
                index[item.path] = item
    return index


class ImplResolver:
    """Resolves every impl of a crate tree to the type it applies to."""

    def __init__(self, tree: CrateTree) -> None:
        """Initialize the resolver with the module and type indexes of a tree."""
        self.tree = tree
        self.crate_root = tree.root.path
        self.modules: dict[QualifiedPath, Module] = {}
        collect_modules(tree.root, self.modules)
        self.types = collect_types(self.modules)

    def candidates(self, impl: Impl) -> list[QualifiedPath]:
        """Return candidate target paths for an impl, most likely first."""
        segments = type_segments(impl.target_type_text)
        if not segments:
            return []
        if segments[0] in ANCHORS or segments[0] == GLOBAL_ANCHOR:
            return absolute_candidates(segments, impl.module_path, self.crate_root)

        full = QualifiedPath(tuple(segments))
        module = self.modules.get(impl.module_path)
        use_table = module.use_table if module is not None else {}
        result: list[QualifiedPath] = []

        def add(path: QualifiedPath) -> None:
            if path not in result:
                result.append(path)

        # Named imports and local items shadow glob imports.
        for target in use_table.get(full.head() or "", []):
            add(target.pop().join(full))
        add(impl.module_path.join(full))
        for base in use_table.get(GLOB_KEY, []):
            add(base.join(full))
        add(self.crate_root.join(full))
        return result

    def lookup(
        self, path: QualifiedPath, depth: int = 0, seen: set[QualifiedPath] | None = None
    ) -> QualifiedPath | None:
        """Find ``path`` in the type index, following re-exports on a miss."""
        if path in self.types:
            return path
        seen = seen if seen is not None else set()
        if depth >= MAX_REEXPORT_DEPTH or path in seen:
            return None
        seen.add(path)
        parent = path.parent()
        name = path.name()
        module = self.modules.get(parent) if parent is not None else None
        if module is None or name is None:
            return None
        for target in module.use_table.get(name, []):
            found = self.lookup(target, depth + 1, seen)
            if found is not None:
                return found
        for base in module.use_table.get(GLOB_KEY, []):
            found = self.lookup(base.push(name), depth + 1, seen)
            if found is not None:
                return found
        return None

    def resolve(self, impl: Impl) -> None:
        """Set ``target_path`` on one impl."""
        candidates = self.candidates(impl)
        for candidate in candidates:
            found = self.lookup(candidate)
            if found is not None:
                impl.target_path = found
                impl.resolved = True
                return
        for candidate in candidates:
            if candidate in self.tree.hidden_paths:
                impl.target_path = candidate
                return
        impl.target_path = candidates[0] if candidates else impl.module_path
        impl.resolved = False
        logger.warning(
            "Could not resolve impl target %r in %s; attaching items to %s",
            impl.target_type_text,
            impl.module_path,
            impl.target_path,
        )

    def resolve_all(self) -> list[Impl]:
        """Resolve every impl in declaration order.

        Impls whose target is a hidden type are dropped from the result.
        """
        resolved: list[Impl] = []
        for impl in sorted(self.tree.impls, key=lambda i: i.order):
            self.resolve(impl)
            if impl.target_path in self.tree.hidden_paths:
                logger.debug("Dropping impl of hidden type %s", impl.target_path)
                continue
            resolved.append(impl)
        return resolved


def resolve_impls(tree: CrateTree) -> list[Impl]:
    """Resolve the impls of a crate tree; see ImplResolver.resolve_all."""
    return ImplResolver(tree).resolve_all()
