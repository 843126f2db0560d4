"""Logic for walking a Rust syntax tree into a semantic module tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from oxidoc.attributes import Attributes
from oxidoc.extract_attributes import ExtractedAttributes, extract_attributes
from oxidoc.module_loader import child_dir_for, find_module_file, read_source
from oxidoc.parse_source import parse_source, pretty
from oxidoc.qualified_path import QualifiedPath
from oxidoc.semantic_items import (
    Abi,
    AssocItem,
    AssocKind,
    Constant,
    Constness,
    DefaultImpl,
    EnumDef,
    FnKind,
    Function,
    FunctionSig,
    Impl,
    Import,
    MacroDef,
    Module,
    Struct,
    StructField,
    Trait,
    Unsafety,
    Variant,
)
from oxidoc.unescape_rust_string import unescape_rust_string
from oxidoc.use_table import absolute_candidates, collect_use_bindings
from oxidoc.visibility import Visibility

logger = logging.getLogger(__name__)

# Nodes that attach to the item following them.
PREFIX_NODES = ("line_comment", "block_comment", "attribute_item")
FUNCTION_NODES = ("function_item", "function_signature_item")


@dataclass
class CrateTree:
    """Result of visiting one crate."""

    root: Module
    impls: list[Impl] = field(default_factory=list)
    default_impls: list[DefaultImpl] = field(default_factory=list)
    hidden_paths: set[QualifiedPath] = field(default_factory=set)


def child_of_type(node: Any, kind: str) -> Any | None:
    """Return the first direct child of the given node type."""
    for child in node.children:
        if child.type == kind:
            return child
    return None


def has_token(node: Any, token: str) -> bool:
    """Return True when an anonymous keyword token is a direct child."""
    return any(child.type == token for child in node.children)


def name_of(node: Any) -> str | None:
    name = node.child_by_field_name("name")
    return name.text.decode("utf-8", errors="replace") if name is not None else None


def visibility_of(node: Any) -> Visibility:
    modifier = child_of_type(node, "visibility_modifier")
    return Visibility.from_modifier(pretty(modifier) if modifier is not None else None)


def slice_text(node: Any, start_byte: int, end_byte: int) -> str:
    """Return the collapsed source text of ``node`` between two byte offsets."""
    raw = node.text[start_byte - node.start_byte : end_byte - node.start_byte]
    return " ".join(raw.decode("utf-8", errors="replace").split())


def abi_of(extern_modifier: Any) -> Abi:
    literal = child_of_type(extern_modifier, "string_literal")
    if literal is None:
        return Abi.C
    return Abi.from_name(unescape_rust_string(literal.text.decode("utf-8", errors="replace")))


def function_sig(node: Any, kind: FnKind, abi: Abi = Abi.RUST) -> FunctionSig:
    """Build the signature of a function item, without body or visibility."""
    unsafety = Unsafety.NORMAL
    constness = Constness.NOT_CONST
    modifiers = child_of_type(node, "function_modifiers")
    if modifiers is not None:
        for token in modifiers.children:
            if token.type == "unsafe":
                unsafety = Unsafety.UNSAFE
            elif token.type == "const":
                constness = Constness.CONST
            elif token.type == "extern_modifier":
                abi = abi_of(token)
    visibility = child_of_type(node, "visibility_modifier")
    body = node.child_by_field_name("body")
    start = visibility.end_byte if visibility is not None else node.start_byte
    end = body.start_byte if body is not None else node.end_byte
    signature = slice_text(node, start, end).rstrip(";").strip()
    return FunctionSig(signature, unsafety, constness, abi, kind)


def field_list(node: Any | None, skip_hidden: bool) -> tuple[list[StructField], bool]:
    """Return the fields of a struct or variant body and whether it is tuple-like."""
    fields: list[StructField] = []
    if node is None:
        return fields, False
    pending: list[Any] = []
    if node.type == "field_declaration_list":
        for child in node.children:
            if child.type in PREFIX_NODES:
                pending.append(child)
            elif child.type == "field_declaration":
                extracted = extract_attributes(pending)
                pending = []
                if skip_hidden and extracted.hidden:
                    continue
                fields.append(
                    StructField(
                        name_of(child),
                        visibility_of(child),
                        pretty(child.child_by_field_name("type")),
                        extracted.attrs,
                    )
                )
        return fields, False
    # ordered_field_declaration_list: attributes, visibility and type are flat siblings
    visibility: str | None = None
    for child in node.children:
        if child.type in PREFIX_NODES:
            pending.append(child)
        elif child.type == "visibility_modifier":
            visibility = pretty(child)
        elif child.is_named:
            extracted = extract_attributes(pending)
            if not (skip_hidden and extracted.hidden):
                fields.append(
                    StructField(None, Visibility.from_modifier(visibility), pretty(child), extracted.attrs)
                )
            pending = []
            visibility = None
    return fields, True


class CrateVisitor:
    """Walks a crate's syntax trees depth-first and builds the module tree.

    Out-of-line modules are parsed when their ``mod`` declaration is reached,
    so ``Impl.order`` is the depth-first declaration order across files.
    """

    def __init__(self, crate_name: str, *, skip_doc_hidden: bool = True) -> None:
        """Initialize the visitor for a crate."""
        self.crate_root = QualifiedPath.of(crate_name)
        self.skip_doc_hidden = skip_doc_hidden
        self.impls: list[Impl] = []
        self.default_impls: list[DefaultImpl] = []
        self.hidden_paths: set[QualifiedPath] = set()

    def visit_source(self, text: str, file: Path | None = None) -> CrateTree:
        """Parse and visit the crate root source."""
        tree = parse_source(text, str(file) if file else None)
        root = Module(
            ident=self.crate_root.name() or "",
            path=self.crate_root,
            visibility=Visibility.PUBLIC,
            attrs=Attributes(),
            is_crate_root=True,
            file=file,
        )
        child_dir = file.parent if file is not None else None
        self.visit_container(tree.root_node, root, file, child_dir)
        return CrateTree(root, self.impls, self.default_impls, self.hidden_paths)

    def visit_container(self, container: Any, module: Module, file: Path | None, child_dir: Path | None) -> None:
        """Visit the items of a source file or a module body."""
        module.attrs.extend(extract_attributes(container.children, inner=True).attrs)
        pending: list[Any] = []
        for child in container.children:
            if child.type in PREFIX_NODES:
                pending.append(child)
                continue
            if not child.is_named or child.type == "inner_attribute_item":
                continue
            extracted = extract_attributes(pending)
            pending = []
            self.visit_item(child, extracted, module, file, child_dir)

    def is_skipped(self, extracted: ExtractedAttributes, path: QualifiedPath | None = None) -> bool:
        if self.skip_doc_hidden and extracted.hidden:
            if path is not None:
                self.hidden_paths.add(path)
            logger.debug("Skipping hidden item %s", path)
            return True
        return False

    def visit_item(
        self,
        node: Any,
        extracted: ExtractedAttributes,
        module: Module,
        file: Path | None,
        child_dir: Path | None,
    ) -> None:
        """Dispatch one item node to its handler."""
        kind = node.type
        if kind == "use_declaration":
            self.visit_use(node, module)
            return
        if kind == "impl_item":
            if not self.is_skipped(extracted):
                self.visit_impl(node, extracted, module, file)
            return
        if kind == "foreign_mod_item":
            self.visit_foreign_mod(node, module)
            return

        ident = name_of(node)
        if ident is None:
            # macro invocations and other unnamed items are not expanded
            return
        path = module.path.push(ident)
        if self.is_skipped(extracted, path):
            return
        visibility = visibility_of(node)
        attrs = extracted.attrs

        if kind == "mod_item":
            self.visit_mod(node, extracted, module, path, file, child_dir)
        elif kind in ("struct_item", "union_item"):
            fields, tuple_like = field_list(node.child_by_field_name("body"), self.skip_doc_hidden)
            module.items.append(Struct(ident, path, visibility, attrs, fields, tuple_like))
        elif kind == "enum_item":
            module.items.append(EnumDef(ident, path, visibility, attrs, self.variants(node)))
        elif kind in FUNCTION_NODES:
            module.items.append(Function(ident, path, visibility, attrs, function_sig(node, FnKind.FREE_FN)))
        elif kind == "const_item":
            module.items.append(
                Constant(
                    ident,
                    path,
                    visibility,
                    attrs,
                    pretty(node.child_by_field_name("type")),
                    pretty(node.child_by_field_name("value")),
                )
            )
        elif kind == "trait_item":
            self.visit_trait(node, module, ident, path, visibility, attrs)
        elif kind == "macro_definition":
            module.items.append(MacroDef(ident, path, visibility, attrs, f"macro_rules! {ident}"))

    def visit_mod(
        self,
        node: Any,
        extracted: ExtractedAttributes,
        module: Module,
        path: QualifiedPath,
        file: Path | None,
        child_dir: Path | None,
    ) -> None:
        ident = path.name() or ""
        submodule = Module(ident, path, visibility_of(node), extracted.attrs, file=file)
        module.items.append(submodule)
        body = node.child_by_field_name("body")
        if body is not None:
            inline_dir = child_dir / ident if child_dir is not None else None
            self.visit_container(body, submodule, file, inline_dir)
            return
        if file is None or child_dir is None:
            logger.warning("Cannot load out-of-line module %s without a source file", path)
            return
        module_file = find_module_file(child_dir, file, ident, extracted.path_override)
        if module_file is None:
            return
        submodule.file = module_file
        logger.debug("Loading module %s from %s", path, module_file)
        tree = parse_source(read_source(module_file), str(module_file))
        self.visit_container(tree.root_node, submodule, module_file, child_dir_for(module_file))

    def visit_use(self, node: Any, module: Module) -> None:
        module.items.append(Import(pretty(node), visibility_of(node)))
        argument = node.child_by_field_name("argument")
        if argument is None:
            return
        for ident, segments in collect_use_bindings(argument):
            for candidate in absolute_candidates(segments, module.path, self.crate_root):
                module.bind(ident, candidate)

    def variants(self, node: Any) -> list[Variant]:
        result: list[Variant] = []
        body = node.child_by_field_name("body")
        if body is None:
            return result
        pending: list[Any] = []
        for child in body.children:
            if child.type in PREFIX_NODES:
                pending.append(child)
            elif child.type == "enum_variant":
                extracted = extract_attributes(pending)
                pending = []
                if self.skip_doc_hidden and extracted.hidden:
                    continue
                data = pretty(child.child_by_field_name("body"))
                value = child.child_by_field_name("value")
                if value is not None:
                    data = f"{data} = {pretty(value)}".strip()
                result.append(Variant(name_of(child) or "", data, extracted.attrs))
        return result

    def assoc_items(self, body: Any | None, method_kind: FnKind) -> list[AssocItem]:
        """Collect the items of a trait or impl body."""
        items: list[AssocItem] = []
        if body is None:
            return items
        pending: list[Any] = []
        for child in body.children:
            if child.type in PREFIX_NODES:
                pending.append(child)
                continue
            if not child.is_named:
                continue
            extracted = extract_attributes(pending)
            pending = []
            if self.skip_doc_hidden and extracted.hidden:
                continue
            item = self.assoc_item(child, method_kind)
            if item is not None:
                item.attrs = extracted.attrs
                items.append(item)
        return items

    def assoc_item(self, node: Any, method_kind: FnKind) -> AssocItem | None:
        kind = node.type
        visibility = visibility_of(node)
        if kind in FUNCTION_NODES:
            return AssocItem(
                name_of(node) or "",
                AssocKind.METHOD,
                visibility,
                function=function_sig(node, method_kind),
            )
        if kind == "const_item":
            value = node.child_by_field_name("value")
            return AssocItem(
                name_of(node) or "",
                AssocKind.CONST,
                visibility,
                type_text=pretty(node.child_by_field_name("type")),
                expr_text=pretty(value) if value is not None else None,
            )
        if kind == "associated_type":
            bounds = node.child_by_field_name("bounds")
            bound_text = pretty(bounds).lstrip(":").strip() if bounds is not None else None
            return AssocItem(name_of(node) or "", AssocKind.TYPE, visibility, type_text=bound_text or None)
        if kind == "type_item":
            return AssocItem(
                name_of(node) or "",
                AssocKind.TYPE,
                visibility,
                type_text=pretty(node.child_by_field_name("type")),
            )
        if kind == "macro_invocation":
            macro = node.child_by_field_name("macro")
            return AssocItem(pretty(macro) or "macro", AssocKind.MACRO, visibility, macro_text=pretty(node))
        return None

    def visit_trait(
        self,
        node: Any,
        module: Module,
        ident: str,
        path: QualifiedPath,
        visibility: Visibility,
        attrs: Attributes,
    ) -> None:
        unsafety = Unsafety.UNSAFE if has_token(node, "unsafe") else Unsafety.NORMAL
        items = self.assoc_items(node.child_by_field_name("body"), FnKind.TRAIT_METHOD)
        module.items.append(Trait(ident, path, visibility, attrs, unsafety, items))
        if has_token(node, "auto"):
            default_impl = DefaultImpl(module.path, ident, unsafety)
            module.items.append(default_impl)
            self.default_impls.append(default_impl)

    def visit_impl(self, node: Any, extracted: ExtractedAttributes, module: Module, file: Path | None) -> None:
        trait = node.child_by_field_name("trait")
        trait_text = None
        if trait is not None:
            trait_text = ("!" if has_token(node, "!") else "") + pretty(trait)
        impl = Impl(
            module_path=module.path,
            target_type_text=pretty(node.child_by_field_name("type")),
            trait_ref_text=trait_text,
            unsafety=Unsafety.UNSAFE if has_token(node, "unsafe") else Unsafety.NORMAL,
            items=self.assoc_items(
                node.child_by_field_name("body"),
                FnKind.TRAIT_METHOD if trait is not None else FnKind.INHERENT_METHOD,
            ),
            attrs=extracted.attrs,
            file=file,
            start_byte=node.start_byte,
            order=len(self.impls),
        )
        module.items.append(impl)
        self.impls.append(impl)

    def visit_foreign_mod(self, node: Any, module: Module) -> None:
        """Record the functions declared in an ``extern "abi" { ... }`` block."""
        modifier = child_of_type(node, "extern_modifier")
        abi = abi_of(modifier) if modifier is not None else Abi.C
        body = node.child_by_field_name("body")
        if body is None:
            return
        pending: list[Any] = []
        for child in body.children:
            if child.type in PREFIX_NODES:
                pending.append(child)
                continue
            if child.type not in FUNCTION_NODES:
                pending = []
                continue
            extracted = extract_attributes(pending)
            pending = []
            ident = name_of(child)
            if ident is None:
                continue
            path = module.path.push(ident)
            if self.is_skipped(extracted, path):
                continue
            module.items.append(
                Function(ident, path, visibility_of(child), extracted.attrs, function_sig(child, FnKind.FREE_FN, abi))
            )


def build_crate_tree(
    text: str, crate_name: str, file: Path | None = None, *, skip_doc_hidden: bool = True
) -> CrateTree:
    """Parse a crate root source and return its semantic tree."""
    return CrateVisitor(crate_name, skip_doc_hidden=skip_doc_hidden).visit_source(text, file)
