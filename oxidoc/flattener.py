"""Logic for projecting a resolved semantic tree onto flat documentation records."""

import logging

from oxidoc.attributes import Attributes
from oxidoc.crate_info import CrateInfo
from oxidoc.doc_kind import DocKind
from oxidoc.documentation import (
    ConstantData,
    Documentation,
    EnumData,
    FieldData,
    ImplContext,
    MacroData,
    ModuleData,
    Payload,
    StructData,
    TraitData,
    TypeData,
    VariantData,
)
from oxidoc.qualified_path import QualifiedPath
from oxidoc.semantic_items import (
    AssocItem,
    AssocKind,
    Constant,
    EnumDef,
    Function,
    Impl,
    MacroDef,
    Module,
    Struct,
    Trait,
)
from oxidoc.visibility import Visibility
from oxidoc.visitor import CrateTree

logger = logging.getLogger(__name__)

TRAIT_ITEM_KINDS = {
    AssocKind.CONST: DocKind.TRAIT_ITEM_CONST,
    AssocKind.METHOD: DocKind.TRAIT_ITEM_METHOD,
    AssocKind.TYPE: DocKind.TRAIT_ITEM_TYPE,
    AssocKind.MACRO: DocKind.TRAIT_ITEM_MACRO,
}
IMPL_ITEM_KINDS = {
    AssocKind.CONST: DocKind.ASSOC_CONST,
    AssocKind.METHOD: DocKind.FUNCTION,
    AssocKind.TYPE: DocKind.ASSOC_TYPE,
    AssocKind.MACRO: DocKind.MACRO,
}
MODULE_CHILD_KINDS: list[tuple[type, DocKind]] = [
    (Function, DocKind.FUNCTION),
    (Module, DocKind.MODULE),
    (EnumDef, DocKind.ENUM),
    (Struct, DocKind.STRUCT),
    (Trait, DocKind.TRAIT),
    (Constant, DocKind.CONSTANT),
    (MacroDef, DocKind.MACRO),
]


def assoc_payload(item: AssocItem) -> Payload:
    """Return the record payload of a trait or impl item."""
    if item.kind is AssocKind.METHOD and item.function is not None:
        return item.function
    if item.kind is AssocKind.CONST:
        return ConstantData(item.type_text or "", item.expr_text)
    if item.kind is AssocKind.TYPE:
        return TypeData(item.type_text)
    return MacroData(item.macro_text or item.ident)


class Flattener:
    """Turns one crate's module tree and resolved impls into records.

    Records are produced depth first: a module, then its children in
    declaration order. Impl items follow, in impl order, attached to the
    record of their resolved target.
    """

    def __init__(self, tree: CrateTree, impls: list[Impl], crate_info: CrateInfo) -> None:
        """Initialize the flattener for one indexing run."""
        self.tree = tree
        self.impls = impls
        self.crate_info = crate_info
        self.records: list[Documentation] = []
        self.types: dict[QualifiedPath, Documentation] = {}

    def flatten(self) -> list[Documentation]:
        """Return every record of the crate."""
        self.records = []
        self.types = {}
        self.flatten_module(self.tree.root)
        for impl in self.impls:
            self.flatten_impl(impl)
        logger.info("Flattened %d records for %s", len(self.records), self.crate_info)
        return self.records

    def emit(
        self,
        name: str,
        kind: DocKind,
        path: QualifiedPath,
        visibility: Visibility,
        attrs: Attributes,
        inner: Payload,
        impl_context: ImplContext | None = None,
    ) -> Documentation:
        doc = Documentation(
            name=name,
            kind=kind,
            crate_info=self.crate_info,
            mod_path=path,
            visibility=visibility,
            attrs=attrs,
            inner=inner,
            impl_context=impl_context,
        )
        self.records.append(doc)
        return doc

    def flatten_module(self, module: Module) -> None:
        doc = self.emit(
            module.ident,
            DocKind.MODULE,
            module.path,
            module.visibility,
            module.attrs,
            ModuleData(module.is_crate_root),
        )
        for item_type, kind in MODULE_CHILD_KINDS:
            for child in module.children(item_type):
                doc.add_link(kind, child.ident, child.path)

        for child in module.items:
            if isinstance(child, Module):
                self.flatten_module(child)
            elif isinstance(child, Struct):
                self.flatten_struct(child)
            elif isinstance(child, EnumDef):
                self.flatten_enum(child)
            elif isinstance(child, Function):
                self.emit(child.ident, DocKind.FUNCTION, child.path, child.visibility, child.attrs, child.function)
            elif isinstance(child, Constant):
                self.emit(
                    child.ident,
                    DocKind.CONSTANT,
                    child.path,
                    child.visibility,
                    child.attrs,
                    ConstantData(child.type_text, child.expr_text),
                )
            elif isinstance(child, Trait):
                self.flatten_trait(child)
            elif isinstance(child, MacroDef):
                self.emit(child.ident, DocKind.MACRO, child.path, child.visibility, child.attrs, MacroData(child.text))

    def flatten_struct(self, struct: Struct) -> None:
        fields = [FieldData(f.ident, f.visibility, f.type_text, f.attrs.summary()) for f in struct.fields]
        doc = self.emit(
            struct.ident,
            DocKind.STRUCT,
            struct.path,
            struct.visibility,
            struct.attrs,
            StructData(fields, struct.tuple_like),
        )
        self.types[struct.path] = doc
        for f in struct.fields:
            if f.ident is None:
                continue
            path = struct.path.push(f.ident)
            doc.add_link(DocKind.STRUCT_FIELD, f.ident, path)
            self.emit(
                f.ident,
                DocKind.STRUCT_FIELD,
                path,
                f.visibility,
                f.attrs,
                FieldData(f.ident, f.visibility, f.type_text, f.attrs.summary()),
            )

    def flatten_enum(self, enum: EnumDef) -> None:
        variants = [VariantData(v.ident, v.data_text, v.attrs.summary()) for v in enum.variants]
        doc = self.emit(enum.ident, DocKind.ENUM, enum.path, enum.visibility, enum.attrs, EnumData(variants))
        self.types[enum.path] = doc
        for variant in enum.variants:
            path = enum.path.push(variant.ident)
            doc.add_link(DocKind.VARIANT, variant.ident, path)
            self.emit(
                variant.ident,
                DocKind.VARIANT,
                path,
                Visibility.INHERITED,
                variant.attrs,
                VariantData(variant.ident, variant.data_text, variant.attrs.summary()),
            )

    def flatten_trait(self, trait: Trait) -> None:
        doc = self.emit(
            trait.ident, DocKind.TRAIT, trait.path, trait.visibility, trait.attrs, TraitData(trait.unsafety)
        )
        self.types[trait.path] = doc
        for item in trait.items:
            kind = TRAIT_ITEM_KINDS[item.kind]
            path = trait.path.push(item.ident)
            doc.add_link(kind, item.ident, path)
            self.emit(item.ident, kind, path, item.visibility, item.attrs, assoc_payload(item))

    def flatten_impl(self, impl: Impl) -> None:
        target = impl.target_path or impl.module_path
        target_doc = self.types.get(target)
        context = ImplContext(impl.target_type_text, impl.trait_ref_text, impl.unsafety)
        for item in impl.items:
            kind = IMPL_ITEM_KINDS[item.kind]
            path = target.push(item.ident)
            if target_doc is not None:
                target_doc.add_link(kind, item.ident, path)
            self.emit(item.ident, kind, path, item.visibility, item.attrs, assoc_payload(item), context)


def flatten(tree: CrateTree, impls: list[Impl], crate_info: CrateInfo) -> list[Documentation]:
    """Flatten a crate tree; see Flattener."""
    return Flattener(tree, impls, crate_info).flatten()
