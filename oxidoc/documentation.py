"""Data models for flat documentation records, the unit of persistence."""

from __future__ import annotations

from dataclasses import dataclass, field

from oxidoc.attributes import Attributes
from oxidoc.crate_info import CrateInfo
from oxidoc.doc_kind import DocKind
from oxidoc.qualified_path import QualifiedPath
from oxidoc.semantic_items import Abi, Constness, FunctionSig, Unsafety
from oxidoc.store_location import StoreLocation
from oxidoc.visibility import Visibility


@dataclass
class DocLink:
    """A named reference from one record to another."""

    name: str
    path: QualifiedPath


@dataclass
class ImplContext:
    """The impl block an associated item was declared in."""

    target_type_text: str
    trait_ref_text: str | None = None
    unsafety: Unsafety = Unsafety.NORMAL


@dataclass
class ModuleData:
    is_crate_root: bool = False


@dataclass
class FieldData:
    ident: str | None
    visibility: Visibility
    type_text: str
    summary: str = ""


@dataclass
class StructData:
    fields: list[FieldData] = field(default_factory=list)
    tuple_like: bool = False


@dataclass
class VariantData:
    ident: str
    data_text: str = ""
    summary: str = ""


@dataclass
class EnumData:
    variants: list[VariantData] = field(default_factory=list)


@dataclass
class ConstantData:
    type_text: str
    expr_text: str | None = None


@dataclass
class TraitData:
    unsafety: Unsafety = Unsafety.NORMAL


@dataclass
class TypeData:
    """An associated type: its bound in a trait, its definition in an impl."""

    type_text: str | None = None


@dataclass
class MacroData:
    text: str


Payload = (
    ModuleData
    | StructData
    | FieldData
    | EnumData
    | VariantData
    | FunctionSig
    | ConstantData
    | TraitData
    | TypeData
    | MacroData
)

PAYLOAD_TYPES: dict[DocKind, type] = {
    DocKind.MODULE: ModuleData,
    DocKind.STRUCT: StructData,
    DocKind.STRUCT_FIELD: FieldData,
    DocKind.ENUM: EnumData,
    DocKind.VARIANT: VariantData,
    DocKind.FUNCTION: FunctionSig,
    DocKind.TRAIT_ITEM_METHOD: FunctionSig,
    DocKind.CONSTANT: ConstantData,
    DocKind.ASSOC_CONST: ConstantData,
    DocKind.TRAIT_ITEM_CONST: ConstantData,
    DocKind.TRAIT: TraitData,
    DocKind.ASSOC_TYPE: TypeData,
    DocKind.TRAIT_ITEM_TYPE: TypeData,
    DocKind.MACRO: MacroData,
    DocKind.TRAIT_ITEM_MACRO: MacroData,
}


@dataclass
class Documentation:
    """One documented item, flattened out of the semantic tree."""

    name: str
    kind: DocKind
    crate_info: CrateInfo
    mod_path: QualifiedPath
    visibility: Visibility
    attrs: Attributes
    inner: Payload
    links: dict[DocKind, list[DocLink]] = field(default_factory=dict)
    impl_context: ImplContext | None = None

    def location(self, discriminator: str = "") -> StoreLocation:
        """Return the store address of this record."""
        return StoreLocation(self.crate_info, self.mod_path, self.name, self.kind, discriminator)

    def add_link(self, kind: DocKind, name: str, path: QualifiedPath) -> None:
        self.links.setdefault(kind, []).append(DocLink(name, path))

    def signature(self) -> str:
        """Render the declaration line shown above the doc text."""
        return render_signature(self)


def with_keyword(visibility: Visibility, text: str) -> str:
    keyword = visibility.keyword()
    return f"{keyword} {text}" if keyword else text


def render_function(sig: FunctionSig) -> str:
    """Render a function signature, adding qualifiers not already written."""
    text = sig.signature
    if text.startswith("fn ") or text.startswith("fn("):
        prefix = ""
        if sig.constness is Constness.CONST:
            prefix += "const "
        if sig.unsafety is Unsafety.UNSAFE:
            prefix += "unsafe "
        if sig.abi is not Abi.RUST:
            prefix += f'extern "{sig.abi.value}" '
        text = prefix + text
    return text


def render_signature(doc: Documentation) -> str:
    inner = doc.inner
    kind = doc.kind
    if kind is DocKind.MODULE:
        if isinstance(inner, ModuleData) and inner.is_crate_root:
            return f"crate {doc.name}"
        return with_keyword(doc.visibility, f"mod {doc.name}")
    if kind is DocKind.STRUCT and isinstance(inner, StructData):
        text = f"struct {doc.name}"
        if inner.tuple_like:
            text += "(" + ", ".join(with_keyword(f.visibility, f.type_text) for f in inner.fields) + ")"
        return with_keyword(doc.visibility, text)
    if kind is DocKind.ENUM:
        return with_keyword(doc.visibility, f"enum {doc.name}")
    if kind is DocKind.STRUCT_FIELD and isinstance(inner, FieldData):
        return with_keyword(doc.visibility, f"{doc.name}: {inner.type_text}")
    if kind is DocKind.VARIANT and isinstance(inner, VariantData):
        data = inner.data_text
        if not data:
            return doc.name
        separator = "" if data.startswith("(") else " "
        return f"{doc.name}{separator}{data}"
    if isinstance(inner, FunctionSig):
        return with_keyword(doc.visibility, render_function(inner))
    if isinstance(inner, ConstantData):
        text = f"const {doc.name}: {inner.type_text}"
        if inner.expr_text:
            text += f" = {inner.expr_text}"
        return with_keyword(doc.visibility, text)
    if kind is DocKind.TRAIT and isinstance(inner, TraitData):
        unsafe = "unsafe " if inner.unsafety is Unsafety.UNSAFE else ""
        return with_keyword(doc.visibility, f"{unsafe}trait {doc.name}")
    if isinstance(inner, TypeData):
        text = f"type {doc.name}"
        if inner.type_text:
            text += f": {inner.type_text}" if kind is DocKind.TRAIT_ITEM_TYPE else f" = {inner.type_text}"
        return with_keyword(doc.visibility, text)
    if isinstance(inner, MacroData):
        return inner.text
    return doc.name
