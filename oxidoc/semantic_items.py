"""Data models for the semantic item tree built from a crate's syntax tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from oxidoc.attributes import Attributes
from oxidoc.qualified_path import QualifiedPath
from oxidoc.visibility import Visibility

GLOB_KEY = "*"


class Unsafety(Enum):
    NORMAL = "Normal"
    UNSAFE = "Unsafe"


class Constness(Enum):
    NOT_CONST = "NotConst"
    CONST = "Const"


class Abi(Enum):
    """Calling conventions a function can be declared with."""

    CDECL = "cdecl"
    STDCALL = "stdcall"
    FASTCALL = "fastcall"
    VECTORCALL = "vectorcall"
    AAPCS = "aapcs"
    WIN64 = "win64"
    SYSV64 = "sysv64"
    PTX_KERNEL = "ptx-kernel"
    MSP430_INTERRUPT = "msp430-interrupt"
    X86_INTERRUPT = "x86-interrupt"
    RUST = "Rust"
    C = "C"
    SYSTEM = "system"
    RUST_INTRINSIC = "rust-intrinsic"
    RUST_CALL = "rust-call"
    PLATFORM_INTRINSIC = "platform-intrinsic"
    UNADJUSTED = "unadjusted"

    @classmethod
    def from_name(cls, name: str | None) -> Abi:
        """Map the string of an ``extern "..."`` qualifier; bare ``extern`` is C."""
        if name is None:
            return cls.C
        for abi in cls:
            if abi.value == name:
                return abi
        return cls.C


class FnKind(Enum):
    FREE_FN = "FreeFn"
    INHERENT_METHOD = "InherentMethod"
    TRAIT_METHOD = "TraitMethod"


class AssocKind(Enum):
    """Kind of an item inside a trait or impl block."""

    CONST = "Const"
    METHOD = "Method"
    TYPE = "Type"
    MACRO = "Macro"


@dataclass
class FunctionSig:
    """Pretty-printed signature and qualifiers of a function."""

    signature: str
    unsafety: Unsafety = Unsafety.NORMAL
    constness: Constness = Constness.NOT_CONST
    abi: Abi = Abi.RUST
    kind: FnKind = FnKind.FREE_FN


@dataclass
class StructField:
    ident: str | None
    visibility: Visibility
    type_text: str
    attrs: Attributes = field(default_factory=Attributes)


@dataclass
class Variant:
    ident: str
    data_text: str
    attrs: Attributes = field(default_factory=Attributes)


@dataclass
class AssocItem:
    """An associated item of a trait or of an impl block.

    Which text fields are set depends on ``kind``: constants carry
    ``type_text`` and optionally ``expr_text``; methods carry ``function``;
    types carry ``type_text`` (the bound in a trait, the definition in an
    impl); macros carry ``macro_text``.
    """

    ident: str
    kind: AssocKind
    visibility: Visibility = Visibility.INHERITED
    attrs: Attributes = field(default_factory=Attributes)
    type_text: str | None = None
    expr_text: str | None = None
    function: FunctionSig | None = None
    macro_text: str | None = None


@dataclass
class Item:
    """Fields shared by every named semantic item."""

    ident: str
    path: QualifiedPath
    visibility: Visibility
    attrs: Attributes


@dataclass
class Struct(Item):
    fields: list[StructField] = field(default_factory=list)
    tuple_like: bool = False


@dataclass
class EnumDef(Item):
    variants: list[Variant] = field(default_factory=list)


@dataclass
class Function(Item):
    function: FunctionSig = field(default_factory=lambda: FunctionSig(signature="fn()"))


@dataclass
class Constant(Item):
    type_text: str = ""
    expr_text: str = ""


@dataclass
class Trait(Item):
    unsafety: Unsafety = Unsafety.NORMAL
    items: list[AssocItem] = field(default_factory=list)


@dataclass
class MacroDef(Item):
    text: str = ""


@dataclass
class Impl:
    """An ``impl`` block, resolved to its target type after the visit."""

    module_path: QualifiedPath
    target_type_text: str
    trait_ref_text: str | None = None
    unsafety: Unsafety = Unsafety.NORMAL
    items: list[AssocItem] = field(default_factory=list)
    attrs: Attributes = field(default_factory=Attributes)
    file: Path | None = None
    start_byte: int = 0
    order: int = 0
    target_path: QualifiedPath | None = None
    resolved: bool = False


@dataclass
class DefaultImpl:
    """An ``auto trait`` declaration, the implicit blanket impl of a trait."""

    module_path: QualifiedPath
    trait_ref_text: str
    unsafety: Unsafety = Unsafety.NORMAL


@dataclass
class Import:
    """A ``use`` declaration, kept verbatim."""

    text: str
    visibility: Visibility


@dataclass
class Module(Item):
    is_crate_root: bool = False
    items: list[SemanticItem] = field(default_factory=list)
    use_table: dict[str, list[QualifiedPath]] = field(default_factory=dict)
    file: Path | None = None

    def children(self, kind: type) -> list:
        """Return the direct children of one type, in declaration order."""
        return [item for item in self.items if isinstance(item, kind)]

    def bind(self, ident: str, target: QualifiedPath) -> None:
        """Record a use binding, keeping candidates unique and ordered."""
        candidates = self.use_table.setdefault(ident, [])
        if target not in candidates:
            candidates.append(target)


SemanticItem = Module | Struct | EnumDef | Function | Constant | Trait | Impl | DefaultImpl | Import | MacroDef
