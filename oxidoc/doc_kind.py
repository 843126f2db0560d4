"""Kinds of documentation records and link categories."""

from enum import Enum


class DocKind(Enum):
    """What a record documents; also the category of a link."""

    FUNCTION = "Function"
    MODULE = "Module"
    ENUM = "Enum"
    VARIANT = "Variant"
    STRUCT = "Struct"
    STRUCT_FIELD = "StructField"
    CONSTANT = "Constant"
    TRAIT = "Trait"
    ASSOC_CONST = "AssocConst"
    TRAIT_ITEM_CONST = "TraitItemConst"
    TRAIT_ITEM_METHOD = "TraitItemMethod"
    TRAIT_ITEM_TYPE = "TraitItemType"
    TRAIT_ITEM_MACRO = "TraitItemMacro"
    ASSOC_TYPE = "AssocType"
    MACRO = "Macro"

    @property
    def file_prefix(self) -> str:
        """File name prefix that, with the module path, addresses a record."""
        return FILE_PREFIXES[self]

    @property
    def label(self) -> str:
        """Plural heading used when listing links of this kind."""
        return LABELS[self]


FILE_PREFIXES: dict[DocKind, str] = {
    DocKind.FUNCTION: "",
    DocKind.MODULE: "mdesc-",
    DocKind.ENUM: "edesc-",
    DocKind.VARIANT: "vdesc-",
    DocKind.STRUCT: "sdesc-",
    DocKind.STRUCT_FIELD: "sfdesc-",
    DocKind.CONSTANT: "cdesc-",
    DocKind.TRAIT: "tdesc-",
    DocKind.ASSOC_CONST: "acdesc-",
    DocKind.TRAIT_ITEM_CONST: "tcdesc-",
    DocKind.TRAIT_ITEM_METHOD: "tmcdesc-",
    DocKind.TRAIT_ITEM_TYPE: "ttcdesc-",
    DocKind.TRAIT_ITEM_MACRO: "tmdesc-",
    DocKind.ASSOC_TYPE: "atdesc-",
    DocKind.MACRO: "macdesc-",
}

LABELS: dict[DocKind, str] = {
    DocKind.FUNCTION: "Functions",
    DocKind.MODULE: "Modules",
    DocKind.ENUM: "Enums",
    DocKind.VARIANT: "Variants",
    DocKind.STRUCT: "Structs",
    DocKind.STRUCT_FIELD: "Struct Fields",
    DocKind.CONSTANT: "Constants",
    DocKind.TRAIT: "Traits",
    DocKind.ASSOC_CONST: "Associated Constants",
    DocKind.TRAIT_ITEM_CONST: "Associated Constants",
    DocKind.TRAIT_ITEM_METHOD: "Trait Methods",
    DocKind.TRAIT_ITEM_TYPE: "Associated Types",
    DocKind.TRAIT_ITEM_MACRO: "Macros",
    DocKind.ASSOC_TYPE: "Associated Types",
    DocKind.MACRO: "Macros",
}

# Link categories shown on a record, per record kind, in display order.
LINK_CATEGORIES: dict[DocKind, list[DocKind]] = {
    DocKind.MODULE: [
        DocKind.FUNCTION,
        DocKind.MODULE,
        DocKind.ENUM,
        DocKind.STRUCT,
        DocKind.TRAIT,
        DocKind.CONSTANT,
        DocKind.MACRO,
    ],
    DocKind.TRAIT: [
        DocKind.TRAIT_ITEM_CONST,
        DocKind.TRAIT_ITEM_METHOD,
        DocKind.TRAIT_ITEM_TYPE,
        DocKind.TRAIT_ITEM_MACRO,
        DocKind.FUNCTION,
    ],
    DocKind.STRUCT: [
        DocKind.STRUCT_FIELD,
        DocKind.FUNCTION,
        DocKind.ASSOC_CONST,
        DocKind.ASSOC_TYPE,
        DocKind.MACRO,
    ],
    DocKind.ENUM: [
        DocKind.VARIANT,
        DocKind.FUNCTION,
        DocKind.ASSOC_CONST,
        DocKind.ASSOC_TYPE,
        DocKind.MACRO,
    ],
}
