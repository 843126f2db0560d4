"""Logic for laying out a documentation record as a terminal page."""

import re

from oxidoc.doc_kind import LINK_CATEGORIES, DocKind
from oxidoc.documentation import Documentation, ModuleData
from oxidoc.markdown_renderer import BOLD, DIM, RenderOptions, render, style

TRAIT_ITEM_KINDS = (
    DocKind.TRAIT_ITEM_CONST,
    DocKind.TRAIT_ITEM_METHOD,
    DocKind.TRAIT_ITEM_TYPE,
    DocKind.TRAIT_ITEM_MACRO,
)


def kind_title(kind: DocKind) -> str:
    """Return ``Struct Field`` for ``StructField`` and so on."""
    return re.sub(r"(?<=[a-z])(?=[A-Z])", " ", kind.value)


def context_line(doc: Documentation) -> str | None:
    """Describe where the item was declared."""
    parent = doc.mod_path.parent()
    if doc.impl_context is not None:
        target = doc.impl_context.target_type_text
        if doc.impl_context.trait_ref_text:
            return f"From trait {doc.impl_context.trait_ref_text} on type {target}"
        return f"Impl on type {target}"
    if parent is None or (isinstance(doc.inner, ModuleData) and doc.inner.is_crate_root):
        return None
    if doc.kind in TRAIT_ITEM_KINDS:
        return f"From trait {parent}"
    if doc.kind is DocKind.STRUCT_FIELD:
        return f"In struct {parent}"
    if doc.kind is DocKind.VARIANT:
        return f"In enum {parent}"
    return f"In module {parent}"


def link_kinds(doc: Documentation) -> list[DocKind]:
    """Link categories to show, the usual ones first."""
    ordered = [k for k in LINK_CATEGORIES.get(doc.kind, []) if doc.links.get(k)]
    ordered += [k for k in doc.links if doc.links[k] and k not in ordered]
    return ordered


def format_documentation(doc: Documentation, width: int, options: RenderOptions | None = None) -> str:
    """Build the display page of one record."""
    options = options or RenderOptions()
    width = max(width, 20)
    rule = style("─" * width, DIM, options) if options.color else "-" * width
    lines = [
        style(f"crate {doc.crate_info.name} {doc.crate_info.version}", DIM, options),
        style(f"{kind_title(doc.kind)} {doc.mod_path}", BOLD, options),
    ]
    context = context_line(doc)
    if context:
        lines.append(context)
    lines += [rule, doc.signature(), rule, ""]

    body = doc.attrs.text().strip()
    if body:
        lines.append(render(body, width, options))
    else:
        lines.append(style("No documentation.", DIM, options))

    for kind in link_kinds(doc):
        lines += ["", style(kind.label, BOLD, options)]
        lines += [f"  {link.name}" for link in doc.links[kind]]
    return "\n".join(lines) + "\n"
