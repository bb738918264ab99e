"""The item envelope and the crate document that owns every item."""

from __future__ import annotations

import enum
from typing import Annotated, Literal

from pydantic import Field, StrictBool, StrictInt, StrictStr

from .base import Id, RustdocModel
from .decls import ItemEnum, MacroKind

# The only rustdoc JSON format version this package understands
FORMAT_VERSION = 17


class ItemKind(str, enum.Enum):
    MODULE = "module"
    EXTERN_CRATE = "extern_crate"
    IMPORT = "import"
    STRUCT = "struct"
    STRUCT_FIELD = "struct_field"
    UNION = "union"
    ENUM = "enum"
    VARIANT = "variant"
    FUNCTION = "function"
    TYPEDEF = "typedef"
    OPAQUE_TY = "opaque_ty"
    CONSTANT = "constant"
    TRAIT = "trait"
    TRAIT_ALIAS = "trait_alias"
    METHOD = "method"
    IMPL = "impl"
    STATIC = "static"
    FOREIGN_TYPE = "foreign_type"
    MACRO = "macro"
    PROC_ATTRIBUTE = "proc_attribute"
    PROC_DERIVE = "proc_derive"
    ASSOC_CONST = "assoc_const"
    ASSOC_TYPE = "assoc_type"
    PRIMITIVE = "primitive"
    KEYWORD = "keyword"


KIND_BY_TAG: dict[str, ItemKind] = {
    "Module": ItemKind.MODULE,
    "ExternCrate": ItemKind.EXTERN_CRATE,
    "Import": ItemKind.IMPORT,
    "Union": ItemKind.UNION,
    "Struct": ItemKind.STRUCT,
    "StructField": ItemKind.STRUCT_FIELD,
    "Enum": ItemKind.ENUM,
    "Variant": ItemKind.VARIANT,
    "Function": ItemKind.FUNCTION,
    "Trait": ItemKind.TRAIT,
    "TraitAlias": ItemKind.TRAIT_ALIAS,
    "Method": ItemKind.METHOD,
    "Impl": ItemKind.IMPL,
    "Typedef": ItemKind.TYPEDEF,
    "OpaqueTy": ItemKind.OPAQUE_TY,
    "Constant": ItemKind.CONSTANT,
    "Static": ItemKind.STATIC,
    "ForeignType": ItemKind.FOREIGN_TYPE,
    "Macro": ItemKind.MACRO,
    "PrimitiveType": ItemKind.PRIMITIVE,
    "AssocConst": ItemKind.ASSOC_CONST,
    "AssocType": ItemKind.ASSOC_TYPE,
}

PROC_MACRO_KINDS: dict[MacroKind, ItemKind] = {
    MacroKind.BANG: ItemKind.MACRO,
    MacroKind.ATTR: ItemKind.PROC_ATTRIBUTE,
    MacroKind.DERIVE: ItemKind.PROC_DERIVE,
}


class Span(RustdocModel):
    # Relative to the directory rustdoc was invoked from
    filename: StrictStr
    # Zero-indexed (line, column) of the first and last characters
    begin: tuple[StrictInt, StrictInt]
    end: tuple[StrictInt, StrictInt]


class Deprecation(RustdocModel):
    since: StrictStr | None = None
    note: StrictStr | None = None


class PublicVisibility(RustdocModel):
    tag: Literal["Public"] = "Public"


class DefaultVisibility(RustdocModel):
    """Private by default, except associated items of public traits and
    variants of public enums."""

    tag: Literal["Default"] = "Default"


class CrateVisibility(RustdocModel):
    tag: Literal["Crate"] = "Crate"


class RestrictedVisibility(RustdocModel):
    """`pub(in path)`: `parent` is the module, `path` how it was written."""

    tag: Literal["Restricted"] = "Restricted"
    parent: Id
    path: StrictStr

    id_fields = ("parent",)


Visibility = Annotated[
    PublicVisibility | DefaultVisibility | CrateVisibility | RestrictedVisibility,
    Field(discriminator="tag"),
]


class ExternalCrate(RustdocModel):
    name: StrictStr
    html_root_url: StrictStr | None = None


class ItemSummary(RustdocModel):
    """Enough to name or link to an item that has no full entry in `index`."""

    crate_id: StrictInt
    # Fully qualified path components
    path: tuple[StrictStr, ...]
    kind: ItemKind


class Item(RustdocModel):
    id: Id
    crate_id: StrictInt
    # Absent for impls and other anonymous items
    name: StrictStr | None = None
    # Absent for macro expansions and foreign-origin items
    span: Span | None = None
    visibility: Visibility
    # Raw markdown; an empty string is not the same as no docs
    docs: StrictStr | None = None
    # Intra-doc link text -> target id
    links: dict[StrictStr, Id]
    # Stringified attributes, e.g. "#[inline]"
    attrs: tuple[StrictStr, ...]
    deprecation: Deprecation | None = None
    inner: ItemEnum

    id_fields = ("links",)

    @property
    def kind(self) -> ItemKind:
        """The summary kind this item's payload corresponds to."""
        if self.inner.tag == "ProcMacro":
            return PROC_MACRO_KINDS[self.inner.kind]
        return KIND_BY_TAG[self.inner.tag]


class Crate(RustdocModel):
    """Root of a rustdoc JSON document.

    `index` holds every local item plus the external items referenced
    locally; `paths` holds a summary for ids that may lack a full item.
    """

    root: Id
    # Value of `--crate-version`, if given
    crate_version: StrictStr | None = None
    includes_private: StrictBool
    index: dict[Id, Item]
    paths: dict[Id, ItemSummary]
    external_crates: dict[int, ExternalCrate]
    format_version: StrictInt
