"""Declarations: generics, where-clauses and the per-kind item payloads.

Each payload carries exactly the fields rustdoc emits for that kind of item,
with its discriminant in `tag`. The `*_stripped` flags mean private members
exist but were left out of the document, so an empty `fields` or `variants`
list with the flag set is incomplete, not empty.
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal

from pydantic import Field, StrictBool, StrictStr

from .base import Id, RustdocModel
from .types import Constant, FnDecl, GenericBound, GenericParamDef, Header, Term, Type


class StructType(str, enum.Enum):
    PLAIN = "plain"
    TUPLE = "tuple"
    UNIT = "unit"


class MacroKind(str, enum.Enum):
    BANG = "bang"  # foo!()
    ATTR = "attr"  # #[foo]
    DERIVE = "derive"  # #[derive(Foo)]


class BoundPredicate(RustdocModel):
    """`where for<'a> &'a T: Iterator`"""

    tag: Literal["BoundPredicate"] = "BoundPredicate"
    type: Type
    bounds: tuple[GenericBound, ...]
    generic_params: tuple[GenericParamDef, ...]


class RegionPredicate(RustdocModel):
    """`where 'a: 'b`"""

    tag: Literal["RegionPredicate"] = "RegionPredicate"
    lifetime: StrictStr
    bounds: tuple[GenericBound, ...]


class EqPredicate(RustdocModel):
    """`where T::Item = u8`"""

    tag: Literal["EqPredicate"] = "EqPredicate"
    lhs: Type
    rhs: Term


WherePredicate = Annotated[
    BoundPredicate | RegionPredicate | EqPredicate,
    Field(discriminator="tag"),
]


class Generics(RustdocModel):
    params: tuple[GenericParamDef, ...]
    where_predicates: tuple[WherePredicate, ...]


# -- item payloads -----------------------------------------------------------


class Module(RustdocModel):
    tag: Literal["Module"] = "Module"
    is_crate: StrictBool
    items: tuple[Id, ...]
    # Not public API itself, but holds items re-exported as public
    is_stripped: StrictBool

    id_fields = ("items",)


class ExternCrate(RustdocModel):
    tag: Literal["ExternCrate"] = "ExternCrate"
    name: StrictStr
    rename: StrictStr | None = None


class Import(RustdocModel):
    """A `use` declaration."""

    tag: Literal["Import"] = "Import"
    # Full path being imported
    source: StrictStr
    # Differs from the last segment of `source` for `use source as name;`
    name: StrictStr
    # Absent for re-exports of primitives, e.g. `pub use i32 as my_i32`
    id: Id | None = None
    glob: StrictBool

    id_fields = ("id",)


class Union(RustdocModel):
    tag: Literal["Union"] = "Union"
    generics: Generics
    fields_stripped: StrictBool
    fields: tuple[Id, ...]
    impls: tuple[Id, ...]

    id_fields = ("fields", "impls")


class Struct(RustdocModel):
    tag: Literal["Struct"] = "Struct"
    struct_type: StructType
    generics: Generics
    fields_stripped: StrictBool
    fields: tuple[Id, ...]
    impls: tuple[Id, ...]

    id_fields = ("fields", "impls")


class StructField(RustdocModel):
    tag: Literal["StructField"] = "StructField"
    val: Type


class Enum(RustdocModel):
    tag: Literal["Enum"] = "Enum"
    generics: Generics
    variants_stripped: StrictBool
    variants: tuple[Id, ...]
    impls: tuple[Id, ...]

    id_fields = ("variants", "impls")


class PlainVariant(RustdocModel):
    tag: Literal["Plain"] = "Plain"


class TupleVariant(RustdocModel):
    tag: Literal["Tuple"] = "Tuple"
    val: tuple[Type, ...]


class StructVariant(RustdocModel):
    tag: Literal["Struct"] = "Struct"
    val: tuple[Id, ...]

    id_fields = ("val",)


class Variant(RustdocModel):
    tag: Literal["Variant"] = "Variant"
    val: Annotated[PlainVariant | TupleVariant | StructVariant, Field(discriminator="tag")]


class Function(RustdocModel):
    tag: Literal["Function"] = "Function"
    decl: FnDecl
    generics: Generics
    header: Header


class Trait(RustdocModel):
    tag: Literal["Trait"] = "Trait"
    is_auto: StrictBool
    is_unsafe: StrictBool
    items: tuple[Id, ...]
    generics: Generics
    bounds: tuple[GenericBound, ...]
    implementations: tuple[Id, ...]

    id_fields = ("items", "implementations")


class TraitAlias(RustdocModel):
    tag: Literal["TraitAlias"] = "TraitAlias"
    generics: Generics
    params: tuple[GenericBound, ...]


class Method(RustdocModel):
    tag: Literal["Method"] = "Method"
    decl: FnDecl
    generics: Generics
    header: Header
    has_body: StrictBool


class Impl(RustdocModel):
    tag: Literal["Impl"] = "Impl"
    is_unsafe: StrictBool
    generics: Generics
    provided_trait_methods: frozenset[StrictStr]
    trait: Type | None = None
    for_: Type = Field(alias="for")
    items: tuple[Id, ...]
    negative: StrictBool
    synthetic: StrictBool
    blanket_impl: Type | None = None

    id_fields = ("items",)


class Typedef(RustdocModel):
    tag: Literal["Typedef"] = "Typedef"
    type: Type
    generics: Generics


class OpaqueTy(RustdocModel):
    tag: Literal["OpaqueTy"] = "OpaqueTy"
    bounds: tuple[GenericBound, ...]
    generics: Generics


class ConstantItem(RustdocModel):
    tag: Literal["Constant"] = "Constant"
    val: Constant


class Static(RustdocModel):
    tag: Literal["Static"] = "Static"
    type: Type
    mutable: StrictBool
    expr: StrictStr


class ForeignType(RustdocModel):
    """A `type` declared in an `extern` block."""

    tag: Literal["ForeignType"] = "ForeignType"


class Macro(RustdocModel):
    """A `macro_rules!` macro; `val` is its rendered definition."""

    tag: Literal["Macro"] = "Macro"
    val: StrictStr


class ProcMacro(RustdocModel):
    tag: Literal["ProcMacro"] = "ProcMacro"
    kind: MacroKind
    helpers: tuple[StrictStr, ...]


class PrimitiveType(RustdocModel):
    tag: Literal["PrimitiveType"] = "PrimitiveType"
    val: StrictStr


class AssocConst(RustdocModel):
    """`const X: usize = 5;` inside a trait or impl."""

    tag: Literal["AssocConst"] = "AssocConst"
    type: Type
    default: StrictStr | None = None


class AssocType(RustdocModel):
    """`type X: Bound = Default;` inside a trait or impl."""

    tag: Literal["AssocType"] = "AssocType"
    generics: Generics
    bounds: tuple[GenericBound, ...]
    default: Type | None = None


ItemEnum = Annotated[
    Module
    | ExternCrate
    | Import
    | Union
    | Struct
    | StructField
    | Enum
    | Variant
    | Function
    | Trait
    | TraitAlias
    | Method
    | Impl
    | Typedef
    | OpaqueTy
    | ConstantItem
    | Static
    | ForeignType
    | Macro
    | ProcMacro
    | PrimitiveType
    | AssocConst
    | AssocType,
    Field(discriminator="tag"),
]
