"""Type expressions as rustdoc emits them.

A type expression is a tree: every variant owns its nested types and generic
arguments. References to other items (traits, structs, ...) are only ever
Ids, resolved through the crate graph, never nested objects.

Bounds, generic parameter definitions and function signatures live here too,
because they nest inside type expressions (`dyn for<'a> Fn(&'a T)`,
`impl Iterator<Item = u8>`) and type expressions nest inside them.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import Field, StrictBool, StrictStr

from .base import Id, RustdocModel


class TraitBoundModifier(str, Enum):
    NONE = "none"
    MAYBE = "maybe"
    MAYBE_CONST = "maybe_const"


# -- generic arguments -------------------------------------------------------


class Constant(RustdocModel):
    """A constant expression, as an argument or an item value."""

    type: Type
    expr: StrictStr
    value: StrictStr | None = None
    is_literal: StrictBool


class LifetimeArg(RustdocModel):
    tag: Literal["Lifetime"] = "Lifetime"
    val: StrictStr


class TypeArg(RustdocModel):
    tag: Literal["Type"] = "Type"
    val: Type


class ConstArg(RustdocModel):
    tag: Literal["Constant"] = "Constant"
    val: Constant


class InferArg(RustdocModel):
    tag: Literal["Infer"] = "Infer"


GenericArg = Annotated[
    LifetimeArg | TypeArg | ConstArg | InferArg,
    Field(discriminator="tag"),
]


class TypeTerm(RustdocModel):
    tag: Literal["Type"] = "Type"
    val: Type


class ConstantTerm(RustdocModel):
    tag: Literal["Constant"] = "Constant"
    val: Constant


Term = Annotated[TypeTerm | ConstantTerm, Field(discriminator="tag")]


class EqualityBinding(RustdocModel):
    """`Iterator<Item = u32>`"""

    tag: Literal["Equality"] = "Equality"
    val: Term


class ConstraintBinding(RustdocModel):
    """`Iterator<Item: Debug>`"""

    tag: Literal["Constraint"] = "Constraint"
    val: tuple[GenericBound, ...]


class TypeBinding(RustdocModel):
    name: StrictStr
    args: GenericArgs
    binding: Annotated[EqualityBinding | ConstraintBinding, Field(discriminator="tag")]


class AngleBracketed(RustdocModel):
    """`<'a, 32, B: Copy, C = u32>`"""

    tag: Literal["AngleBracketed"] = "AngleBracketed"
    args: tuple[GenericArg, ...]
    bindings: tuple[TypeBinding, ...]


class Parenthesized(RustdocModel):
    """`Fn(A, B) -> C`"""

    tag: Literal["Parenthesized"] = "Parenthesized"
    inputs: tuple[Type, ...]
    output: Type | None = None


GenericArgs = Annotated[AngleBracketed | Parenthesized, Field(discriminator="tag")]


# -- bounds and generic parameters ------------------------------------------


class TraitBound(RustdocModel):
    tag: Literal["TraitBound"] = "TraitBound"
    trait: Type
    # `for<'a, 'b>` part of an HRTB
    generic_params: tuple[GenericParamDef, ...]
    modifier: TraitBoundModifier


class Outlives(RustdocModel):
    tag: Literal["Outlives"] = "Outlives"
    val: StrictStr


GenericBound = Annotated[TraitBound | Outlives, Field(discriminator="tag")]


class LifetimeParam(RustdocModel):
    tag: Literal["Lifetime"] = "Lifetime"
    outlives: frozenset[StrictStr]


class TypeParam(RustdocModel):
    tag: Literal["Type"] = "Type"
    bounds: tuple[GenericBound, ...]
    default: Type | None = None
    # True when introduced by the compiler, e.g. for `fn f(_: impl Trait)`
    synthetic: StrictBool


class ConstParam(RustdocModel):
    tag: Literal["Const"] = "Const"
    type: Type
    default: StrictStr | None = None


class GenericParamDef(RustdocModel):
    name: StrictStr
    kind: Annotated[LifetimeParam | TypeParam | ConstParam, Field(discriminator="tag")]


class PolyTrait(RustdocModel):
    """A trait in a `dyn` object, with its own HRTB parameters."""

    trait: Type
    generic_params: tuple[GenericParamDef, ...]


# -- function signatures -----------------------------------------------------


class RustAbi(RustdocModel):
    tag: Literal["Rust"] = "Rust"


class ExternAbi(RustdocModel):
    """One of the stable `extern "..."` ABIs."""

    tag: Literal["C", "Cdecl", "Stdcall", "Fastcall", "Aapcs", "Win64", "SysV64", "System"]
    unwind: StrictBool


class OtherAbi(RustdocModel):
    tag: Literal["Other"] = "Other"
    val: StrictStr


Abi = Annotated[RustAbi | ExternAbi | OtherAbi, Field(discriminator="tag")]


class Header(RustdocModel):
    const: StrictBool
    unsafe: StrictBool
    async_: StrictBool = Field(alias="async")
    abi: Abi


class FnDecl(RustdocModel):
    inputs: tuple[tuple[StrictStr, Type], ...]
    output: Type | None = None
    c_variadic: StrictBool


# -- type expressions --------------------------------------------------------


class ResolvedPath(RustdocModel):
    """A struct, enum, union or trait named by path."""

    tag: Literal["ResolvedPath"] = "ResolvedPath"
    name: StrictStr
    id: Id
    args: GenericArgs | None = None
    param_names: tuple[GenericBound, ...]

    id_fields = ("id",)


class DynTrait(RustdocModel):
    """`dyn Trait + Send + 'static`"""

    tag: Literal["DynTrait"] = "DynTrait"
    # One of these supplies the vtable, the rest are auto traits
    traits: tuple[PolyTrait, ...]
    lifetime: StrictStr | None = None


class Generic(RustdocModel):
    tag: Literal["Generic"] = "Generic"
    val: StrictStr


class Primitive(RustdocModel):
    tag: Literal["Primitive"] = "Primitive"
    val: StrictStr


class FunctionPointer(RustdocModel):
    """`for<'c> extern "C" fn(&'c i32) -> i32`"""

    tag: Literal["FunctionPtr"] = "FunctionPtr"
    decl: FnDecl
    generic_params: tuple[GenericParamDef, ...]
    header: Header


class Tuple(RustdocModel):
    tag: Literal["Tuple"] = "Tuple"
    val: tuple[Type, ...]


class Slice(RustdocModel):
    tag: Literal["Slice"] = "Slice"
    val: Type


class Array(RustdocModel):
    tag: Literal["Array"] = "Array"
    type: Type
    len: StrictStr


class ImplTrait(RustdocModel):
    tag: Literal["ImplTrait"] = "ImplTrait"
    val: tuple[GenericBound, ...]


class Infer(RustdocModel):
    tag: Literal["Infer"] = "Infer"


class RawPointer(RustdocModel):
    tag: Literal["RawPointer"] = "RawPointer"
    mutable: StrictBool
    type: Type


class BorrowedRef(RustdocModel):
    tag: Literal["BorrowedRef"] = "BorrowedRef"
    lifetime: StrictStr | None = None
    mutable: StrictBool
    type: Type


class QualifiedPath(RustdocModel):
    """`<Type as Trait>::Name`, or `T::Item` where `T: Iterator`."""

    tag: Literal["QualifiedPath"] = "QualifiedPath"
    name: StrictStr
    args: GenericArgs
    self_type: Type
    trait: Type


TYPE_VARIANTS = (
    ResolvedPath,
    DynTrait,
    Generic,
    Primitive,
    FunctionPointer,
    Tuple,
    Slice,
    Array,
    ImplTrait,
    Infer,
    RawPointer,
    BorrowedRef,
    QualifiedPath,
)

Type = Annotated[
    ResolvedPath
    | DynTrait
    | Generic
    | Primitive
    | FunctionPointer
    | Tuple
    | Slice
    | Array
    | ImplTrait
    | Infer
    | RawPointer
    | BorrowedRef
    | QualifiedPath,
    Field(discriminator="tag"),
]

for _model in (
    Constant,
    TypeArg,
    ConstArg,
    TypeTerm,
    ConstantTerm,
    EqualityBinding,
    ConstraintBinding,
    TypeBinding,
    AngleBracketed,
    Parenthesized,
    TraitBound,
    TypeParam,
    ConstParam,
    GenericParamDef,
    PolyTrait,
    Header,
    FnDecl,
    *TYPE_VARIANTS,
):
    _model.model_rebuild()
