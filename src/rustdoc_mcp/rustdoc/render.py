"""Render type expressions and item headers as one-line Rust-like text.

Used by the CLI and the MCP server to show signatures; this is not a
documentation renderer.
"""

from .crate import Item
from .decls import (
    AssocConst,
    AssocType,
    BoundPredicate,
    ConstantItem,
    Enum,
    EqPredicate,
    ExternCrate,
    Function,
    Generics,
    Impl,
    Import,
    Macro,
    Method,
    Module,
    ProcMacro,
    RegionPredicate,
    Static,
    Struct,
    StructField,
    StructType,
    Trait,
    TraitAlias,
    Typedef,
    Union,
)
from .types import (
    AngleBracketed,
    Array,
    BorrowedRef,
    ConstArg,
    ConstantTerm,
    ConstParam,
    DynTrait,
    EqualityBinding,
    FnDecl,
    FunctionPointer,
    Generic,
    GenericParamDef,
    Header,
    ImplTrait,
    Infer,
    LifetimeArg,
    LifetimeParam,
    OtherAbi,
    Outlives,
    Parenthesized,
    Primitive,
    QualifiedPath,
    RawPointer,
    ResolvedPath,
    RustAbi,
    Slice,
    TraitBoundModifier,
    Tuple,
    TypeArg,
    TypeParam,
)


def render_type(ty) -> str:
    if ty is None:
        return "()"
    if isinstance(ty, (Primitive, Generic)):
        return ty.val
    if isinstance(ty, ResolvedPath):
        return f"{ty.name}{render_generic_args(ty.args)}"
    if isinstance(ty, QualifiedPath):
        self_type = render_type(ty.self_type)
        args = render_generic_args(ty.args)
        return f"<{self_type} as {render_type(ty.trait)}>::{ty.name}{args}"
    if isinstance(ty, BorrowedRef):
        lifetime = f"{ty.lifetime} " if ty.lifetime else ""
        mutable = "mut " if ty.mutable else ""
        return f"&{lifetime}{mutable}{render_type(ty.type)}"
    if isinstance(ty, RawPointer):
        mutable = "mut" if ty.mutable else "const"
        return f"*{mutable} {render_type(ty.type)}"
    if isinstance(ty, Slice):
        return f"[{render_type(ty.val)}]"
    if isinstance(ty, Array):
        return f"[{render_type(ty.type)}; {ty.len}]"
    if isinstance(ty, Tuple):
        if len(ty.val) == 1:
            return f"({render_type(ty.val[0])},)"
        return f"({', '.join(render_type(t) for t in ty.val)})"
    if isinstance(ty, ImplTrait):
        return f"impl {render_bounds(ty.val)}"
    if isinstance(ty, DynTrait):
        traits = [
            _render_hrtb(poly.generic_params) + render_type(poly.trait)
            for poly in ty.traits
        ]
        if ty.lifetime:
            traits.append(ty.lifetime)
        return f"dyn {' + '.join(traits)}"
    if isinstance(ty, FunctionPointer):
        hrtb = _render_hrtb(ty.generic_params)
        return f"{hrtb}{render_header(ty.header)}fn{render_fn_decl(ty.decl)}"
    if isinstance(ty, Infer):
        return "_"
    raise TypeError(f"Not a type expression: {ty!r}")


def render_generic_args(args) -> str:
    if args is None:
        return ""
    if isinstance(args, AngleBracketed):
        parts = []
        for arg in args.args:
            if isinstance(arg, LifetimeArg):
                parts.append(arg.val)
            elif isinstance(arg, TypeArg):
                parts.append(render_type(arg.val))
            elif isinstance(arg, ConstArg):
                parts.append(arg.val.expr)
            else:
                parts.append("_")
        for binding in args.bindings:
            name = f"{binding.name}{render_generic_args(binding.args)}"
            if isinstance(binding.binding, EqualityBinding):
                term = binding.binding.val
                value = term.val.expr if isinstance(term, ConstantTerm) else render_type(term.val)
                parts.append(f"{name} = {value}")
            else:
                parts.append(f"{name}: {render_bounds(binding.binding.val)}")
        return f"<{', '.join(parts)}>" if parts else ""
    if isinstance(args, Parenthesized):
        inputs = ", ".join(render_type(t) for t in args.inputs)
        output = f" -> {render_type(args.output)}" if args.output is not None else ""
        return f"({inputs}){output}"
    raise TypeError(f"Not generic args: {args!r}")


def render_bounds(bounds) -> str:
    parts = []
    for bound in bounds:
        if isinstance(bound, Outlives):
            parts.append(bound.val)
            continue
        modifier = {
            TraitBoundModifier.NONE: "",
            TraitBoundModifier.MAYBE: "?",
            TraitBoundModifier.MAYBE_CONST: "~const ",
        }[bound.modifier]
        parts.append(f"{_render_hrtb(bound.generic_params)}{modifier}{render_type(bound.trait)}")
    return " + ".join(parts)


def _render_param(param: GenericParamDef) -> str:
    kind = param.kind
    if isinstance(kind, LifetimeParam):
        if kind.outlives:
            return f"{param.name}: {' + '.join(sorted(kind.outlives))}"
        return param.name
    if isinstance(kind, TypeParam):
        text = param.name
        if kind.bounds:
            text += f": {render_bounds(kind.bounds)}"
        if kind.default is not None:
            text += f" = {render_type(kind.default)}"
        return text
    if isinstance(kind, ConstParam):
        text = f"const {param.name}: {render_type(kind.type)}"
        if kind.default is not None:
            text += f" = {kind.default}"
        return text
    raise TypeError(f"Unknown generic parameter kind: {kind!r}")


def _render_hrtb(params) -> str:
    if not params:
        return ""
    return f"for<{', '.join(_render_param(p) for p in params)}> "


def render_generics(generics: Generics) -> str:
    # Synthetic params stand for `impl Trait` arguments and are not written
    params = [
        p for p in generics.params
        if not (isinstance(p.kind, TypeParam) and p.kind.synthetic)
    ]
    if not params:
        return ""
    return f"<{', '.join(_render_param(p) for p in params)}>"


def render_where(generics: Generics) -> str:
    parts = []
    for pred in generics.where_predicates:
        if isinstance(pred, BoundPredicate):
            hrtb = _render_hrtb(pred.generic_params)
            parts.append(f"{hrtb}{render_type(pred.type)}: {render_bounds(pred.bounds)}")
        elif isinstance(pred, RegionPredicate):
            parts.append(f"{pred.lifetime}: {render_bounds(pred.bounds)}")
        elif isinstance(pred, EqPredicate):
            rhs = pred.rhs.val.expr if isinstance(pred.rhs, ConstantTerm) else render_type(pred.rhs.val)
            parts.append(f"{render_type(pred.lhs)} = {rhs}")
    if not parts:
        return ""
    return f" where {', '.join(parts)}"


def render_header(header: Header) -> str:
    quals = []
    if header.const:
        quals.append("const ")
    if header.async_:
        quals.append("async ")
    if header.unsafe:
        quals.append("unsafe ")
    abi = header.abi
    if isinstance(abi, OtherAbi):
        quals.append(f'extern "{abi.val}" ')
    elif not isinstance(abi, RustAbi):
        suffix = "-unwind" if abi.unwind else ""
        quals.append(f'extern "{abi.tag}{suffix}" ')
    return "".join(quals)


def render_fn_decl(decl: FnDecl) -> str:
    params = []
    for name, ty in decl.inputs:
        if name == "self":
            rendered = render_type(ty)
            if rendered in ("Self", "&Self", "&mut Self"):
                params.append(rendered.replace("Self", "self"))
                continue
        params.append(f"{name}: {render_type(ty)}")
    if decl.c_variadic:
        params.append("...")
    output = f" -> {render_type(decl.output)}" if decl.output is not None else ""
    return f"({', '.join(params)}){output}"


def render_signature(item: Item) -> str:
    """One-line declaration header for an item, e.g. `pub fn f<T>(x: T) -> T`."""
    inner = item.inner
    name = item.name or ""
    vis = "pub " if item.visibility.tag == "Public" else ""

    if isinstance(inner, (Function, Method)):
        generics = render_generics(inner.generics)
        sig = render_fn_decl(inner.decl)
        where = render_where(inner.generics)
        return f"{vis}{render_header(inner.header)}fn {name}{generics}{sig}{where}"
    if isinstance(inner, Struct):
        generics = render_generics(inner.generics)
        body = {StructType.PLAIN: " { .. }", StructType.TUPLE: "(..);", StructType.UNIT: ";"}
        return f"{vis}struct {name}{generics}{render_where(inner.generics)}{body[inner.struct_type]}"
    if isinstance(inner, Union):
        return f"{vis}union {name}{render_generics(inner.generics)}{render_where(inner.generics)}"
    if isinstance(inner, Enum):
        return f"{vis}enum {name}{render_generics(inner.generics)}{render_where(inner.generics)}"
    if isinstance(inner, Trait):
        quals = ("unsafe " if inner.is_unsafe else "") + ("auto " if inner.is_auto else "")
        supertraits = f": {render_bounds(inner.bounds)}" if inner.bounds else ""
        generics = render_generics(inner.generics)
        return f"{vis}{quals}trait {name}{generics}{supertraits}{render_where(inner.generics)}"
    if isinstance(inner, TraitAlias):
        return f"{vis}trait {name}{render_generics(inner.generics)} = {render_bounds(inner.params)}"
    if isinstance(inner, Impl):
        unsafe = "unsafe " if inner.is_unsafe else ""
        head = f"{unsafe}impl{render_generics(inner.generics)} "
        if inner.trait is not None:
            negative = "!" if inner.negative else ""
            head += f"{negative}{render_type(inner.trait)} for "
        return f"{head}{render_type(inner.for_)}{render_where(inner.generics)}"
    if isinstance(inner, Typedef):
        generics = render_generics(inner.generics)
        return f"{vis}type {name}{generics} = {render_type(inner.type)}"
    if isinstance(inner, ConstantItem):
        return f"{vis}const {name}: {render_type(inner.val.type)} = {inner.val.expr}"
    if isinstance(inner, Static):
        mutable = "mut " if inner.mutable else ""
        return f"{vis}static {mutable}{name}: {render_type(inner.type)} = {inner.expr}"
    if isinstance(inner, StructField):
        return f"{vis}{name}: {render_type(inner.val)}"
    if isinstance(inner, AssocConst):
        default = f" = {inner.default}" if inner.default is not None else ""
        return f"const {name}: {render_type(inner.type)}{default}"
    if isinstance(inner, AssocType):
        bounds = f": {render_bounds(inner.bounds)}" if inner.bounds else ""
        default = f" = {render_type(inner.default)}" if inner.default is not None else ""
        return f"type {name}{render_generics(inner.generics)}{bounds}{default}"
    if isinstance(inner, Module):
        return f"{vis}mod {name}"
    if isinstance(inner, Import):
        glob = "::*" if inner.glob else ""
        alias = "" if glob or inner.source.rsplit("::", 1)[-1] == inner.name else f" as {inner.name}"
        return f"{vis}use {inner.source}{glob}{alias};"
    if isinstance(inner, ExternCrate):
        rename = f" as {inner.rename}" if inner.rename else ""
        return f"extern crate {inner.name}{rename};"
    if isinstance(inner, Macro):
        return inner.val.splitlines()[0] if inner.val else f"macro_rules! {name}"
    if isinstance(inner, ProcMacro):
        return {
            "bang": f"{name}!()",
            "attr": f"#[{name}]",
            "derive": f"#[derive({name})]",
        }[inner.kind.value]
    return f"{item.kind.value} {name}".strip()
