"""Typed model, decoder and resolver for rustdoc JSON documents."""

from .crate import (
    FORMAT_VERSION,
    Crate,
    Deprecation,
    ExternalCrate,
    Item,
    ItemKind,
    ItemSummary,
    Span,
    Visibility,
)
from .decoder import DecodeResult, decode, encode
from .errors import (
    DanglingReferenceError,
    DecodeError,
    InvalidRootError,
    MissingFieldError,
    TypeMismatchError,
    UnknownVariantError,
    UnsupportedVersionError,
)
from .render import render_signature, render_type
from .resolver import CrateGraph
from .walk import iter_ids, iter_types

__all__ = [
    # Model
    "FORMAT_VERSION",
    "Crate",
    "Deprecation",
    "ExternalCrate",
    "Item",
    "ItemKind",
    "ItemSummary",
    "Span",
    "Visibility",
    # Decoding
    "DecodeResult",
    "decode",
    "encode",
    # Errors
    "DecodeError",
    "MissingFieldError",
    "TypeMismatchError",
    "UnknownVariantError",
    "UnsupportedVersionError",
    "DanglingReferenceError",
    "InvalidRootError",
    # Queries
    "CrateGraph",
    "iter_ids",
    "iter_types",
    "render_signature",
    "render_type",
]
