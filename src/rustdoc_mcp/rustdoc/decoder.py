"""Decode and validate a rustdoc JSON document into a `Crate`.

Decoding runs in a fixed order:

1. format_version gate (fatal, checked before anything else is trusted)
2. required crate fields and crate-level scalars (fatal)
3. external_crates (fatal)
4. index entries, each isolated from the others
5. paths entries, each isolated from the others
6. referential check over the fully populated index and paths
7. root must be a module (fatal)

Per-entry errors and dangling references are collected as diagnostics and
the offending index/paths entries are left out of the crate. With
`strict=True` the first of them is raised instead.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import StrictBool, StrictStr, TypeAdapter, ValidationError

from ..logging import get_logger
from .crate import FORMAT_VERSION, Crate, ExternalCrate, Item, ItemKind, ItemSummary
from .errors import (
    DanglingReferenceError,
    DecodeError,
    InvalidRootError,
    MissingFieldError,
    TypeMismatchError,
    UnknownVariantError,
    UnsupportedVersionError,
)
from .walk import iter_ids

logger = get_logger("decoder")

REQUIRED_FIELDS = ("root", "includes_private", "index", "paths", "external_crates")

_STR = TypeAdapter(StrictStr)
_OPTIONAL_STR = TypeAdapter(StrictStr | None)
_BOOL = TypeAdapter(StrictBool)
_EXTERNAL_CRATES = TypeAdapter(dict[int, ExternalCrate])

_VARIANT_ERRORS = {"union_tag_invalid", "enum", "literal_error"}


@dataclass
class DecodeResult:
    """A decoded crate plus the non-fatal problems found while decoding it."""

    crate: Crate
    diagnostics: list[DecodeError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def diagnostics_of(self, kind: type[DecodeError]) -> list[DecodeError]:
        """Diagnostics of one error class, in the order they were found."""
        return [d for d in self.diagnostics if isinstance(d, kind)]


class _Report:
    """Collects per-entry errors, or raises the first one in strict mode."""

    def __init__(self, strict: bool):
        self.strict = strict
        self.diagnostics: list[DecodeError] = []

    def add(self, errors: list[DecodeError]) -> None:
        if self.strict:
            raise errors[0]
        self.diagnostics.extend(errors)


def _format_path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


def convert_validation_error(
    error: ValidationError,
    prefix: tuple[Any, ...] = (),
    item_id: str | None = None,
) -> list[DecodeError]:
    """Map pydantic validation errors onto the decode error taxonomy."""
    converted: list[DecodeError] = []
    for detail in error.errors(include_url=False):
        loc = prefix + tuple(detail["loc"])
        kind = detail["type"]
        ctx = detail.get("ctx") or {}

        if kind == "missing" or ("input" in detail and detail["input"] is None):
            name = loc[-1] if loc else "document"
            converted.append(
                MissingFieldError(
                    f"Missing required field {name!r}", _format_path(loc), item_id
                )
            )
        elif kind == "union_tag_not_found":
            converted.append(
                MissingFieldError(
                    "Missing variant tag", _format_path(loc + ("tag",)), item_id
                )
            )
        elif kind in _VARIANT_ERRORS:
            converted.append(_variant_error(detail, loc, ctx, item_id))
        else:
            converted.append(
                TypeMismatchError(detail["msg"], _format_path(loc), item_id)
            )
    return converted


def _variant_error(
    detail: Any, loc: tuple[Any, ...], ctx: Mapping[str, Any], item_id: str | None
) -> DecodeError:
    """Classify a bad variant value by what was actually supplied."""
    value = detail.get("input")
    value_loc = loc
    if detail["type"] == "union_tag_invalid":
        # input is the tagged object, not the tag
        value = value.get("tag") if isinstance(value, Mapping) else ctx.get("tag")
        value_loc = loc + ("tag",)

    if value is None:
        return MissingFieldError("Missing variant tag", _format_path(value_loc), item_id)
    if not isinstance(value, str):
        return TypeMismatchError(
            f"Expected a variant name, got {type(value).__name__}",
            _format_path(value_loc),
            item_id,
        )
    return UnknownVariantError(
        f"Unknown variant {value!r}: {detail['msg']}", _format_path(loc), item_id
    )


def _validate(adapter: TypeAdapter, value: Any, name: str) -> Any:
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        raise convert_validation_error(e, prefix=(name,))[0] from e


def _load_document(raw: Mapping[str, Any] | str | bytes) -> Mapping[str, Any]:
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise TypeMismatchError(f"Document is not valid JSON: {e}") from e

    if not isinstance(raw, Mapping):
        raise TypeMismatchError(
            f"Document must be a JSON object, got {type(raw).__name__}"
        )
    return raw


def check_format_version(document: Mapping[str, Any]) -> int:
    """Gate on format_version before any other field is looked at."""
    version = document.get("format_version")
    if version is None:
        raise MissingFieldError(
            "Missing required field 'format_version'", path="format_version"
        )
    # bool is an int subclass; JSON true is not a version number
    if not isinstance(version, int) or isinstance(version, bool):
        raise TypeMismatchError(
            f"format_version must be an integer, got {type(version).__name__}",
            path="format_version",
        )
    if version != FORMAT_VERSION:
        raise UnsupportedVersionError(version, FORMAT_VERSION)
    return version


def _mapping(document: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = document[name]
    if not isinstance(value, Mapping):
        raise TypeMismatchError(
            f"'{name}' must be a JSON object, got {type(value).__name__}", path=name
        )
    return value


def _decode_index(entries: Mapping[str, Any], report: _Report) -> dict[str, Item]:
    items: dict[str, Item] = {}
    for key, raw_item in entries.items():
        try:
            item = Item.model_validate(raw_item)
        except ValidationError as e:
            report.add(
                convert_validation_error(e, prefix=("index", key), item_id=key)
            )
            continue

        if item.id != key:
            report.add([
                TypeMismatchError(
                    f"Item id {item.id!r} does not match its index key",
                    f"index.{key}.id",
                    key,
                )
            ])
            continue

        items[key] = item
    return items


def _decode_paths(entries: Mapping[str, Any], report: _Report) -> dict[str, ItemSummary]:
    summaries: dict[str, ItemSummary] = {}
    for key, raw_summary in entries.items():
        try:
            summaries[key] = ItemSummary.model_validate(raw_summary)
        except ValidationError as e:
            report.add(convert_validation_error(e, prefix=("paths", key), item_id=key))
    return summaries


def _check_references(
    items: dict[str, Item],
    summaries: dict[str, ItemSummary],
    report: _Report,
) -> None:
    for item in items.values():
        reported: set[str] = set()
        for target in iter_ids(item):
            if target in items or target in summaries or target in reported:
                continue
            reported.add(target)
            logger.debug(
                "Dangling reference from %s to %s",
                item.id,
                target,
                extra={"item_id": item.id, "target": target},
            )
            report.add([DanglingReferenceError(target, item.id)])


def decode(raw: Mapping[str, Any] | str | bytes, *, strict: bool = False) -> DecodeResult:
    """
    Decode a rustdoc JSON document.

    Args:
        raw: Parsed JSON object, or JSON text
        strict: Raise on the first per-entry error or dangling reference
            instead of collecting it as a diagnostic

    Returns:
        DecodeResult with the crate and any diagnostics

    Raises:
        DecodeError: On fatal errors (subclass tells which)
    """
    document = _load_document(raw)
    version = check_format_version(document)

    for name in REQUIRED_FIELDS:
        if document.get(name) is None:
            raise MissingFieldError(f"Missing required field {name!r}", path=name)

    root = _validate(_STR, document["root"], "root")
    crate_version = _validate(_OPTIONAL_STR, document.get("crate_version"), "crate_version")
    includes_private = _validate(_BOOL, document["includes_private"], "includes_private")
    index = _mapping(document, "index")
    paths = _mapping(document, "paths")
    external_crates = _validate(
        _EXTERNAL_CRATES, _mapping(document, "external_crates"), "external_crates"
    )

    report = _Report(strict)

    logger.debug("Decoding %d index entries", len(index))
    items = _decode_index(index, report)

    logger.debug("Decoding %d path summaries", len(paths))
    summaries = _decode_paths(paths, report)

    _check_references(items, summaries, report)

    root_item = items.get(root)
    if root_item is None:
        raise InvalidRootError(f"Root {root!r} is not in the index", path="root")
    if root_item.kind is not ItemKind.MODULE:
        raise InvalidRootError(
            f"Root {root!r} is a {root_item.kind.value}, not a module", path="root"
        )

    crate = Crate(
        root=root,
        crate_version=crate_version,
        includes_private=includes_private,
        index=items,
        paths=summaries,
        external_crates=external_crates,
        format_version=version,
    )

    if report.diagnostics:
        logger.warning(
            "Decoded crate with %d diagnostics (%d of %d index entries dropped)",
            len(report.diagnostics),
            len(index) - len(items),
            len(index),
        )
    logger.info(
        "Decoded crate %r: %d items, %d paths, %d external crates",
        root_item.name,
        len(items),
        len(summaries),
        len(external_crates),
    )

    return DecodeResult(crate=crate, diagnostics=report.diagnostics)


def encode(crate: Crate, indent: int | None = None) -> str:
    """Serialize a crate back to rustdoc JSON; absent optionals are omitted."""
    return crate.model_dump_json(by_alias=True, exclude_none=True, indent=indent)
