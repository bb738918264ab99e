"""Deterministic traversal over decoded model nodes.

Every node is a tree, so walks always terminate. Children are visited in
field-declaration order, sequence elements in sequence order, mapping values
in insertion order.
"""

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel

from .base import RustdocModel
from .types import TYPE_VARIANTS


def _children(value: Any) -> Iterator[Any]:
    if isinstance(value, (tuple, list, frozenset)):
        yield from value
    elif isinstance(value, dict):
        yield from value.values()
    else:
        yield value


def iter_nodes(node: Any) -> Iterator[BaseModel]:
    """Yield every model node nested in `node`, pre-order, including itself."""
    if isinstance(node, BaseModel):
        yield node
        for name in type(node).model_fields:
            value = getattr(node, name)
            if value is None or isinstance(value, (str, int, bool)):
                continue
            for child in _children(value):
                yield from iter_nodes(child)
    elif isinstance(node, (tuple, list, dict)):
        for child in _children(node):
            yield from iter_nodes(child)


def iter_ids(node: Any) -> Iterator[str]:
    """Yield every Id reference nested in `node`, once per occurrence.

    Only fields declared as references are reported; an item's own `id` is
    not a reference.
    """
    if isinstance(node, RustdocModel):
        for name in type(node).model_fields:
            value = getattr(node, name)
            if value is None:
                continue
            if name in node.id_fields:
                if isinstance(value, str):
                    yield value
                else:
                    yield from _children(value)
            elif not isinstance(value, (str, int, bool)):
                for child in _children(value):
                    yield from iter_ids(child)
    elif isinstance(node, (tuple, list, dict)):
        for child in _children(node):
            yield from iter_ids(child)


def iter_types(node: Any) -> Iterator[BaseModel]:
    """Yield every type expression nested in `node`, pre-order."""
    for model in iter_nodes(node):
        if isinstance(model, TYPE_VARIANTS):
            yield model
