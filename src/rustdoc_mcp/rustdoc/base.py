"""Shared pydantic base for the rustdoc JSON model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, StrictStr

# Opaque item identifier, scoped to one crate document
Id = StrictStr


class RustdocModel(BaseModel):
    """Base class for every node of the decoded document.

    Nodes are frozen once validated. Scalars are strict, so a string where an
    integer is expected fails validation instead of being coerced.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    # Names of fields holding Id references (str, optional str, or a sequence of str)
    id_fields: ClassVar[tuple[str, ...]] = ()
