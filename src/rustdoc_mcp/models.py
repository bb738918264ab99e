"""Pydantic models for MCP tool input validation."""

from pydantic import BaseModel, Field, field_validator

from .rustdoc import ItemKind

# rustdoc ids look like "0:3:1594"; keep the limit generous
_ID_FIELD = {"min_length": 1, "max_length": 200}


class ItemLookupInput(BaseModel):
    """Input validation for item lookup."""

    id: str = Field(..., **_ID_FIELD, description="Item id, e.g. '0:3'")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("id must not be blank")
        return v


class ChildrenInput(BaseModel):
    """Input validation for module listings."""

    id: str | None = Field(
        None, **_ID_FIELD, description="Module id (default: crate root)"
    )
    kind: str | None = Field(None, description="Only list items of this kind")

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: str | None) -> str | None:
        if v is None:
            return v
        valid_kinds = [k.value for k in ItemKind]
        if v.lower() not in valid_kinds:
            raise ValueError(f"Invalid kind '{v}'. Must be one of: {valid_kinds}")
        return v.lower()


class LinkInput(BaseModel):
    """Input validation for intra-doc link resolution."""

    item_id: str = Field(..., **_ID_FIELD, description="Item whose docs hold the link")
    link: str = Field(..., min_length=1, max_length=500, description="Link text")


class PathLookupInput(BaseModel):
    """Input validation for qualified path lookup."""

    path: str = Field(
        ...,
        min_length=1,
        max_length=500,
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*(::[A-Za-z_][A-Za-z0-9_]*)*$",
        description="Qualified path, e.g. 'std::vec::Vec'",
    )

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(self.path.split("::"))
