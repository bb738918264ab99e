"""Decode errors.

The same classes serve as fatal exceptions and as non-fatal diagnostics: a
diagnostic is an instance that was collected instead of raised.
"""


class DecodeError(Exception):
    """Base exception for rustdoc JSON decode errors.

    Args:
        message: Human-readable description
        path: Dotted location of the offending field ("" for the document)
        item_id: Id of the item the error belongs to, if any
    """

    def __init__(self, message: str, path: str = "", item_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.item_id = item_id

    def __str__(self) -> str:
        where = []
        if self.item_id is not None:
            where.append(f"item {self.item_id!r}")
        if self.path:
            where.append(f"at {self.path}")
        if not where:
            return self.message
        return f"{self.message} ({', '.join(where)})"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, path={self.path!r}, "
            f"item_id={self.item_id!r})"
        )


class MissingFieldError(DecodeError):
    """A required field is absent or null."""

    pass


class TypeMismatchError(DecodeError):
    """A field is present but has the wrong shape."""

    pass


class UnknownVariantError(DecodeError):
    """A tag or enumeration value is outside its closed set."""

    pass


class UnsupportedVersionError(DecodeError):
    """The document's format_version is not the supported one.

    This is a producer/consumer mismatch, not a data defect, and is always
    fatal.
    """

    def __init__(self, found: int, expected: int):
        super().__init__(
            f"Unsupported format_version {found}, expected {expected}",
            path="format_version",
        )
        self.found = found
        self.expected = expected


class DanglingReferenceError(DecodeError):
    """An Id is referenced but declared in neither `index` nor `paths`."""

    def __init__(self, target: str, item_id: str):
        super().__init__(f"Dangling reference to {target!r}", item_id=item_id)
        self.target = target


class InvalidRootError(DecodeError):
    """`root` does not name a module in `index`."""

    pass
