"""Read-only queries over a decoded crate.

Lookups return None when an id is unknown. That should not happen for a
validated crate, but graphs built by hand (tests, fixtures) are not
validated.
"""

from collections.abc import Iterator, Sequence

from ..logging import get_logger
from .crate import Crate, ExternalCrate, Item, ItemKind, ItemSummary
from .decls import Enum, Impl, Module, Struct, Trait, Union

logger = get_logger("resolver")

# rustdoc HTML page prefix per item kind, for linking to external docs
_PAGE_PREFIXES: dict[ItemKind, str] = {
    ItemKind.STRUCT: "struct",
    ItemKind.UNION: "union",
    ItemKind.ENUM: "enum",
    ItemKind.FUNCTION: "fn",
    ItemKind.TYPEDEF: "type",
    ItemKind.CONSTANT: "constant",
    ItemKind.TRAIT: "trait",
    ItemKind.TRAIT_ALIAS: "traitalias",
    ItemKind.STATIC: "static",
    ItemKind.FOREIGN_TYPE: "foreigntype",
    ItemKind.MACRO: "macro",
    ItemKind.PROC_ATTRIBUTE: "attr",
    ItemKind.PROC_DERIVE: "derive",
    ItemKind.PRIMITIVE: "primitive",
    ItemKind.KEYWORD: "keyword",
}


class CrateGraph:
    """Query surface over one immutable `Crate`.

    Safe to share between threads: nothing here mutates state after
    construction.
    """

    def __init__(self, crate: Crate):
        self.crate = crate
        self._by_path = {summary.path: id_ for id_, summary in crate.paths.items()}

    @property
    def root(self) -> Item:
        return self.crate.index[self.crate.root]

    def get(self, id_: str) -> Item | ItemSummary | None:
        """Full item if indexed, else its path summary, else None."""
        item = self.crate.index.get(id_)
        if item is not None:
            return item
        return self.crate.paths.get(id_)

    def item(self, id_: str) -> Item | None:
        return self.crate.index.get(id_)

    def summary(self, id_: str) -> ItemSummary | None:
        return self.crate.paths.get(id_)

    def resolve_link(self, item: Item, link_text: str) -> str | None:
        """Target id of an intra-doc link in `item`'s docs."""
        return item.links.get(link_text)

    def children_of(self, module: Item) -> list[Item | ItemSummary]:
        """Items declared in a module, in declaration order."""
        return [entry for _, entry in self.children_with_ids(module)]

    def children_with_ids(self, module: Item) -> list[tuple[str, Item | ItemSummary]]:
        """Like `children_of`, paired with each child's id."""
        if not isinstance(module.inner, Module):
            raise ValueError(f"Item {module.id!r} is a {module.kind.value}, not a module")
        return self._lookup_all(module.inner.items, module.id)

    def implementations_of(self, item: Item) -> list[Item]:
        """Impl items of a trait, or of a struct, enum or union."""
        inner = item.inner
        if isinstance(inner, Trait):
            ids = inner.implementations
        elif isinstance(inner, (Struct, Enum, Union)):
            ids = inner.impls
        else:
            raise ValueError(f"Item {item.id!r} is a {item.kind.value}, which has no impls")

        impls = []
        for id_ in ids:
            impl = self.crate.index.get(id_)
            if impl is None:
                logger.debug("Impl %s of %s is not in the index", id_, item.id)
                continue
            impls.append(impl)
        return impls

    def members_of(self, item: Item) -> list[Item | ItemSummary]:
        """Fields of a struct or union, variants of an enum, or items of a
        trait or impl."""
        inner = item.inner
        if isinstance(inner, (Struct, Union)):
            ids = inner.fields
        elif isinstance(inner, Enum):
            ids = inner.variants
        elif isinstance(inner, (Trait, Impl)):
            ids = inner.items
        else:
            raise ValueError(f"Item {item.id!r} is a {item.kind.value}, which has no members")
        return [entry for _, entry in self._lookup_all(ids, item.id)]

    def external_crate(self, crate_id: int) -> ExternalCrate | None:
        return self.crate.external_crates.get(crate_id)

    def path_of(self, id_: str) -> tuple[str, ...] | None:
        summary = self.crate.paths.get(id_)
        return summary.path if summary is not None else None

    def find_by_path(self, path: Sequence[str] | str) -> str | None:
        """Id for a fully qualified path, e.g. "std::vec::Vec"."""
        if isinstance(path, str):
            path = path.split("::")
        return self._by_path.get(tuple(path))

    def iter_items(self, kind: ItemKind | None = None) -> Iterator[Item]:
        """Indexed items in document order, optionally of one kind."""
        for item in self.crate.index.values():
            if kind is None or item.kind is kind:
                yield item

    def external_url(self, id_: str) -> str | None:
        """rustdoc HTML URL of an item from an external crate.

        None for local items, unknown crates, crates without an
        `html_root_url`, and kinds without a page of their own.
        """
        summary = self.crate.paths.get(id_)
        if summary is None or summary.crate_id == 0 or not summary.path:
            return None
        external = self.crate.external_crates.get(summary.crate_id)
        if external is None or not external.html_root_url:
            return None

        base = external.html_root_url.rstrip("/")
        *modules, name = summary.path
        if summary.kind is ItemKind.MODULE:
            return "/".join([base, *summary.path, "index.html"])
        prefix = _PAGE_PREFIXES.get(summary.kind)
        if prefix is None:
            return None
        return "/".join([base, *modules, f"{prefix}.{name}.html"])

    def _lookup_all(
        self, ids: Sequence[str], owner: str
    ) -> list[tuple[str, Item | ItemSummary]]:
        found = []
        for id_ in ids:
            target = self.get(id_)
            if target is None:
                logger.debug("Member %s of %s is unknown", id_, owner)
                continue
            found.append((id_, target))
        return found
