"""Pytest configuration and fixtures for rustdoc-mcp tests."""

import copy
import json
from pathlib import Path

import pytest

EMPTY_GENERICS = {"params": [], "where_predicates": []}

RUST_HEADER = {"const": False, "unsafe": False, "async": False, "abi": {"tag": "Rust"}}


def _generic(name: str) -> dict:
    return {"tag": "Generic", "val": name}


def _path(name: str, id_: str, args: dict | None = None) -> dict:
    return {"tag": "ResolvedPath", "name": name, "id": id_, "args": args, "param_names": []}


def _angle(*types: dict) -> dict:
    return {
        "tag": "AngleBracketed",
        "args": [{"tag": "Type", "val": t} for t in types],
        "bindings": [],
    }


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's RUSTDOC_MCP_* settings out of tests."""
    for name in ("RUSTDOC_MCP_STRICT", "RUSTDOC_MCP_MAX_INPUT_BYTES", "RUSTDOC_MCP_CRATE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Create an isolated data directory for testing."""
    data_dir = tmp_path / ".rustdoc-mcp"
    data_dir.mkdir(parents=True)
    return data_dir


@pytest.fixture
def make_item():
    """Factory for index entries with a Public envelope."""

    def make(id_: str, inner: dict, **envelope) -> dict:
        item = {
            "id": id_,
            "crate_id": 0,
            "name": None,
            "visibility": {"tag": "Public"},
            "links": {},
            "attrs": [],
            "inner": inner,
        }
        item.update(envelope)
        return item

    return make


@pytest.fixture
def minimal_crate() -> dict:
    """A crate holding only an empty root module."""
    return {
        "root": "0:0",
        "includes_private": False,
        "index": {
            "0:0": {
                "id": "0:0",
                "crate_id": 0,
                "visibility": {"tag": "Public"},
                "links": {},
                "attrs": [],
                "inner": {
                    "tag": "Module",
                    "is_crate": True,
                    "items": [],
                    "is_stripped": False,
                },
            }
        },
        "paths": {},
        "external_crates": {},
        "format_version": 17,
    }


@pytest.fixture
def sample_crate(make_item) -> dict:
    """A small crate: a generic struct, a trait, an impl, a function,
    a constant, a submodule, and two external items known only by path.

    Roughly:

        pub struct Point<T> { pub x: T, pub y: T }
        pub trait Shape { fn area(&self) -> f64; }
        impl<T> Shape for Point<T> {}
        pub fn make<T: Clone>(value: &T) -> Vec<T>
        pub const MAX: u32 = 10;
        pub mod util {}
    """
    type_param_t = {
        "name": "T",
        "kind": {"tag": "Type", "bounds": [], "default": None, "synthetic": False},
    }
    clone_bound = {
        "tag": "TraitBound",
        "trait": _path("Clone", "2:5", _angle()),
        "generic_params": [],
        "modifier": "none",
    }

    index = {
        "0:0": make_item(
            "0:0",
            {
                "tag": "Module",
                "is_crate": True,
                "items": ["0:1", "0:2", "0:3", "0:5", "0:9"],
                "is_stripped": False,
            },
            name="demo",
            docs="Demo crate.",
        ),
        "0:1": make_item(
            "0:1",
            {
                "tag": "Struct",
                "struct_type": "plain",
                "generics": {"params": [type_param_t], "where_predicates": []},
                "fields_stripped": False,
                "fields": ["0:6", "0:7"],
                "impls": ["0:4"],
            },
            name="Point",
            docs="A point. See [`Shape`].",
            links={"`Shape`": "0:2"},
            attrs=["#[derive(Clone)]"],
            span={"filename": "src/lib.rs", "begin": [3, 0], "end": [6, 1]},
        ),
        "0:6": make_item("0:6", {"tag": "StructField", "val": _generic("T")}, name="x"),
        "0:7": make_item("0:7", {"tag": "StructField", "val": _generic("T")}, name="y"),
        "0:2": make_item(
            "0:2",
            {
                "tag": "Trait",
                "is_auto": False,
                "is_unsafe": False,
                "items": ["0:8"],
                "generics": EMPTY_GENERICS,
                "bounds": [],
                "implementations": ["0:4"],
            },
            name="Shape",
        ),
        "0:8": make_item(
            "0:8",
            {
                "tag": "Method",
                "decl": {
                    "inputs": [
                        [
                            "self",
                            {
                                "tag": "BorrowedRef",
                                "lifetime": None,
                                "mutable": False,
                                "type": _generic("Self"),
                            },
                        ]
                    ],
                    "output": {"tag": "Primitive", "val": "f64"},
                    "c_variadic": False,
                },
                "generics": EMPTY_GENERICS,
                "header": RUST_HEADER,
                "has_body": False,
            },
            name="area",
            visibility={"tag": "Default"},
        ),
        "0:4": make_item(
            "0:4",
            {
                "tag": "Impl",
                "is_unsafe": False,
                "generics": {"params": [type_param_t], "where_predicates": []},
                "provided_trait_methods": [],
                "trait": _path("Shape", "0:2"),
                "for": _path("Point", "0:1", _angle(_generic("T"))),
                "items": [],
                "negative": False,
                "synthetic": False,
                "blanket_impl": None,
            },
            visibility={"tag": "Default"},
        ),
        "0:3": make_item(
            "0:3",
            {
                "tag": "Function",
                "decl": {
                    "inputs": [
                        [
                            "value",
                            {
                                "tag": "BorrowedRef",
                                "lifetime": None,
                                "mutable": False,
                                "type": _generic("T"),
                            },
                        ]
                    ],
                    "output": _path("Vec", "1:10", _angle(_generic("T"))),
                    "c_variadic": False,
                },
                "generics": {
                    "params": [
                        {
                            "name": "T",
                            "kind": {
                                "tag": "Type",
                                "bounds": [clone_bound],
                                "default": None,
                                "synthetic": False,
                            },
                        }
                    ],
                    "where_predicates": [],
                },
                "header": RUST_HEADER,
            },
            name="make",
            docs="",
            links={"Vec": "1:10"},
        ),
        "0:5": make_item(
            "0:5",
            {
                "tag": "Constant",
                "val": {
                    "type": {"tag": "Primitive", "val": "u32"},
                    "expr": "10",
                    "value": "10",
                    "is_literal": True,
                },
            },
            name="MAX",
            deprecation={"since": "0.2.0", "note": "use LIMIT"},
        ),
        "0:9": make_item(
            "0:9",
            {"tag": "Module", "is_crate": False, "items": [], "is_stripped": False},
            name="util",
        ),
    }

    paths = {
        "0:0": {"crate_id": 0, "path": ["demo"], "kind": "module"},
        "0:1": {"crate_id": 0, "path": ["demo", "Point"], "kind": "struct"},
        "0:2": {"crate_id": 0, "path": ["demo", "Shape"], "kind": "trait"},
        "0:3": {"crate_id": 0, "path": ["demo", "make"], "kind": "function"},
        "0:5": {"crate_id": 0, "path": ["demo", "MAX"], "kind": "constant"},
        "0:9": {"crate_id": 0, "path": ["demo", "util"], "kind": "module"},
        "1:10": {"crate_id": 1, "path": ["alloc", "vec", "Vec"], "kind": "struct"},
        "2:5": {"crate_id": 2, "path": ["core", "clone", "Clone"], "kind": "trait"},
    }

    return {
        "root": "0:0",
        "crate_version": "0.1.0",
        "includes_private": False,
        "index": index,
        "paths": paths,
        "external_crates": {
            "1": {"name": "alloc", "html_root_url": "https://doc.rust-lang.org/nightly/"},
            "2": {"name": "core"},
        },
        "format_version": 17,
    }


@pytest.fixture
def broken_crate(sample_crate) -> dict:
    """The sample crate with one undecodable entry and one dangling reference."""
    doc = copy.deepcopy(sample_crate)
    # Unknown item kind
    doc["index"]["0:5"]["inner"] = {"tag": "Bogus"}
    # Impl for a type declared nowhere
    doc["index"]["0:4"]["inner"]["for"] = {
        "tag": "ResolvedPath",
        "name": "Ghost",
        "id": "9:9",
        "args": None,
        "param_names": [],
    }
    return doc


@pytest.fixture
def sample_crate_file(tmp_path: Path, sample_crate) -> Path:
    """Write the sample crate to disk as rustdoc would."""
    path = tmp_path / "demo.json"
    path.write_text(json.dumps(sample_crate), encoding="utf-8")
    return path


@pytest.fixture
def broken_crate_file(tmp_path: Path, broken_crate) -> Path:
    path = tmp_path / "broken.json"
    path.write_text(json.dumps(broken_crate), encoding="utf-8")
    return path
