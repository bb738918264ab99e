"""Tests for the MCP server."""

import asyncio

import pytest

from rustdoc_mcp import server
from rustdoc_mcp.config import Config
from rustdoc_mcp.rustdoc import decode


def _text(contents) -> str:
    assert len(contents) == 1
    return contents[0].text


@pytest.fixture
def loaded(monkeypatch, sample_crate):
    """Serve the sample crate; module state is restored afterwards."""
    monkeypatch.setattr(server, "GRAPH", None)
    monkeypatch.setattr(server, "RESULT", None)
    monkeypatch.setattr(server, "CRATE_PATH", None)
    return server.set_graph(decode(sample_crate))


@pytest.fixture
def unloaded(monkeypatch):
    monkeypatch.setattr(server, "GRAPH", None)
    monkeypatch.setattr(server, "RESULT", None)


class TestListTools:
    """Tests for tool registration."""

    def test_tool_names(self):
        """Should expose one tool per query."""
        tools = asyncio.run(server.list_tools())

        assert [t.name for t in tools] == [
            "rustdoc_get_item",
            "rustdoc_list_children",
            "rustdoc_list_impls",
            "rustdoc_resolve_link",
            "rustdoc_find_path",
            "rustdoc_status",
        ]


class TestCallTool:
    """Tests for tool dispatch and input validation."""

    def test_dispatch(self, loaded):
        """Should route to the matching handler."""
        text = _text(asyncio.run(server.call_tool("rustdoc_get_item", {"id": "0:1"})))

        assert "# struct demo::Point" in text

    def test_validation_error(self, loaded):
        """Should return validation errors as text."""
        text = _text(asyncio.run(server.call_tool("rustdoc_get_item", {"id": ""})))

        assert text.startswith("Validation error")

    def test_missing_argument(self, loaded):
        """Should report a missing required argument."""
        text = _text(asyncio.run(server.call_tool("rustdoc_resolve_link", {"item_id": "0:1"})))

        assert text.startswith("Validation error")

    def test_bad_path(self, loaded):
        """Should reject paths that are not Rust paths."""
        text = _text(asyncio.run(server.call_tool("rustdoc_find_path", {"path": "a::::b"})))

        assert text.startswith("Validation error")

    def test_bad_kind(self, loaded):
        """Should reject unknown kinds in listings."""
        text = _text(asyncio.run(
            server.call_tool("rustdoc_list_children", {"kind": "gizmo"})
        ))

        assert "Invalid kind" in text

    def test_unknown_tool(self, loaded):
        """Should report unknown tools."""
        text = _text(asyncio.run(server.call_tool("rustdoc_nope", {})))

        assert text == "Unknown tool: rustdoc_nope"


class TestHandlers:
    """Tests for the tool handlers."""

    def test_get_item(self, loaded):
        """Should describe an item with signature, docs and links."""
        text = _text(asyncio.run(server.handle_get_item("0:1")))

        assert "pub struct Point<T> { .. }" in text
        assert "Source: src/lib.rs:4:1" in text
        assert "A point." in text
        assert "`#[derive(Clone)]`" in text
        assert "trait demo::Shape (0:2)" in text

    def test_get_deprecated_item(self, loaded):
        """Should show deprecation notes."""
        text = _text(asyncio.run(server.handle_get_item("0:5")))

        assert "**Deprecated since 0.2.0**: use LIMIT" in text

    def test_get_summary_only(self, loaded):
        """Should describe items known only by path."""
        text = _text(asyncio.run(server.handle_get_item("1:10")))

        assert "struct alloc::vec::Vec (1:10) [crate alloc]" in text
        assert "struct.Vec.html" in text

    def test_get_unknown(self, loaded):
        """Should report unknown ids."""
        text = _text(asyncio.run(server.handle_get_item("9:9")))

        assert text == "Item not found: 9:9"

    def test_list_root_children(self, loaded):
        """Should list the root module by default."""
        text = _text(asyncio.run(server.handle_list_children(None, None)))

        assert "struct demo::Point (0:1)" in text
        assert "module demo::util (0:9)" in text

    def test_list_children_by_kind(self, loaded):
        """Should filter listings by kind."""
        text = _text(asyncio.run(server.handle_list_children(None, "function")))

        assert "function demo::make (0:3)" in text
        assert "demo::Point" not in text

    def test_list_children_of_struct(self, loaded):
        """Should explain that only modules have children."""
        text = _text(asyncio.run(server.handle_list_children("0:1", None)))

        assert "not a module" in text

    def test_list_empty_module(self, loaded):
        """Should say when a module is empty."""
        text = _text(asyncio.run(server.handle_list_children("0:9", None)))

        assert "(no items)" in text

    def test_list_impls(self, loaded):
        """Should render impl headers."""
        text = _text(asyncio.run(server.handle_list_impls("0:2")))

        assert "`impl<T> Shape for Point<T>` (0:4)" in text

    def test_list_impls_wrong_kind(self, loaded):
        """Should explain which kinds have impls."""
        text = _text(asyncio.run(server.handle_list_impls("0:3")))

        assert "has no impls" in text

    def test_resolve_link(self, loaded):
        """Should resolve a link to its target."""
        text = _text(asyncio.run(server.handle_resolve_link("0:1", "`Shape`")))

        assert text == "`Shape` -> trait demo::Shape (0:2)"

    def test_resolve_missing_link(self, loaded):
        """Should report link text that is not in the docs."""
        text = _text(asyncio.run(server.handle_resolve_link("0:1", "Nope")))

        assert "No link 'Nope'" in text

    def test_find_path(self, loaded):
        """Should find local items by path."""
        text = _text(asyncio.run(server.handle_find_path("demo::make")))

        assert "pub fn make<T: Clone>(value: &T) -> Vec<T>" in text

    def test_find_external_path(self, loaded):
        """Should find external items by path."""
        text = _text(asyncio.run(server.handle_find_path("core::clone::Clone")))

        assert text == "trait core::clone::Clone (2:5) [crate core]"

    def test_find_missing_path(self, loaded):
        """Should report unknown paths."""
        text = _text(asyncio.run(server.handle_find_path("demo::Nope")))

        assert text == "No item at path: demo::Nope"

    def test_status(self, loaded):
        """Should summarize the loaded crate."""
        text = _text(asyncio.run(server.handle_status()))

        assert "Root: demo (0:0)" in text
        assert "Format version: 17" in text
        assert "1: alloc https://doc.rust-lang.org/nightly/" in text
        assert "## Diagnostics\n  None" in text

    def test_status_with_diagnostics(self, monkeypatch, broken_crate):
        """Should list decode diagnostics."""
        monkeypatch.setattr(server, "GRAPH", None)
        monkeypatch.setattr(server, "RESULT", None)
        server.set_graph(decode(broken_crate))

        text = _text(asyncio.run(server.handle_status()))

        assert "UnknownVariantError" in text
        assert "DanglingReferenceError" in text

    def test_no_crate_loaded(self, unloaded):
        """Should explain when no crate is loaded."""
        text = _text(asyncio.run(server.handle_status()))

        assert text.startswith("No crate loaded")


class TestLoadGraph:
    """Tests for loading the served crate from disk."""

    def test_load_graph(self, monkeypatch, sample_crate_file):
        """Should decode the file and serve it."""
        monkeypatch.setattr(server, "GRAPH", None)
        monkeypatch.setattr(server, "RESULT", None)
        monkeypatch.setattr(server, "CRATE_PATH", None)

        graph = server.load_graph(sample_crate_file, Config())

        assert server.GRAPH is graph
        assert server.CRATE_PATH == sample_crate_file
        text = _text(asyncio.run(server.handle_status()))
        assert f"File: {sample_crate_file}" in text
