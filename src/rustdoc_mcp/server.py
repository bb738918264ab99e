"""MCP server for rustdoc JSON.

Exposes tools for looking up items, module contents, impls and intra-doc
links in one decoded crate.
"""

from pathlib import Path

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from pydantic import ValidationError

from .config import Config, load_config
from .loader import load_crate
from .logging import get_logger
from .models import ChildrenInput, ItemLookupInput, LinkInput, PathLookupInput
from .rustdoc import CrateGraph, DecodeResult, Item, ItemKind, ItemSummary, render_signature

logger = get_logger("server")

# Initialize server
server = Server("rustdoc-mcp")

# Loaded crate, set by load_graph() or set_graph() before serving
GRAPH: CrateGraph | None = None
RESULT: DecodeResult | None = None
CRATE_PATH: Path | None = None

# Docs longer than this are cut in tool output
MAX_DOCS_CHARS = 4000


def set_graph(result: DecodeResult, crate_path: Path | None = None) -> CrateGraph:
    """Make a decoded crate the one the tools answer from."""
    global GRAPH, RESULT, CRATE_PATH
    GRAPH = CrateGraph(result.crate)
    RESULT = result
    CRATE_PATH = crate_path
    return GRAPH


def load_graph(crate_path: Path, config: Config) -> CrateGraph:
    """Load a rustdoc JSON file and make it the served crate."""
    result = load_crate(crate_path, config)
    if result.diagnostics:
        logger.warning(
            "%s decoded with %d diagnostics", crate_path, len(result.diagnostics)
        )
    return set_graph(result, crate_path)


def _no_crate() -> list[TextContent]:
    return [TextContent(
        type="text",
        text="No crate loaded. Start the server with a rustdoc JSON file.",
    )]


def _not_found(id_: str) -> list[TextContent]:
    return [TextContent(type="text", text=f"Item not found: {id_}")]


def format_summary(graph: CrateGraph, id_: str, summary: ItemSummary) -> str:
    """One line for an item known only by its path summary."""
    line = f"{summary.kind.value} {'::'.join(summary.path)} ({id_})"
    external = graph.external_crate(summary.crate_id)
    if summary.crate_id != 0 and external is not None:
        line += f" [crate {external.name}]"
    url = graph.external_url(id_)
    if url:
        line += f" {url}"
    return line


def format_item_line(graph: CrateGraph, entry: Item | ItemSummary, id_: str) -> str:
    """One line for a listing: kind, name or path, id."""
    if isinstance(entry, ItemSummary):
        return format_summary(graph, id_, entry)
    path = graph.path_of(id_)
    name = "::".join(path) if path else (entry.name or "<anonymous>")
    return f"{entry.kind.value} {name} ({id_})"


def format_item(graph: CrateGraph, item: Item) -> list[str]:
    """Markdown description of a full item."""
    path = graph.path_of(item.id)
    title = "::".join(path) if path else (item.name or "<anonymous>")
    output = [f"# {item.kind.value} {title}", f"Id: {item.id}"]

    if item.crate_id != 0:
        external = graph.external_crate(item.crate_id)
        if external is not None:
            output.append(f"Crate: {external.name}")
    if item.span is not None:
        line, column = item.span.begin
        output.append(f"Source: {item.span.filename}:{line + 1}:{column + 1}")

    output.append(f"\n```rust\n{render_signature(item)}\n```")

    if item.attrs:
        output.append("\n## Attributes")
        output.extend(f"- `{attr}`" for attr in item.attrs)

    if item.deprecation is not None:
        since = f" since {item.deprecation.since}" if item.deprecation.since else ""
        note = f": {item.deprecation.note}" if item.deprecation.note else ""
        output.append(f"\n**Deprecated{since}**{note}")

    if item.docs:
        docs = item.docs
        if len(docs) > MAX_DOCS_CHARS:
            docs = docs[:MAX_DOCS_CHARS] + "\n... (truncated)"
        output.append(f"\n{docs}")

    if item.links:
        output.append("\n## Links")
        for text, target in item.links.items():
            entry = graph.get(target)
            described = format_item_line(graph, entry, target) if entry else target
            output.append(f"- `{text}` -> {described}")

    return output


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="rustdoc_get_item",
            description=(
                "Get one item of the loaded crate by id: kind, path, "
                "signature, attributes, docs and intra-doc links."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "id": {
                        "type": "string",
                        "description": "Item id (e.g., '0:3')",
                    },
                },
                "required": ["id"],
            },
        ),
        Tool(
            name="rustdoc_list_children",
            description=(
                "List the items declared in a module, in declaration order. "
                "Defaults to the crate root."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "id": {
                        "type": "string",
                        "description": "Module id (default: crate root)",
                    },
                    "kind": {
                        "type": "string",
                        "description": "Only list items of this kind (e.g., 'struct')",
                    },
                },
            },
        ),
        Tool(
            name="rustdoc_list_impls",
            description=(
                "List the impl blocks of a trait, or of a struct, enum or union."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "id": {
                        "type": "string",
                        "description": "Trait, struct, enum or union id",
                    },
                },
                "required": ["id"],
            },
        ),
        Tool(
            name="rustdoc_resolve_link",
            description="Resolve an intra-doc link written in an item's docs.",
            inputSchema={
                "type": "object",
                "properties": {
                    "item_id": {
                        "type": "string",
                        "description": "Id of the item whose docs contain the link",
                    },
                    "link": {
                        "type": "string",
                        "description": "Link text as written (e.g., 'Vec')",
                    },
                },
                "required": ["item_id", "link"],
            },
        ),
        Tool(
            name="rustdoc_find_path",
            description="Find an item by fully qualified path (e.g., 'std::vec::Vec').",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Qualified path with '::' separators",
                    },
                },
                "required": ["path"],
            },
        ),
        Tool(
            name="rustdoc_status",
            description="Show the loaded crate and any decode diagnostics.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""

    if name == "rustdoc_get_item":
        try:
            validated = ItemLookupInput(id=arguments.get("id"))
        except ValidationError as e:
            return [TextContent(type="text", text=f"Validation error: {e}")]
        return await handle_get_item(validated.id)

    elif name == "rustdoc_list_children":
        try:
            validated = ChildrenInput(
                id=arguments.get("id"),
                kind=arguments.get("kind"),
            )
        except ValidationError as e:
            return [TextContent(type="text", text=f"Validation error: {e}")]
        return await handle_list_children(validated.id, validated.kind)

    elif name == "rustdoc_list_impls":
        try:
            validated = ItemLookupInput(id=arguments.get("id"))
        except ValidationError as e:
            return [TextContent(type="text", text=f"Validation error: {e}")]
        return await handle_list_impls(validated.id)

    elif name == "rustdoc_resolve_link":
        try:
            validated = LinkInput(
                item_id=arguments.get("item_id"),
                link=arguments.get("link"),
            )
        except ValidationError as e:
            return [TextContent(type="text", text=f"Validation error: {e}")]
        return await handle_resolve_link(validated.item_id, validated.link)

    elif name == "rustdoc_find_path":
        try:
            validated = PathLookupInput(path=arguments.get("path"))
        except ValidationError as e:
            return [TextContent(type="text", text=f"Validation error: {e}")]
        return await handle_find_path(validated.path)

    elif name == "rustdoc_status":
        return await handle_status()

    else:
        return [TextContent(
            type="text",
            text=f"Unknown tool: {name}",
        )]


async def handle_get_item(id_: str) -> list[TextContent]:
    """Handle item lookup."""
    if GRAPH is None:
        return _no_crate()

    item = GRAPH.item(id_)
    if item is None:
        summary = GRAPH.summary(id_)
        if summary is None:
            return _not_found(id_)
        return [TextContent(
            type="text",
            text=(
                format_summary(GRAPH, id_, summary)
                + "\n\nOnly a path summary is available for this item."
            ),
        )]

    return [TextContent(type="text", text="\n".join(format_item(GRAPH, item)))]


async def handle_list_children(id_: str | None, kind: str | None) -> list[TextContent]:
    """Handle module listing."""
    if GRAPH is None:
        return _no_crate()

    module = GRAPH.root if id_ is None else GRAPH.item(id_)
    if module is None:
        return _not_found(id_)

    try:
        children = GRAPH.children_with_ids(module)
    except ValueError as e:
        return [TextContent(type="text", text=str(e))]

    wanted = ItemKind(kind) if kind else None
    output = [f"# Contents of {format_item_line(GRAPH, module, module.id)}\n"]
    count = 0
    for child_id, child in children:
        if wanted is not None and child.kind is not wanted:
            continue
        output.append(f"- {format_item_line(GRAPH, child, child_id)}")
        count += 1

    if count == 0:
        output.append("(no items)")

    return [TextContent(type="text", text="\n".join(output))]


async def handle_list_impls(id_: str) -> list[TextContent]:
    """Handle impl listing."""
    if GRAPH is None:
        return _no_crate()

    item = GRAPH.item(id_)
    if item is None:
        return _not_found(id_)

    try:
        impls = GRAPH.implementations_of(item)
    except ValueError as e:
        return [TextContent(type="text", text=str(e))]

    if not impls:
        return [TextContent(type="text", text=f"No impls found for {id_}")]

    output = [f"# Impls of {format_item_line(GRAPH, item, item.id)}\n"]
    for impl in impls:
        output.append(f"- `{render_signature(impl)}` ({impl.id})")

    return [TextContent(type="text", text="\n".join(output))]


async def handle_resolve_link(item_id: str, link: str) -> list[TextContent]:
    """Handle intra-doc link resolution."""
    if GRAPH is None:
        return _no_crate()

    item = GRAPH.item(item_id)
    if item is None:
        return _not_found(item_id)

    target = GRAPH.resolve_link(item, link)
    if target is None:
        return [TextContent(
            type="text",
            text=f"No link {link!r} in the docs of {item_id}",
        )]

    entry = GRAPH.get(target)
    if entry is None:
        return [TextContent(type="text", text=f"{link} -> {target} (unresolved)")]

    return [TextContent(
        type="text",
        text=f"{link} -> {format_item_line(GRAPH, entry, target)}",
    )]


async def handle_find_path(path: str) -> list[TextContent]:
    """Handle qualified path lookup."""
    if GRAPH is None:
        return _no_crate()

    id_ = GRAPH.find_by_path(path)
    if id_ is None:
        return [TextContent(type="text", text=f"No item at path: {path}")]

    entry = GRAPH.get(id_)
    if isinstance(entry, Item):
        return [TextContent(type="text", text="\n".join(format_item(GRAPH, entry)))]
    return [TextContent(type="text", text=format_summary(GRAPH, id_, entry))]


async def handle_status() -> list[TextContent]:
    """Handle status check."""
    if GRAPH is None or RESULT is None:
        return _no_crate()

    crate = GRAPH.crate
    output = ["# rustdoc-mcp Status\n"]

    output.append("## Crate")
    if CRATE_PATH is not None:
        output.append(f"  File: {CRATE_PATH}")
    output.append(f"  Root: {GRAPH.root.name} ({crate.root})")
    output.append(f"  Version: {crate.crate_version or 'unknown'}")
    output.append(f"  Format version: {crate.format_version}")
    output.append(f"  Includes private items: {crate.includes_private}")
    output.append(f"  Items: {len(crate.index)}")
    output.append(f"  Paths: {len(crate.paths)}")

    if crate.external_crates:
        output.append("\n## External crates")
        for crate_id, external in sorted(crate.external_crates.items()):
            url = f" {external.html_root_url}" if external.html_root_url else ""
            output.append(f"  {crate_id}: {external.name}{url}")

    output.append("\n## Diagnostics")
    if RESULT.ok:
        output.append("  None")
    else:
        for diagnostic in RESULT.diagnostics:
            output.append(f"  {type(diagnostic).__name__}: {diagnostic}")

    return [TextContent(type="text", text="\n".join(output))]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def run(crate_path: Path | None = None, config: Config | None = None):
    """Entry point for the MCP server."""
    import asyncio

    if config is None:
        config = load_config()
    crate_path = crate_path or config.server.crate_path
    if crate_path is not None:
        load_graph(crate_path, config)
    else:
        logger.warning("No crate configured; set RUSTDOC_MCP_CRATE or server.crate_path")

    asyncio.run(main())


if __name__ == "__main__":
    run()
