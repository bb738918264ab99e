"""CLI for rustdoc-mcp.

Commands:
- check: Decode a rustdoc JSON file and report diagnostics
- show: Show one item
- children: List a module's items
- impls: List the impls of a trait or type
- link: Resolve an intra-doc link
- find: Look up an item by qualified path
- dump: Re-encode a decoded crate
- serve: Run the MCP server
"""

import sys
from pathlib import Path

import click

from .config import DEFAULT_DATA_DIR, load_config
from .loader import CrateFileError, load_crate, save_crate
from .logging import level_for_verbosity, setup_logging
from .rustdoc import CrateGraph, DecodeError, DecodeResult, ItemKind, render_signature
from .server import format_item, format_item_line, run

CRATE_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.rustdoc-mcp/config.yaml)",
)
@click.option("-v", "--verbose", count=True, help="More log output (-vv for debug)")
@click.option("--json-logs", is_flag=True, help="Log as JSON lines")
@click.pass_context
def main(ctx, config_path: Path | None, verbose: int, json_logs: bool):
    """rustdoc-mcp - typed access to rustdoc JSON output."""
    setup_logging(level_for_verbosity(verbose), json_format=json_logs)

    ctx.ensure_object(dict)
    if config_path is not None:
        ctx.obj["config"] = load_config(config_path=config_path)
    else:
        ctx.obj["config"] = load_config(data_dir=DEFAULT_DATA_DIR)


def _load(ctx, path: Path, strict: bool | None = None) -> DecodeResult:
    """Decode a crate file, exiting with status 1 on fatal errors."""
    config = ctx.obj["config"]
    if strict is not None:
        config.decode.strict = strict

    try:
        return load_crate(path, config)
    except CrateFileError as e:
        click.echo(f"{click.style('Error:', fg='red')} {e}", err=True)
        sys.exit(1)
    except DecodeError as e:
        click.echo(
            f"{click.style(type(e).__name__ + ':', fg='red')} {e}", err=True
        )
        sys.exit(1)


def _graph(ctx, path: Path) -> CrateGraph:
    return CrateGraph(_load(ctx, path).crate)


@main.command()
@click.argument("path", type=CRATE_FILE)
@click.option("--strict", is_flag=True, help="Fail on the first diagnostic")
@click.pass_context
def check(ctx, path: Path, strict: bool):
    """Decode a rustdoc JSON file and report problems."""
    result = _load(ctx, path, strict=strict or None)
    crate = result.crate
    graph = CrateGraph(crate)

    click.echo(f"Crate: {click.style(graph.root.name or crate.root, bold=True)}")
    click.echo(f"  Version: {crate.crate_version or 'unknown'}")
    click.echo(f"  Items: {len(crate.index)}")
    click.echo(f"  Paths: {len(crate.paths)}")
    click.echo(f"  External crates: {len(crate.external_crates)}")

    if result.ok:
        click.echo(f"\n{click.style('✓', fg='green')} No problems found")
        return

    click.echo(f"\n{len(result.diagnostics)} diagnostics:")
    for diagnostic in result.diagnostics:
        name = click.style(type(diagnostic).__name__, fg="yellow")
        click.echo(f"  {name}: {diagnostic}")


@main.command()
@click.argument("path", type=CRATE_FILE)
@click.argument("item_id")
@click.pass_context
def show(ctx, path: Path, item_id: str):
    """Show an item's header, signature and docs."""
    graph = _graph(ctx, path)

    item = graph.item(item_id)
    if item is None:
        summary = graph.summary(item_id)
        if summary is None:
            click.echo(f"Item not found: {item_id}")
            sys.exit(1)
        click.echo(format_item_line(graph, summary, item_id))
        return

    for line in format_item(graph, item):
        click.echo(line)


@main.command()
@click.argument("path", type=CRATE_FILE)
@click.argument("module_id", required=False)
@click.option(
    "--kind",
    type=click.Choice([k.value for k in ItemKind]),
    help="Only list items of this kind",
)
@click.pass_context
def children(ctx, path: Path, module_id: str | None, kind: str | None):
    """List the items of a module (default: crate root)."""
    graph = _graph(ctx, path)

    module = graph.root if module_id is None else graph.item(module_id)
    if module is None:
        click.echo(f"Item not found: {module_id}")
        sys.exit(1)

    try:
        entries = graph.children_with_ids(module)
    except ValueError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    for child_id, child in entries:
        if kind is not None and child.kind.value != kind:
            continue
        click.echo(format_item_line(graph, child, child_id))


@main.command()
@click.argument("path", type=CRATE_FILE)
@click.argument("item_id")
@click.pass_context
def impls(ctx, path: Path, item_id: str):
    """List the impls of a trait, struct, enum or union."""
    graph = _graph(ctx, path)

    item = graph.item(item_id)
    if item is None:
        click.echo(f"Item not found: {item_id}")
        sys.exit(1)

    try:
        found = graph.implementations_of(item)
    except ValueError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    if not found:
        click.echo("No impls found.")
        return

    for impl in found:
        click.echo(f"{click.style(render_signature(impl), bold=True)} ({impl.id})")


@main.command()
@click.argument("path", type=CRATE_FILE)
@click.argument("item_id")
@click.argument("text")
@click.pass_context
def link(ctx, path: Path, item_id: str, text: str):
    """Resolve intra-doc link TEXT in the docs of an item."""
    graph = _graph(ctx, path)

    item = graph.item(item_id)
    if item is None:
        click.echo(f"Item not found: {item_id}")
        sys.exit(1)

    target = graph.resolve_link(item, text)
    if target is None:
        click.echo(f"No link {text!r} in the docs of {item_id}")
        sys.exit(1)

    entry = graph.get(target)
    if entry is None:
        click.echo(f"{target} (unresolved)")
        return
    click.echo(format_item_line(graph, entry, target))


@main.command()
@click.argument("path", type=CRATE_FILE)
@click.argument("qualified_path")
@click.pass_context
def find(ctx, path: Path, qualified_path: str):
    """Find an item by qualified path, e.g. std::vec::Vec."""
    graph = _graph(ctx, path)

    target = graph.find_by_path(qualified_path)
    if target is None:
        click.echo(f"No item at path: {qualified_path}")
        sys.exit(1)

    click.echo(format_item_line(graph, graph.get(target), target))


@main.command()
@click.argument("path", type=CRATE_FILE)
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--indent", type=int, default=None, help="Pretty-print with this indent")
@click.pass_context
def dump(ctx, path: Path, output: Path, indent: int | None):
    """Decode PATH and write it back out as rustdoc JSON."""
    result = _load(ctx, path)

    save_crate(result.crate, output, indent=indent)

    dropped = len(result.diagnostics)
    click.echo(f"Wrote {len(result.crate.index)} items to {output}")
    if dropped:
        click.echo(f"  ({dropped} diagnostics; entries that failed to decode were left out)")


@main.command()
@click.argument("path", type=CRATE_FILE, required=False)
@click.pass_context
def serve(ctx, path: Path | None):
    """Run the MCP server over stdio."""
    config = ctx.obj["config"]
    if path is None and config.server.crate_path is None:
        click.echo("Error: no crate given and server.crate_path is not set", err=True)
        sys.exit(1)

    try:
        run(path, config)
    except (CrateFileError, DecodeError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
