"""CLI interface for spike-studio."""

import asyncio
import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config.logging import setup_logging
from .config.settings import get_settings
from .exceptions import ConfigurationError
from .service import SpikeService

app = typer.Typer(
    name="spike-studio",
    help="Discover, preview and auto-select project scaffolding spikes.",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

console = Console()


def _parse_params(pairs: Optional[List[str]]) -> dict[str, str]:
    """Parse repeated ``--param key=value`` options.

    Raises:
        typer.BadParameter: If an entry has no ``=``.
    """
    params: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got '{pair}'")
        params[key.strip()] = value
    return params


def _service() -> SpikeService:
    try:
        return SpikeService.from_settings(get_settings())
    except ConfigurationError as e:
        console.print(f"[red]Failed to load configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _unwrap(result: dict) -> dict:
    """Return the payload data or exit with the error message."""
    if not result["success"]:
        console.print(f"[red]Error:[/red] {escape(result['error'])}")
        raise typer.Exit(1)
    return result["data"]


def _print_json(data: object) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False, default=str))


def _print_files(data: dict) -> None:
    for f in data["files"]:
        body = escape(f["content"]) if f["content"] else "[dim](empty)[/dim]"
        console.print(Panel(body, title=escape(f["path"]), border_style="cyan"))
    for p in data["patches"]:
        console.print(
            Panel(escape(p["diff"]), title=escape(f"patch: {p['path']}"), border_style="yellow")
        )


@app.command()
def discover(
    query: Optional[str] = typer.Argument(None, help="Free-text query to rank spikes"),
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Page size"),
    offset: int = typer.Option(0, "--offset", min=0, help="Page offset"),
    filter_pattern: Optional[str] = typer.Option(
        None, "--filter", "-f", help="Case-insensitive regex over spike ids"
    ),
    pack: Optional[str] = typer.Option(None, "--pack", "-p", help="Restrict to a spike pack"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List spikes ranked against a query.

    Examples:
        spike-studio discover "elysia worker typed"
        spike-studio discover --pack payments --limit 50
    """
    data = _unwrap(
        asyncio.run(_service().discover(query, limit, offset, filter_pattern, pack))
    )
    if as_json:
        _print_json(data)
        return
    table = Table(title=data["summary"], show_header=True, header_style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Spike", style="cyan")
    table.add_column("Stack")
    table.add_column("Tags", style="dim")
    for item in data["items"]:
        table.add_row(
            f"{item['score']:.2f}", item["id"], ", ".join(item["stack"]), ", ".join(item["tags"])
        )
    console.print(table)
    if data["has_more"]:
        console.print(f"[dim]More results: --offset {data['offset'] + len(data['items'])}[/dim]")


@app.command()
def preview(
    spike_id: str = typer.Argument(..., help="Spike id"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-P", help="key=value"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """Render a spike without writing anything."""
    data = _unwrap(asyncio.run(_service().preview(spike_id, _parse_params(param))))
    if as_json:
        _print_json(data)
        return
    console.print(f"[bold]{data['summary']}[/bold]")
    _print_files(data)


@app.command()
def apply(
    spike_id: str = typer.Argument(..., help="Spike id"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-P", help="key=value"),
    strategy: str = typer.Option(
        "three_way_merge", "--strategy", "-s", help="overwrite, three_way_merge or abort"
    ),
) -> None:
    """Show the apply plan for a spike as JSON."""
    data = _unwrap(asyncio.run(_service().apply(spike_id, _parse_params(param), strategy)))
    _print_json(data)


@app.command()
def validate(
    spike_id: str = typer.Argument(..., help="Spike id"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-P", help="key=value"),
) -> None:
    """Check that a spike renders cleanly."""
    data = _unwrap(asyncio.run(_service().validate(spike_id, _parse_params(param))))
    color = "green" if data["status"] == "pass" else "yellow"
    console.print(f"[{color}]{data['summary']}[/{color}]")
    for issue in data["issues"]:
        label = escape(f"[{issue['level']}]")
        console.print(f"  {label} {escape(issue['message'])}")


@app.command()
def explain(spike_id: str = typer.Argument(..., help="Spike id")) -> None:
    """Describe a spike."""
    data = _unwrap(asyncio.run(_service().explain(spike_id)))
    console.print(Panel(escape(data["summary"]), title=escape(spike_id), border_style="blue"))


@app.command()
def auto(
    task: str = typer.Argument(..., help="Task description, e.g. 'Elysia typed worker in TS'"),
    constraint: Optional[List[str]] = typer.Option(
        None, "--constraint", "-c", help="key=value (language, style, library, ...)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """Pick the best spike for a task."""
    if not task.strip():
        console.print("[red]Task cannot be empty[/red]")
        raise typer.Exit(1)
    data = _unwrap(asyncio.run(_service().auto_select(task, _parse_params(constraint))))
    if as_json:
        _print_json(data)
        return
    style = "yellow" if data["low_confidence"] else "green"
    console.print(f"[{style}]{data['summary']}[/{style}]")
    if data["candidates"]:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Score", justify="right")
        table.add_column("Candidate", style="cyan")
        table.add_column("Alias")
        for c in data["candidates"]:
            table.add_row(f"{c['score']:.2f}", c["id"], "yes" if c["alias"] else "")
        console.print(table)
    for q in data["questions"]:
        console.print(f"[yellow]?[/yellow] {q}")


@app.command()
def packs() -> None:
    """List spike packs."""
    data = _unwrap(_service().packs())
    table = Table(show_header=True, header_style="bold")
    table.add_column("Pack", style="cyan")
    table.add_column("Description")
    for p in data["packs"]:
        table.add_row(p["key"], p["description"])
    console.print(table)


@app.command("list-generated")
def list_generated(
    lib: Optional[List[str]] = typer.Option(None, "--lib", help="Library filter (repeatable)"),
    pattern: Optional[List[str]] = typer.Option(None, "--pattern", help="Pattern filter"),
    style: Optional[List[str]] = typer.Option(None, "--style", help="Style filter"),
    lang: Optional[List[str]] = typer.Option(None, "--lang", help="Language filter"),
    prefix: str = typer.Option("strike", "--prefix", help="strike, gen or any"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=0),
) -> None:
    """List generated spike ids narrowed per dimension."""
    data = _unwrap(_service().list_generated(lib, pattern, style, lang, prefix, limit))
    for spike_id in data["ids"][: data["shown"]]:
        console.print(spike_id)
    if data["count"] > data["shown"]:
        console.print(f"[dim]... {data['count'] - data['shown']} more[/dim]")
    console.print(f"[bold]{data['count']}[/bold] id(s)")


@app.command()
def stats() -> None:
    """Show catalog statistics."""
    data = _unwrap(_service().stats())
    table = Table(show_header=False, box=None)
    table.add_column("Stat", style="cyan")
    table.add_column("Value")
    table.add_row("Total ids", str(data["total"]))
    table.add_row("Override files", str(data["files_count"]))
    table.add_row("Generated (listed)", str(data["generated_count"]))
    table.add_row("Identifier space", str(data["identifier_space_size"]))
    table.add_row("Duplicates", ", ".join(data["duplicates"]) or "-")
    console.print(table)


@app.command()
def materialize(
    spike_id: Optional[List[str]] = typer.Argument(None, help="Ids to write (default: listing)"),
    pack: Optional[str] = typer.Option(None, "--pack", "-p", help="Restrict to a spike pack"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=0),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace existing files"),
    fmt: str = typer.Option("json", "--format", help="json or yaml"),
) -> None:
    """Write synthesized spikes into the override directory."""
    data = _unwrap(_service().materialize(spike_id, pack, limit, overwrite, fmt))
    console.print(f"[green]{data['summary']}[/green] -> {data['directory']}")


def main() -> None:
    """Entry point for the CLI."""
    try:
        log_level = get_settings().log_level
    except ConfigurationError:
        # Use default log level if settings fail to load
        log_level = "INFO"
    setup_logging(level=log_level)
    app()


if __name__ == "__main__":
    main()
