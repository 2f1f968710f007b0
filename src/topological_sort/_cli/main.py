import logging
import sys
from pathlib import Path
from typing import Annotated, cast, get_args

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from topological_sort._errors import CycleError, InputFormatError
from topological_sort._graph import TopologicalSort
from topological_sort._io import InputFormat, load_topological_sort, parse_pairs, parse_toml

from .config import ConfigError, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

PathArgument = Annotated[
    str | None,
    typer.Argument(help="Path to a TOML or pairs file, or '-' to read stdin (pairs unless --format toml)"),
]
FormatOption = Annotated[
    str | None,
    typer.Option("-f", "--format", help="Input format: auto, toml or pairs"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Order elements so that every element comes after its dependencies."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_graph(path: str | None, input_format: str | None) -> TopologicalSort[str]:
    """Load the graph from the CLI path, stdin or the configured input file."""
    if path == "-":
        return _load_graph_from_stdin(input_format)

    try:
        config = get_config()
    except ConfigError as e:
        raise typer.BadParameter(str(e)) from e

    if path is not None:
        input_path = Path(path)
    elif config.input is not None:
        input_path = config.input
    else:
        msg = "No input specified. Provide a path argument or configure [tool.toposort].input in pyproject.toml."
        raise typer.BadParameter(msg)

    fmt = input_format if input_format is not None else config.format
    if fmt not in get_args(InputFormat):
        msg = f"Unknown format {fmt!r}: expected auto, toml or pairs"
        raise typer.BadParameter(msg)

    err_console.print(f"[cyan]Loading dependencies from:[/cyan] {escape(str(input_path))}")
    try:
        return load_topological_sort(input_path, cast("InputFormat", fmt))
    except FileNotFoundError as e:
        msg = f"Input file not found: {input_path}"
        raise typer.BadParameter(msg) from e
    except InputFormatError as e:
        raise typer.BadParameter(str(e)) from e


def _load_graph_from_stdin(input_format: str | None) -> TopologicalSort[str]:
    """Read stdin as TOML with ``--format toml``, otherwise as pairs."""
    if input_format is not None and input_format not in get_args(InputFormat):
        msg = f"Unknown format {input_format!r}: expected auto, toml or pairs"
        raise typer.BadParameter(msg)

    logger.debug(f"Reading {input_format or 'pairs'} input from stdin")
    try:
        text = sys.stdin.read()
    except UnicodeDecodeError as e:
        msg = f"Standard input is not valid UTF-8: {e}"
        raise typer.BadParameter(msg) from e

    try:
        if input_format == "toml":
            return parse_toml(text)
        return parse_pairs(text)
    except InputFormatError as e:
        raise typer.BadParameter(str(e)) from e


def _report_cycle(remaining: frozenset[str]) -> None:
    err_console.print()
    err_console.print(f"[red]✗ Cycle detected: {len(remaining)} element(s) can never become ready[/red]")
    for elt in sorted(remaining):
        err_console.print(f"  [red]•[/red] {escape(elt)}")
    err_console.print()


@app.command()
def order(
    path: PathArgument = None,
    *,
    input_format: FormatOption = None,
) -> None:
    """Print elements one per line, each after all of its dependencies."""
    ts = _load_graph(path, input_format)

    for elt in ts:
        out_console.print(elt, markup=False, highlight=False)

    if not ts.is_empty():
        _report_cycle(ts.remaining())
        raise typer.Exit(code=1)


@app.command()
def batches(
    path: PathArgument = None,
    *,
    input_format: FormatOption = None,
) -> None:
    """Print rounds of elements that only depend on earlier rounds."""
    ts = _load_graph(path, input_format)

    try:
        rounds = ts.batches()
    except CycleError as e:
        _report_cycle(e.remaining)
        raise typer.Exit(code=1) from e

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Round", justify="right", style="dim")
    table.add_column("Elements")
    for i, batch in enumerate(rounds, start=1):
        table.add_row(str(i), escape(" ".join(sorted(batch))))
    out_console.print(table)


@app.command()
def check(
    path: PathArgument = None,
    *,
    input_format: FormatOption = None,
) -> None:
    """Check that the dependencies can be fully ordered."""
    ts = _load_graph(path, input_format)
    n_elements = len(ts)
    n_ready = len(ts.ready())

    try:
        rounds = ts.batches()
    except CycleError as e:
        _report_cycle(e.remaining)
        raise typer.Exit(code=1) from e

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right", style="yellow")
    table.add_row("Elements", str(n_elements))
    table.add_row("Initially ready", str(n_ready))
    table.add_row("Rounds", str(len(rounds)))

    err_console.print(Panel(table, title="[bold]Dependencies[/bold]", border_style="cyan"))
    err_console.print()
    err_console.print("[green]✓ No cycles found[/green]")
    err_console.print()


def main() -> None:
    app()
