import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from axbuild._artifact import decode_circuit_source
from axbuild._build import CompileOptions, OutcomeKind, compile_circuit_sync
from axbuild._writer import read_artifact

from .config import get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Axbuild CLI."""
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
        force=True,
    )


@app.command()
def compile(  # noqa: A001, PLR0913
    path: Annotated[
        str | None,
        typer.Argument(help="Path to the circuit script or module path (e.g., examples.double:circuit)"),
    ] = None,
    *,
    function: Annotated[
        str | None,
        typer.Option("-f", "--function", help="Name of the exported circuit function (default: circuit)"),
    ] = None,
    inputs: Annotated[
        Path | None,
        typer.Option("-i", "--inputs", help="Path to a JSON file with circuit inputs"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Output file or directory for build.json"),
    ] = None,
    provider: Annotated[
        str | None,
        typer.Option("-p", "--provider", help="Provider URI (default: $PROVIDER_URI)"),
    ] = None,
    stats: Annotated[
        bool,
        typer.Option("--stats", help="Print compilation timings"),
    ] = False,
) -> None:
    """Compile a circuit and write its build artifact."""
    config = get_config()
    if config.project_root is not None:
        logger.debug(f"Using configuration from {config.project_root / 'pyproject.toml'}")
    if path is None:
        if config.circuit is None:
            err_console.print("[red]Error: No circuit given. Pass a path or set circuit in \\[tool.axbuild][/red]")
            raise typer.Exit(code=1)
        path = config.circuit

    options = CompileOptions(
        function=function if function is not None else config.function,
        inputs=inputs if inputs is not None else config.inputs,
        output=output if output is not None else config.output,
        provider=provider if provider is not None else config.provider,
    )

    err_console.print()
    err_console.print(f"[cyan]Compiling circuit from:[/cyan] {path}")
    if options.inputs is not None:
        err_console.print(f"[cyan]Loading inputs from:[/cyan] {options.inputs}")

    outcome = compile_circuit_sync(path, options)

    if outcome.kind is OutcomeKind.COMPILATION_FAILED:
        err_console.print()
        err_console.print("[yellow]⚠ Compilation failed, no build artifact was written[/yellow]")
        err_console.print()
        return

    err_console.print(f"[cyan]Wrote build artifact to:[/cyan] {outcome.output_path}")

    if stats and outcome.artifact is not None:
        timings = outcome.artifact.result.get("timings") or {}
        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Stage", style="dim")
        table.add_column("Time (ms)", justify="right")
        for stage, value in timings.items():
            table.add_row(str(stage), str(value))
        err_console.print()
        err_console.print(Panel(table, title="[bold]Compilation Stats[/bold]", border_style="cyan"))

    err_console.print()
    err_console.print("[green]✓ Build complete[/green]")
    err_console.print()


@app.command()
def decode(
    build: Annotated[
        Path,
        typer.Argument(help="Path to a build.json file or the directory holding it"),
    ],
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Write the circuit source to this file instead of stdout"),
    ] = None,
) -> None:
    """Print the circuit source stored in a build artifact."""
    artifact = read_artifact(build)
    import_name, source = decode_circuit_source(artifact["circuit"])

    if output is None:
        err_console.print(f"[cyan]Import name:[/cyan] [bold]{import_name}[/bold]")
        out_console.print(Syntax(source, "python"))
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(source, encoding="utf-8")
    err_console.print(f"[green]✓ Circuit '{import_name}' written to {output}[/green]")


def main() -> None:
    app()
