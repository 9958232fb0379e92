"""
gomorph CLI - Main entry point.

Translates one Java compilation unit into a Go source file.
"""

import logging
from pathlib import Path
from typing import Optional

import orjson
import typer
from rich.console import Console
from rich.table import Table

from gomorph.config.loader import ConfigurationError, generate_default_config, load_config, load_config_from_yaml
from gomorph.config.models import DEFAULT_CONFIG_FILENAME, MigrationConfig, MigrationDiagnostic, MigrationMode
from gomorph.java.errors import MigrationError
from gomorph.java.migration import migrate_source, render

app = typer.Typer(
    name="gomorph",
    help="Source-to-source translation of Java into Go",
    no_args_is_help=True,
)

console = Console(stderr=True)


# =============================================================================
# Helper Functions
# =============================================================================


def print_diagnostics(diagnostics: list[MigrationDiagnostic]) -> None:
    """Print a table of members that could not be migrated."""
    table = Table(title=f"{len(diagnostics)} member(s) not migrated")
    table.add_column("Location", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Node", style="dim")
    table.add_column("Message")
    for diagnostic in diagnostics:
        first_line = diagnostic.message.splitlines()[0] if diagnostic.message else ""
        table.add_row(diagnostic.location, diagnostic.category.value, diagnostic.node_kind, first_line)
    console.print(table)


def write_report(
    report_path: Path, source: Path, mode: MigrationMode, diagnostics: list[MigrationDiagnostic]
) -> None:
    """Write the diagnostics of one run as JSON."""
    report = {
        "source": str(source),
        "mode": mode.value,
        "migrated_cleanly": not diagnostics,
        "diagnostics": [d.model_dump(mode="json") for d in diagnostics],
    }
    with open(report_path, "wb") as f:
        f.write(orjson.dumps(report, option=orjson.OPT_INDENT_2))


# =============================================================================
# Commands
# =============================================================================


@app.command()
def translate(
    source: Path = typer.Argument(..., help="Java source file to translate"),
    dest: Optional[Path] = typer.Argument(None, help="Go output file (stdout when omitted)"),
    strict: bool = typer.Option(False, "--strict", "-W", help="Abort on the first member that cannot be migrated"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to configuration YAML file"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a JSON diagnostics report"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Translate a Java file to Go.

    Examples:
        gomorph translate Foo.java foo.go
        gomorph translate Foo.java --strict --report foo.json
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(name)s: %(message)s")

    try:
        java_source = source.read_bytes()
    except OSError as e:
        console.print(f"[bold red]Fatal:[/bold red] cannot read {source}: {e}")
        raise typer.Exit(1)

    try:
        settings = load_config_from_yaml(config) if config is not None else load_config()
    except ConfigurationError as e:
        console.print(f"[yellow]Configuration ignored:[/yellow] {e}")
        settings = MigrationConfig()

    mode = MigrationMode.STRICT if strict else MigrationMode.TOLERANT
    try:
        ctx = migrate_source(java_source, source_path=str(source), config=settings, mode=mode)
    except MigrationError as e:
        console.print(f"[bold red]Fatal:[/bold red] {e}")
        if e.node is not None:
            console.print(f"[dim]{e.node.to_sexp()}[/dim]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[bold red]Fatal:[/bold red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)

    go_source = render(ctx)
    if dest is not None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(go_source, encoding="utf-8")
        console.print(f"[green]✓[/green] Wrote {dest}")
    else:
        typer.echo(go_source, nl=False)

    if ctx.diagnostics:
        print_diagnostics(ctx.diagnostics)
    if report is not None:
        write_report(report, source, mode, ctx.diagnostics)
        console.print(f"[green]✓[/green] Wrote report {report}")


@app.command()
def init(
    output: str = typer.Argument(DEFAULT_CONFIG_FILENAME, help="Output path for config file"),
):
    """
    Generate a default configuration file.

    Creates a gomorph.yaml with the defaults, ready to customize.
    """
    output_path = Path(output)

    if output_path.exists():
        if not typer.confirm(f"{output} already exists. Overwrite?"):
            console.print("[yellow]Cancelled.[/yellow]")
            raise typer.Abort()

    generate_default_config(output_path)
    console.print(f"[green]✓[/green] Generated configuration file: {output}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
