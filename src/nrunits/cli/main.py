# src/nrunits/cli/main.py
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from nrunits.cli.constants import constants_app
from nrunits.core.logging import configure_logging, setup_logfile
from nrunits.core.registry import run_self_test
from nrunits.core.version import __version__

console = Console()

app = typer.Typer(
    help="nrunits: constants and unit conversions for numerical relativity",
    context_settings={"help_option_names": ["-h", "--help"]}
)

app.add_typer(constants_app, name="constants")


def _version_callback(value: bool):
    if value:
        typer.echo(f"nrunits version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also log to this file"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """
    Inspect the unit table of nrunits.

    Use 'nrunits COMMAND --help' to see options for specific commands.
    """
    try:
        configure_logging("DEBUG" if verbose else None)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    if log_file is not None:
        setup_logfile(str(log_file), level="DEBUG" if verbose else "INFO")


@app.command("check")
def check():
    """Run the self-consistency checks on the table."""
    report = run_self_test()

    for title, errors in (
        ("Relation errors", report.relation_errors),
        ("Documented value mismatches", report.documented_errors),
    ):
        if errors:
            console.print(f"[bold red]{title}:[/bold red]")
            for name, err in errors.items():
                console.print(f"  {name}: {err}")
    if report.dependency_error:
        console.print(f"[bold red]Dependency error:[/bold red] {report.dependency_error}")

    console.print(
        f"{report.total} constants in {report.sections} sections "
        f"({report.primary} primary, {report.derived} derived)"
    )
    if not report.ok:
        console.print("[bold red]✗ Self test failed[/bold red]")
        raise typer.Exit(1)
    console.print("[bold green]✓ All checks passed[/bold green]")


if __name__ == "__main__":
    app()
