# src/nrunits/cli/constants.py
import json
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from nrunits.core.constants import ConstantSection, ConstantStatus
from nrunits.core.logging import logger
from nrunits.core.registry import (
    as_record,
    export_to_latex,
    export_to_yaml,
    get_constant,
    print_registry,
)

console = Console()
constants_app = typer.Typer(help="Inspect and export the unit table.")


class ShowFormat(str, Enum):
    plain = "plain"
    json = "json"
    md = "md"


class ExportFormat(str, Enum):
    yaml = "yaml"
    latex = "latex"


def _lookup(name: str):
    try:
        return get_constant(name)
    except KeyError as e:
        console.print(f"[red]{e.args[0]}[/red]")
        raise typer.Exit(1)


def _parse_section(section: Optional[str]) -> Optional[ConstantSection]:
    if section is None:
        return None
    try:
        return ConstantSection[section.upper()]
    except KeyError:
        choices = ", ".join(s.attr for s in ConstantSection)
        raise typer.BadParameter(f"Unknown section {section!r}. Choose from: {choices}")


@constants_app.command("list")
def list_constants(
    section: Optional[str] = typer.Option(None, "--section", "-s", help="Only this section (e.g. lorene, si)"),
    derived: Optional[bool] = typer.Option(None, "--derived/--primary", help="Only derived or only primary values"),
):
    """List constants grouped by section."""
    status = None
    if derived is not None:
        status = ConstantStatus.DERIVED if derived else ConstantStatus.PRIMARY
    print_registry(section=_parse_section(section), status=status, console=console)


@constants_app.command("show")
def show_constant(
    name: str = typer.Argument(..., help="Constant name"),
    format: ShowFormat = typer.Option(ShowFormat.plain, "--format", "-f", help="Output format"),
):
    """Show all metadata for a constant."""
    const = _lookup(name)
    record = as_record(const)
    if format == ShowFormat.json:
        typer.echo(json.dumps(record, indent=2))
    elif format == ShowFormat.md:
        typer.echo(
            f"## {const.name}\n\n"
            f"{const.description}\n\n"
            f"- **Value:** {const.value!r} {const.units}\n"
            f"- **Section:** {const.section.value}\n"
            f"- **Status:** {const.status.value}\n"
            f"- **Relation:** {const.relation or '—'}\n"
        )
    else:
        for key, val in record.items():
            console.print(f"[bold cyan]{key}[/bold cyan]: {val}")


@constants_app.command("value")
def show_value(name: str = typer.Argument(..., help="Constant name")):
    """Print the exact value (round-trippable float repr)."""
    typer.echo(repr(_lookup(name).value))


@constants_app.command("export")
def export(
    format: ExportFormat = typer.Argument(..., help="yaml or latex"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Target file (default: constants.<ext>)"),
):
    """Write the whole table to YAML or a LaTeX longtable."""
    if output is None:
        output = Path("constants.yaml" if format == ExportFormat.yaml else "constants.tex")
    if output.parent and not output.parent.exists():
        output.parent.mkdir(parents=True, exist_ok=True)

    if format == ExportFormat.yaml:
        export_to_yaml(str(output))
    else:
        export_to_latex(str(output))
    logger.debug(f"export format={format.value} output={output}")
    console.print(f"[bold green]Wrote {output}[/bold green]")
