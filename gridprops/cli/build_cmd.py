"""CLI commands that build properties from a case file."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from gridprops.core.config import build_properties, export_properties_hdf5, load_case_json
from gridprops.core.errors import GridPropertyError
from gridprops.core.properties import GridProperties
from gridprops.reports.summary import generate_text_report, property_statistics, save_text_report
from gridprops.utils.units import si_unit
from gridprops.utils.validation import Severity, validate_properties


def _load(console: Console, path: str) -> tuple[str, GridProperties]:
    case = load_case_json(path)
    try:
        return case.meta.name, build_properties(case)
    except GridPropertyError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)


@click.command("build")
@click.argument("case", type=click.Path(exists=True))
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Export property arrays to this HDF5 file.",
)
@click.pass_context
def build(ctx: click.Context, case: str, output: str | None) -> None:
    """Build grid properties from a case file and list them."""
    console: Console = ctx.obj.get("console", Console())
    name, props = _load(console, case)

    console.print(f"\n[bold]GridProps - {name}[/bold]")
    console.print(f"Grid {props.dims.nx} x {props.dims.ny} x {props.dims.nz} ({props.dims.size} cells)\n")

    table = Table(title="Grid Properties")
    table.add_column("Keyword", style="cyan")
    table.add_column("Kind", style="yellow")
    table.add_column("Min", style="green", justify="right")
    table.add_column("Max", style="green", justify="right")
    table.add_column("Unit", style="dim")

    for prop in list(props.int_properties()) + list(props.double_properties()):
        stats = property_statistics(prop)
        unit = si_unit(prop.dimension) if prop.dimension else "-"
        table.add_row(prop.name, prop.kind.value, f"{stats['min']:.6g}", f"{stats['max']:.6g}", unit)
    console.print(table)

    if len(props.faults):
        faults = Table(title="Faults")
        faults.add_column("Name", style="cyan")
        faults.add_column("Segments", justify="right")
        faults.add_column("Multiplier", style="green", justify="right")
        for fault in props.faults:
            faults.add_row(fault.name, str(len(fault.segments)), f"{fault.multiplier:.4g}")
        console.print(faults)

    if output:
        export_properties_hdf5(props, output)
        console.print(f"\n[dim]Saved to {output}[/dim]")


@click.command("regions")
@click.argument("case", type=click.Path(exists=True))
@click.argument("keyword")
@click.pass_context
def regions(ctx: click.Context, case: str, keyword: str) -> None:
    """List the distinct region ids of an integer KEYWORD."""
    console: Console = ctx.obj.get("console", Console())
    _, props = _load(console, case)
    try:
        ids = props.regions_of(keyword)
    except GridPropertyError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)

    if not ids:
        console.print(f"{keyword.upper()}: not set")
    else:
        console.print(f"{keyword.upper()}: {' '.join(str(r) for r in ids)}")


@click.command("check")
@click.argument("case", type=click.Path(exists=True))
@click.pass_context
def check(ctx: click.Context, case: str) -> None:
    """Validate the built properties."""
    console: Console = ctx.obj.get("console", Console())
    _, props = _load(console, case)
    result = validate_properties(props)

    styles = {Severity.ERROR: "red", Severity.WARNING: "yellow", Severity.INFO: "dim"}
    for msg in result.messages:
        style = styles[msg.severity]
        console.print(f"[{style}]{msg.severity.value.upper()}[/{style}] {msg.parameter}: {msg.message}")

    if result.is_valid:
        console.print("[green]Properties OK[/green]")
    else:
        raise SystemExit(1)


@click.command("report")
@click.argument("case", type=click.Path(exists=True))
@click.option("--output", "-o", type=click.Path(), default=None, help="Output text file.")
@click.pass_context
def report(ctx: click.Context, case: str, output: str | None) -> None:
    """Generate a property summary report."""
    console: Console = ctx.obj.get("console", Console())
    name, props = _load(console, case)

    if output:
        save_text_report(props, output, title=name)
        console.print(f"[green]Text report saved:[/green] {output}")
    else:
        console.print(generate_text_report(props, title=name))
