"""CLI command for listing supported keywords."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from gridprops.core.registry import PropertyKind, default_registry
from gridprops.utils.units import UnitSystem, deck_unit, si_unit


@click.group("info")
@click.pass_context
def info(ctx: click.Context) -> None:
    """Inspect the keyword registry."""
    pass


@info.command("keywords")
@click.option(
    "--kind",
    type=click.Choice(["int", "double"], case_sensitive=False),
    default=None,
    help="Only list keywords of this kind.",
)
@click.option(
    "--units",
    type=click.Choice([u.value for u in UnitSystem], case_sensitive=False),
    default=UnitSystem.METRIC.value,
    show_default=True,
    help="Input unit system shown in the table.",
)
@click.pass_context
def info_keywords(ctx: click.Context, kind: str | None, units: str) -> None:
    """List supported grid property keywords."""
    console: Console = ctx.obj.get("console", Console())
    registry = default_registry()
    unit_system = UnitSystem(units.upper())

    table = Table(title="Supported Keywords")
    table.add_column("Keyword", style="cyan")
    table.add_column("Kind", style="yellow")
    table.add_column("Default", justify="right")
    table.add_column("Input Unit", style="green")
    table.add_column("Stored Unit", style="dim")
    table.add_column("Region Set")

    wanted = PropertyKind(kind.lower()) if kind else None
    for desc in registry:
        if wanted is not None and desc.kind is not wanted:
            continue
        table.add_row(
            desc.name,
            desc.kind.value,
            str(desc.default_value),
            deck_unit(unit_system, desc.dimension) if desc.dimension else "-",
            si_unit(desc.dimension) if desc.dimension else "-",
            desc.name[0] if desc.region_eligible else "",
        )
    console.print(table)
    console.print(f"Default region keyword: {registry.default_region_keyword}")
