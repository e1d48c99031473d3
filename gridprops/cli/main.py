"""GridProps command-line interface.

Entry point for the ``gridprops`` CLI tool.
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from gridprops import __app_name__, __version__

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name=__app_name__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """GridProps - grid property construction for reservoir models.

    Builds per-cell properties from a case file (grid dimensions plus an
    ordered keyword record stream) and inspects the result.
    """
    ctx.ensure_object(dict)
    ctx.obj["console"] = console
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


# Import and register sub-commands
from gridprops.cli.build_cmd import build, check, regions, report  # noqa: E402
from gridprops.cli.info_cmd import info  # noqa: E402

cli.add_command(build)
cli.add_command(regions)
cli.add_command(check)
cli.add_command(report)
cli.add_command(info)


def main() -> None:
    """Convenience wrapper for entry-point scripts."""
    cli()
