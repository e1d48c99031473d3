"""GridProps command-line interface package.

Supports ``python -m gridprops.cli`` as an alternative to the ``gridprops`` entry point.
"""

from gridprops.cli.main import cli, main

__all__ = ["cli", "main"]
