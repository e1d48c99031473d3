"""Exception types raised by the grid property engine."""

from __future__ import annotations


class GridPropertyError(Exception):
    """Base class for all grid property errors."""


class UnsupportedKeyword(GridPropertyError, LookupError):
    """Raised when a keyword is not present in the registry."""

    def __init__(self, name: str):
        self.keyword = name
        super().__init__(f"Keyword '{name}' is not a supported grid property")


class TypeMismatch(GridPropertyError, TypeError):
    """Raised when a keyword is accessed as the wrong numeric kind."""


class InvalidBox(GridPropertyError, ValueError):
    """Raised when a box falls outside the grid."""


class RecordError(GridPropertyError, ValueError):
    """Raised when a record has malformed operands."""


class UnknownFault(GridPropertyError, LookupError):
    """Raised when a fault name or pattern matches no defined fault."""


class ConstructionFinalized(GridPropertyError, RuntimeError):
    """Raised when records are applied after finalize()."""
