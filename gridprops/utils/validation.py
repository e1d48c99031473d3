"""Property sanity checking for GridProps."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from gridprops.core.properties import GridProperties


class Severity(Enum):
    """Severity level for validation messages."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationMessage:
    """A single validation finding."""

    severity: Severity
    parameter: str
    message: str
    value: Any = None
    limit: Any = None


@dataclass
class ValidationResult:
    """Aggregated validation result."""

    messages: list[ValidationMessage] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not any(m.severity == Severity.ERROR for m in self.messages)

    @property
    def has_warnings(self) -> bool:
        return any(m.severity == Severity.WARNING for m in self.messages)

    @property
    def errors(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    def add(self, severity: Severity, parameter: str, message: str, **kwargs: Any) -> None:
        self.messages.append(
            ValidationMessage(severity=severity, parameter=parameter, message=message, **kwargs)
        )

    def error(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.ERROR, parameter, message, **kwargs)

    def warning(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.WARNING, parameter, message, **kwargs)

    def info(self, parameter: str, message: str, **kwargs: Any) -> None:
        self.add(Severity.INFO, parameter, message, **kwargs)

    def merge(self, other: ValidationResult) -> None:
        self.messages.extend(other.messages)


# --- Common validators ---


def validate_nonnegative(name: str, values: np.ndarray, result: ValidationResult) -> None:
    """Validate that every cell value is >= 0."""
    bad = int(np.count_nonzero(values < 0))
    if bad:
        result.error(name, f"{name} has {bad} negative cells", value=float(values.min()), limit=0)


def validate_range(
    name: str,
    values: np.ndarray,
    low: float,
    high: float,
    result: ValidationResult,
    severity: Severity = Severity.ERROR,
) -> None:
    """Validate that every cell value falls within [low, high]."""
    bad = int(np.count_nonzero((values < low) | (values > high)))
    if bad:
        result.add(severity, name, f"{name} has {bad} cells outside [{low}, {high}]")


_FRACTIONS = ("PORO", "NTG", "SWATINIT")
_NONNEGATIVE = ("PERMX", "PERMY", "PERMZ", "MULTPV", "MULTX", "MULTY", "MULTZ",
                "MULTX-", "MULTY-", "MULTZ-", "THCONR", "DX", "DY", "DZ")


def validate_properties(props: GridProperties) -> ValidationResult:
    """Run physical reasonableness checks on the materialized properties."""
    result = ValidationResult()

    for prop in props.int_properties():
        values = prop.values()
        if prop.name == "ACTNUM":
            if not np.isin(values, (0, 1)).all():
                result.error("ACTNUM", "ACTNUM values must be 0 or 1")
            elif not values.any():
                result.warning("ACTNUM", "All cells are inactive")
        elif values.size and values.min() < 1:
            result.warning(
                prop.name,
                f"{prop.name} has region ids below 1 (min {int(values.min())})",
                value=int(values.min()),
                limit=1,
            )

    for prop in props.double_properties():
        values = prop.values()
        if prop.name in _FRACTIONS:
            validate_range(prop.name, values, 0.0, 1.0, result)
        elif prop.name in _NONNEGATIVE:
            validate_nonnegative(prop.name, values, result)

    for fault in props.faults:
        if fault.multiplier < 0:
            result.error(f"MULTFLT:{fault.name}", f"Fault {fault.name} has a negative multiplier")

    return result
