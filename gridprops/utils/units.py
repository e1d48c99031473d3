"""Unit conversion utilities for GridProps.

Raw record values are given in the deck unit system and stored in SI.
Built on top of pint; the conversion-factor tables are pint's.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any

import numpy as np
import pint

# Module-level unit registry (singleton)
_ureg = pint.UnitRegistry()


def get_unit_registry() -> pint.UnitRegistry:
    """Return the shared pint UnitRegistry instance."""
    return _ureg


Q_ = _ureg.Quantity


class Dimension(Enum):
    """Physical unit class of a grid property."""

    PERMEABILITY = "permeability"
    LENGTH = "length"
    TEMPERATURE = "temperature"
    PRESSURE = "pressure"
    THERMAL_CONDUCTIVITY = "thermal_conductivity"


class UnitSystem(Enum):
    """Unit system of the raw input values."""

    METRIC = "METRIC"
    FIELD = "FIELD"
    SI = "SI"


# Internal (storage) unit for each dimension
_SI_UNITS: dict[Dimension, str] = {
    Dimension.PERMEABILITY: "m**2",
    Dimension.LENGTH: "m",
    Dimension.TEMPERATURE: "K",
    Dimension.PRESSURE: "Pa",
    Dimension.THERMAL_CONDUCTIVITY: "W/(m*K)",
}

_DECK_UNITS: dict[UnitSystem, dict[Dimension, str]] = {
    UnitSystem.METRIC: {
        Dimension.PERMEABILITY: "millidarcy",
        Dimension.LENGTH: "m",
        Dimension.TEMPERATURE: "degC",
        Dimension.PRESSURE: "bar",
        Dimension.THERMAL_CONDUCTIVITY: "kJ/(m*day*K)",
    },
    UnitSystem.FIELD: {
        Dimension.PERMEABILITY: "millidarcy",
        Dimension.LENGTH: "ft",
        Dimension.TEMPERATURE: "degF",
        Dimension.PRESSURE: "psi",
        Dimension.THERMAL_CONDUCTIVITY: "Btu/(ft*day*degR)",
    },
    UnitSystem.SI: dict(_SI_UNITS),
}


def deck_unit(unit_system: UnitSystem, dimension: Dimension) -> str:
    """Unit string used for *dimension* in *unit_system*."""
    return _DECK_UNITS[unit_system][dimension]


def si_unit(dimension: Dimension) -> str:
    return _SI_UNITS[dimension]


@lru_cache(maxsize=64)
def _linear_map(unit_system: UnitSystem, dimension: Dimension) -> tuple[float, float]:
    """Return (factor, offset) so that si = raw * factor + offset."""
    src = deck_unit(unit_system, dimension)
    dst = si_unit(dimension)
    zero = Q_(0.0, src).to(dst).magnitude
    one = Q_(1.0, src).to(dst).magnitude
    return one - zero, zero


class UnitConverter:
    """Converts raw record values into internal SI values.

    Stateless apart from the unit system; one instance is shared by a
    construction run.

    Args:
        unit_system: Unit system of the raw input.
    """

    def __init__(self, unit_system: UnitSystem | str = UnitSystem.METRIC):
        if isinstance(unit_system, str):
            unit_system = UnitSystem(unit_system.upper())
        self.unit_system = unit_system

    def factor(self, dimension: Dimension | None) -> float:
        """Scale factor from deck units to SI for *dimension*."""
        if dimension is None:
            return 1.0
        return _linear_map(self.unit_system, dimension)[0]

    def convert(self, raw: Any, dimension: Dimension | None) -> Any:
        """Convert an absolute raw value (scalar or array) to SI.

        Dimensionless values pass through unchanged.
        """
        if dimension is None:
            return raw
        factor, offset = _linear_map(self.unit_system, dimension)
        if np.isscalar(raw):
            return float(raw) * factor + offset
        return np.asarray(raw, dtype=float) * factor + offset

    def convert_increment(self, raw: Any, dimension: Dimension | None) -> Any:
        """Convert a difference (e.g. an ADD increment) to SI, ignoring offsets."""
        if dimension is None:
            return raw
        factor = self.factor(dimension)
        if np.isscalar(raw):
            return float(raw) * factor
        return np.asarray(raw, dtype=float) * factor

    def __repr__(self) -> str:
        return f"UnitConverter({self.unit_system.value})"
