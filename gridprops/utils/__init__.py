"""Utility modules for GridProps."""

from gridprops.utils.units import Dimension, UnitConverter, UnitSystem, get_unit_registry

__all__ = ["Dimension", "UnitConverter", "UnitSystem", "get_unit_registry"]
