"""Region-driven property edits (ADDREG, MULTIREG, EQUALREG).

A region edit reads an integer driver property as a classification map and
mutates a target property in every cell whose driver value equals the
requested region id. The BOX window is never consulted here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Sequence

import numpy as np

from gridprops.core.collection import PropertyCollection
from gridprops.core.errors import RecordError, TypeMismatch
from gridprops.core.property import GridProperty
from gridprops.core.registry import KeywordRegistry, PropertyKind, normalize_keyword
from gridprops.utils.units import UnitConverter

logger = logging.getLogger(__name__)

# Region set selected when a record leaves the selector defaulted
DEFAULT_REGION_SET = "M"


class RegionOperator(Enum):
    """Mutation applied to the selected cells."""

    ADD = "ADDREG"
    MULTIPLY = "MULTIREG"
    ASSIGN = "EQUALREG"

    @classmethod
    def from_keyword(cls, keyword: str) -> RegionOperator:
        try:
            return cls(normalize_keyword(keyword))
        except ValueError:
            raise RecordError(f"'{keyword}' is not a region edit keyword") from None


@dataclass(frozen=True)
class RegionEditRequest:
    """One region edit.

    ``driver=None`` selects the registry's default region keyword.
    """

    target: str
    value: float
    region_id: int
    operator: RegionOperator = RegionOperator.ADD
    driver: str | None = None


_OPERATIONS: dict[RegionOperator, Callable[[GridProperty, np.ndarray, Any], None]] = {
    RegionOperator.ADD: GridProperty.add,
    RegionOperator.MULTIPLY: GridProperty.multiply,
    RegionOperator.ASSIGN: GridProperty.assign,
}


def parse_region_row(
    row: Sequence[Any], operator: RegionOperator, registry: KeywordRegistry
) -> RegionEditRequest:
    """Interpret one record row ``keyword value region [set] [driver]``.

    The optional fourth operand is a region-set letter (``M`` for MULTNUM,
    ``F`` for FLUXNUM, ``O`` for OPERNUM); it defaults to ``M``. An explicit
    fifth operand names the driver keyword directly.
    """
    if not 3 <= len(row) <= 5:
        raise RecordError(f"{operator.value} row needs 3 to 5 operands, got {list(row)}")
    target, value, region_id = row[0], row[1], row[2]
    region_set = row[3] if len(row) > 3 and row[3] is not None else DEFAULT_REGION_SET
    explicit_driver = row[4] if len(row) > 4 else None

    if not isinstance(target, str):
        raise RecordError(f"{operator.value}: target keyword must be a name, got {target!r}")
    try:
        value = float(value)
        region_number = float(region_id)
    except (TypeError, ValueError) as exc:
        raise RecordError(f"{operator.value}: invalid operands {list(row)}") from exc
    if not region_number.is_integer():
        raise RecordError(f"{operator.value}: region id must be an integer, got {region_id}")

    if explicit_driver is not None:
        driver = normalize_keyword(str(explicit_driver))
    else:
        sets = registry.region_sets()
        letter = str(region_set).strip().upper()
        if letter not in sets:
            raise RecordError(
                f"{operator.value}: unknown region set '{region_set}', expected one of {sorted(sets)}"
            )
        driver = sets[letter]

    return RegionEditRequest(
        target=normalize_keyword(target),
        value=value,
        region_id=int(region_number),
        operator=operator,
        driver=driver,
    )


class RegionOperationEngine:
    """Applies region edits to the property collections.

    Args:
        registry: Keyword registry.
        int_properties: Integer property collection (drivers live here).
        double_properties: Double property collection.
        converter: Unit converter for physical-valued targets.
    """

    def __init__(
        self,
        registry: KeywordRegistry,
        int_properties: PropertyCollection,
        double_properties: PropertyCollection,
        converter: UnitConverter,
    ):
        self.registry = registry
        self._collections = {
            PropertyKind.INTEGER: int_properties,
            PropertyKind.DOUBLE: double_properties,
        }
        self.converter = converter

    def apply(self, request: RegionEditRequest) -> int:
        """Apply one edit and return the number of cells changed.

        Raises:
            UnsupportedKeyword: If the target or driver is not registered.
            TypeMismatch: If the driver is not an integer property.
        """
        driver_name = request.driver or self.registry.default_region_keyword
        driver_desc = self.registry.descriptor_for(driver_name)
        target_desc = self.registry.descriptor_for(request.target)
        if not driver_desc.is_integer:
            raise TypeMismatch(
                f"Region driver '{driver_desc.name}' must be an integer property"
            )

        driver = self._collections[PropertyKind.INTEGER].get_or_create(driver_desc.name)
        target = self._collections[target_desc.kind].get_or_create(target_desc.name)

        mask = driver.values() == request.region_id
        value = self._internal_value(request, target)
        _OPERATIONS[request.operator](target, mask, value)

        count = int(np.count_nonzero(mask))
        logger.debug(
            "%s %s %s in %s=%d (%d cells)",
            request.operator.value,
            target.name,
            request.value,
            driver.name,
            request.region_id,
            count,
        )
        return count

    def _internal_value(self, request: RegionEditRequest, target: GridProperty) -> Any:
        if request.operator is RegionOperator.MULTIPLY:
            return request.value
        if request.operator is RegionOperator.ADD:
            return self.converter.convert_increment(request.value, target.dimension)
        return self.converter.convert(request.value, target.dimension)
