"""Grid property facade for GridProps.

Dispatches keyword records in order to the registry, the property
collections, the BOX context, the region edit engine and the fault
collection, and exposes the query surface used by the rest of the
model-building pipeline.

Usage::

    props = GridProperties.from_records([
        Record("DIMENS", [5, 5, 1]),
        Record("PERMX", [100.0] * 25),
        Record("ADDREG", [["PERMX", 50, 1, "M"]]),
    ])
    permx = props.get_double_property("PERMX").values()
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Sequence

import numpy as np

from gridprops.core.box import BoxWindow, RegionEditContext
from gridprops.core.collection import PropertyCollection
from gridprops.core.errors import (
    ConstructionFinalized,
    RecordError,
    TypeMismatch,
    UnsupportedKeyword,
)
from gridprops.core.faults import FaultCollection
from gridprops.core.grid import GridDims
from gridprops.core.property import GridProperty
from gridprops.core.records import Record
from gridprops.core.regions import (
    RegionEditRequest,
    RegionOperationEngine,
    RegionOperator,
    parse_region_row,
)
from gridprops.core.registry import KeywordRegistry, PropertyKind, default_registry
from gridprops.utils.sequences import LazyMap
from gridprops.utils.units import UnitConverter, UnitSystem

logger = logging.getLogger(__name__)


def _parse_float(keyword: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RecordError(f"{keyword}: invalid value {value!r}") from exc


class GridProperties:
    """Per-cell grid properties built from an ordered record stream.

    Args:
        dims: Grid dimensions.
        registry: Keyword registry (the shared built-in one by default).
        converter: Unit converter; defaults to METRIC input units.
    """

    def __init__(
        self,
        dims: GridDims,
        registry: KeywordRegistry | None = None,
        converter: UnitConverter | None = None,
    ):
        self.dims = dims
        self.registry = registry or default_registry()
        self.converter = converter or UnitConverter(UnitSystem.METRIC)
        self._int = PropertyCollection(PropertyKind.INTEGER, self.registry, dims)
        self._double = PropertyCollection(PropertyKind.DOUBLE, self.registry, dims)
        self.context = RegionEditContext(dims)
        self.faults = FaultCollection(dims)
        self._region_engine = RegionOperationEngine(
            self.registry, self._int, self._double, self.converter
        )
        self._finalized = False

        self._handlers: dict[str, Callable[[Record], None]] = {
            "BOX": self._handle_box,
            "ENDBOX": self._handle_endbox,
            "ADDREG": self._handle_region_edit,
            "MULTIREG": self._handle_region_edit,
            "EQUALREG": self._handle_region_edit,
            "EQUALS": self._handle_equals,
            "ADD": self._handle_add,
            "MULTIPLY": self._handle_multiply,
            "COPY": self._handle_copy,
            "FAULTS": self._handle_faults,
            "MULTFLT": self._handle_multflt,
            "DIMENS": self._handle_dimens,
        }

    @classmethod
    def from_records(
        cls,
        records: Iterable[Record | dict[str, Any]],
        registry: KeywordRegistry | None = None,
        unit_system: UnitSystem | str = UnitSystem.METRIC,
        finalize: bool = False,
    ) -> GridProperties:
        """Build properties from a record stream whose first record is DIMENS."""
        stream = [r if isinstance(r, Record) else Record.from_dict(r) for r in records]
        if not stream or stream[0].name != "DIMENS":
            raise RecordError("Record stream must start with DIMENS")
        dimens = stream[0].items
        if len(dimens) != 3:
            raise RecordError(f"DIMENS needs 3 operands, got {dimens}")
        try:
            dims = GridDims(*(int(n) for n in dimens))
        except (TypeError, ValueError) as exc:
            raise RecordError(f"Invalid DIMENS {dimens}: {exc}") from exc

        props = cls(dims, registry, UnitConverter(unit_system))
        props.process(stream[1:])
        if finalize:
            props.finalize()
        return props

    # --- Record processing ---

    def process(self, records: Iterable[Record]) -> GridProperties:
        """Apply *records* strictly in order."""
        for record in records:
            self.apply(record)
        return self

    def apply(self, record: Record) -> None:
        """Apply a single record.

        Raises:
            UnsupportedKeyword: If the record keyword is unknown.
            ConstructionFinalized: If finalize() has been called.
        """
        if self._finalized:
            raise ConstructionFinalized(f"Cannot apply {record.name}: properties are finalized")
        logger.debug("Applying %s", record.name)
        handler = self._handlers.get(record.name)
        if handler is not None:
            handler(record)
        elif self.registry.supports(record.name):
            self._assign(record)
        else:
            raise UnsupportedKeyword(record.name)

    def apply_region_edit(self, request: RegionEditRequest) -> int:
        """Apply a region edit request directly; returns the cells changed."""
        if self._finalized:
            raise ConstructionFinalized("Cannot edit regions: properties are finalized")
        return self._region_engine.apply(request)

    def finalize(self) -> None:
        """Freeze all property arrays; no further records are accepted."""
        self._int.freeze()
        self._double.freeze()
        self._finalized = True
        logger.info(
            "Finalized %d int and %d double properties on %dx%dx%d grid",
            len(self._int),
            len(self._double),
            *self.dims.shape,
        )

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    # --- Query surface ---

    def supports(self, name: str) -> bool:
        return self.registry.supports(name)

    def has_int_property(self, name: str) -> bool:
        self.registry.descriptor_for(name)
        return name in self._int

    def has_double_property(self, name: str) -> bool:
        self.registry.descriptor_for(name)
        return name in self._double

    def get_int_property(self, name: str) -> GridProperty:
        return self._materialize(self._int, name)

    def get_double_property(self, name: str) -> GridProperty:
        return self._materialize(self._double, name)

    def default_region_keyword(self) -> str:
        return self.registry.default_region_keyword

    def regions_of(self, name: str) -> list[int]:
        """Distinct values of an integer property, ascending.

        Empty if the keyword is supported but was never materialized.
        """
        descriptor = self.registry.descriptor_for(name)
        if not descriptor.is_integer:
            raise TypeMismatch(f"Keyword '{descriptor.name}' is not an integer property")
        prop = self._int.get(descriptor.name)
        return [] if prop is None else prop.regions()

    def int_properties(self) -> LazyMap:
        return self._int.iterate()

    def double_properties(self) -> LazyMap:
        return self._double.iterate()

    def _materialize(self, collection: PropertyCollection, name: str) -> GridProperty:
        if self._finalized and name not in collection:
            return collection.create_detached(name)
        return collection.get_or_create(name)

    # --- Handlers ---

    def _collection(self, kind: PropertyKind) -> PropertyCollection:
        return self._int if kind is PropertyKind.INTEGER else self._double

    def _property(self, name: str) -> GridProperty:
        descriptor = self.registry.descriptor_for(name)
        return self._collection(descriptor.kind).get_or_create(descriptor.name)

    def _assign(self, record: Record) -> None:
        prop = self._property(record.name)
        try:
            raw = np.asarray(record.items, dtype=float)
        except (TypeError, ValueError) as exc:
            raise RecordError(f"{prop.name}: non-numeric values") from exc
        values = self.converter.convert(raw, prop.dimension)
        prop.assign(self.context.indices(), values)

    def _handle_dimens(self, record: Record) -> None:
        raise RecordError("DIMENS is only allowed as the first record")

    def _handle_box(self, record: Record) -> None:
        self.context.open_box(record.items)

    def _handle_endbox(self, record: Record) -> None:
        self.context.end_box()

    def _handle_region_edit(self, record: Record) -> None:
        operator = RegionOperator.from_keyword(record.name)
        for row in record.rows():
            self._region_engine.apply(parse_region_row(row, operator, self.registry))

    def _row_indices(self, bounds: Sequence[Any]) -> Any:
        if not bounds or all(b is None for b in bounds):
            return self.context.indices()
        return BoxWindow.from_one_based(self.dims, bounds).indices(self.dims)

    def _box_rows(self, record: Record) -> Iterable[tuple[GridProperty, float, Any]]:
        for row in record.rows():
            if len(row) not in (2, 8):
                raise RecordError(f"{record.name} row needs 2 or 8 operands, got {row}")
            prop = self._property(str(row[0]))
            yield prop, _parse_float(record.name, row[1]), self._row_indices(row[2:])

    def _handle_equals(self, record: Record) -> None:
        for prop, value, indices in self._box_rows(record):
            prop.assign(indices, self.converter.convert(value, prop.dimension))

    def _handle_add(self, record: Record) -> None:
        for prop, value, indices in self._box_rows(record):
            prop.add(indices, self.converter.convert_increment(value, prop.dimension))

    def _handle_multiply(self, record: Record) -> None:
        for prop, value, indices in self._box_rows(record):
            prop.multiply(indices, value)

    def _handle_copy(self, record: Record) -> None:
        for row in record.rows():
            if len(row) not in (2, 8):
                raise RecordError(f"COPY row needs 2 or 8 operands, got {row}")
            source_desc = self.registry.descriptor_for(str(row[0]))
            target_desc = self.registry.descriptor_for(str(row[1]))
            if source_desc.kind is not target_desc.kind:
                raise TypeMismatch(
                    f"COPY {source_desc.name} -> {target_desc.name}: kinds differ"
                )
            source = self._property(source_desc.name)
            target = self._property(target_desc.name)
            target.copy_from(source, self._row_indices(row[2:]))

    def _handle_faults(self, record: Record) -> None:
        for row in record.rows():
            self.faults.apply_faults_row(row)

    def _handle_multflt(self, record: Record) -> None:
        for row in record.rows():
            self.faults.apply_multflt_row(row)

    def __repr__(self) -> str:
        return (
            f"GridProperties({self.dims.nx}x{self.dims.ny}x{self.dims.nz}, "
            f"int={self._int.names()}, double={self._double.names()})"
        )
