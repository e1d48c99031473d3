"""Dense per-cell grid property storage."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from gridprops.core.errors import RecordError
from gridprops.core.grid import GridDims
from gridprops.core.registry import PropertyDescriptor, PropertyKind
from gridprops.utils.units import Dimension

_DTYPES = {PropertyKind.INTEGER: np.int64, PropertyKind.DOUBLE: np.float64}
_INT64 = np.iinfo(np.int64)


class GridProperty:
    """One materialized keyword: a dense array of nx*ny*nz values.

    The array length is fixed at creation and every cell starts at the
    descriptor default. Values are stored in internal (SI) units; unit
    conversion happens before values reach this class.

    Args:
        descriptor: Registry descriptor of the keyword.
        dims: Grid the property lives on.
    """

    def __init__(self, descriptor: PropertyDescriptor, dims: GridDims):
        self.descriptor = descriptor
        self.dims = dims
        self._data = np.full(dims.size, descriptor.default_value, dtype=_DTYPES[descriptor.kind])

    # --- Metadata ---

    @property
    def name(self) -> str:
        return self.descriptor.name

    def get_keyword_name(self) -> str:
        return self.descriptor.name

    @property
    def kind(self) -> PropertyKind:
        return self.descriptor.kind

    @property
    def default_value(self) -> int | float:
        return self.descriptor.default_value

    @property
    def dimension(self) -> Dimension | None:
        return self.descriptor.dimension

    @property
    def is_frozen(self) -> bool:
        return not self._data.flags.writeable

    # --- Cell access ---

    def get(self, i: int, j: int, k: int) -> int | float:
        return self._data[self.dims.global_index(i, j, k)].item()

    def iget(self, g: int) -> int | float:
        return self._data[g].item()

    def set(self, i: int, j: int, k: int, value: int | float) -> None:
        self._data[self.dims.global_index(i, j, k)] = self._coerce_scalar(value)

    def values(self) -> np.ndarray:
        """Read-only view of all cell values in flat order."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def __len__(self) -> int:
        return self._data.size

    def __iter__(self):
        return iter(self._data.tolist())

    # --- Bulk mutation ---

    def assign(self, indices: Any, values: Any) -> None:
        """Overwrite the cells selected by *indices* with *values*.

        *values* is a scalar or a sequence with one entry per selected cell.
        """
        arr = np.asarray(values)
        if arr.ndim > 1:
            raise RecordError(f"{self.name}: values must be a flat list, got shape {arr.shape}")
        if arr.ndim > 0:
            selected = self._data[indices]
            if arr.size != selected.size:
                raise RecordError(
                    f"{self.name}: expected {selected.size} values, got {arr.size}"
                )
            arr = self._coerce_array(arr)
        else:
            arr = self._coerce_scalar(arr.item())
        self._data[indices] = arr

    def add(self, indices: Any, value: int | float) -> None:
        self._data[indices] += self._coerce_scalar(value)

    def multiply(self, indices: Any, value: int | float) -> None:
        self._data[indices] *= self._coerce_scalar(value)

    def copy_from(self, other: GridProperty, indices: Any) -> None:
        if other.kind is not self.kind:
            raise TypeError(f"Cannot copy {other.kind.value} {other.name} into {self.name}")
        self._data[indices] = other._data[indices]

    def freeze(self) -> None:
        """Make the underlying array read-only."""
        self._data.flags.writeable = False

    # --- Queries ---

    def regions(self) -> list[int]:
        """Distinct values in ascending order."""
        return [int(v) for v in np.unique(self._data)]

    def _coerce_scalar(self, value: Any) -> int | float:
        if self.kind is PropertyKind.DOUBLE:
            return float(value)
        if isinstance(value, (int, np.integer)):
            as_int = int(value)
        else:
            as_float = float(value)
            if not math.isfinite(as_float) or not as_float.is_integer():
                raise RecordError(f"{self.name}: integer property cannot take value {value}")
            as_int = int(as_float)
        if not _INT64.min <= as_int <= _INT64.max:
            raise RecordError(f"{self.name}: value {value} is outside the 64-bit integer range")
        return as_int

    def _coerce_array(self, arr: np.ndarray) -> np.ndarray:
        if self.kind is PropertyKind.DOUBLE:
            return arr.astype(np.float64)
        if arr.dtype.kind == "f":
            if not np.all(np.isfinite(arr)) or np.any(arr != np.trunc(arr)):
                raise RecordError(f"{self.name}: integer property given non-integral values")
            if np.any(arr < _INT64.min) or np.any(arr >= -float(_INT64.min)):
                raise RecordError(f"{self.name}: values outside the 64-bit integer range")
        as_int = arr.astype(np.int64)
        if not np.array_equal(as_int, arr):
            raise RecordError(f"{self.name}: integer property given non-integral values")
        return as_int

    def __repr__(self) -> str:
        return f"GridProperty('{self.name}', {self.kind.value}, {len(self)} cells)"
