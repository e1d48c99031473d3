"""BOX / ENDBOX spatial clipping for GridProps.

Input boxes are 1-based and inclusive; windows are stored 0-based and
inclusive. Only one window is active at a time: a new BOX replaces the
previous one, ENDBOX resets to the whole grid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from gridprops.core.errors import InvalidBox, RecordError
from gridprops.core.grid import GridDims

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoxWindow:
    """Inclusive 0-based index window (i0..i1, j0..j1, k0..k1)."""

    i0: int
    i1: int
    j0: int
    j1: int
    k0: int
    k1: int

    @classmethod
    def whole(cls, dims: GridDims) -> BoxWindow:
        return cls(0, dims.nx - 1, 0, dims.ny - 1, 0, dims.nz - 1)

    @classmethod
    def from_one_based(cls, dims: GridDims, bounds: Sequence[int]) -> BoxWindow:
        """Build a window from ``i1 i2 j1 j2 k1 k2`` as given in a record.

        Raises:
            RecordError: If there are not exactly six integer bounds.
            InvalidBox: If the box is empty or outside the grid.
        """
        if len(bounds) != 6:
            raise RecordError(f"BOX needs 6 bounds, got {len(bounds)}")
        try:
            numbers = [float(b) for b in bounds]
        except (TypeError, ValueError) as exc:
            raise RecordError(f"Invalid BOX bounds {list(bounds)}: {exc}") from exc
        if not all(n.is_integer() for n in numbers):
            raise RecordError(f"BOX bounds must be whole numbers, got {list(bounds)}")
        i1, i2, j1, j2, k1, k2 = (int(n) for n in numbers)

        for axis, lo, hi, n in (
            ("I", i1, i2, dims.nx),
            ("J", j1, j2, dims.ny),
            ("K", k1, k2, dims.nz),
        ):
            if not 1 <= lo <= hi <= n:
                raise InvalidBox(f"BOX {axis} range {lo}..{hi} outside 1..{n}")
        return cls(i1 - 1, i2 - 1, j1 - 1, j2 - 1, k1 - 1, k2 - 1)

    @property
    def size(self) -> int:
        return (self.i1 - self.i0 + 1) * (self.j1 - self.j0 + 1) * (self.k1 - self.k0 + 1)

    def contains(self, i: int, j: int, k: int) -> bool:
        return self.i0 <= i <= self.i1 and self.j0 <= j <= self.j1 and self.k0 <= k <= self.k1

    def indices(self, dims: GridDims) -> np.ndarray:
        """Flat cell indices of the window, i fastest."""
        return dims.window_indices(self.i0, self.i1, self.j0, self.j1, self.k0, self.k1)


class RegionEditContext:
    """Two-state clipping context: whole grid, or clipped to one window.

    Args:
        dims: Grid the context clips.
    """

    def __init__(self, dims: GridDims):
        self.dims = dims
        self._window: BoxWindow | None = None

    @property
    def is_clipped(self) -> bool:
        return self._window is not None

    @property
    def window(self) -> BoxWindow:
        """Active window; the whole grid when unclipped."""
        if self._window is None:
            return BoxWindow.whole(self.dims)
        return self._window

    def open_box(self, bounds: Sequence[int]) -> BoxWindow:
        """Clip to a 1-based inclusive box, replacing any previous box."""
        self._window = BoxWindow.from_one_based(self.dims, bounds)
        logger.debug("BOX %s", self._window)
        return self._window

    def end_box(self) -> None:
        if self._window is not None:
            logger.debug("ENDBOX")
        self._window = None

    def indices(self) -> np.ndarray | slice:
        """Flat indices of the active window (a full slice when unclipped)."""
        if self._window is None:
            return slice(None)
        return self._window.indices(self.dims)
