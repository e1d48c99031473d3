"""Structured grid dimensions and cell indexing.

Flat cell order is i fastest, then j, then k.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class GridDims:
    """Logical dimensions of a structured nx x ny x nz grid."""

    nx: int
    ny: int
    nz: int

    def __post_init__(self) -> None:
        for axis, n in (("nx", self.nx), ("ny", self.ny), ("nz", self.nz)):
            if int(n) != n or n < 1:
                raise ValueError(f"{axis} must be a positive integer, got {n}")

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.nx * self.ny * self.nz

    @property
    def shape(self) -> tuple[int, int, int]:
        return (self.nx, self.ny, self.nz)

    def global_index(self, i: int, j: int, k: int) -> int:
        """Flat index of cell (i, j, k), all 0-based.

        Raises:
            IndexError: If the cell is outside the grid.
        """
        if not (0 <= i < self.nx and 0 <= j < self.ny and 0 <= k < self.nz):
            raise IndexError(f"Cell ({i}, {j}, {k}) outside grid {self.shape}")
        return i + self.nx * (j + self.ny * k)

    def ijk(self, g: int) -> tuple[int, int, int]:
        """Inverse of :meth:`global_index`."""
        if not 0 <= g < self.size:
            raise IndexError(f"Flat index {g} outside grid of {self.size} cells")
        i = g % self.nx
        j = (g // self.nx) % self.ny
        k = g // (self.nx * self.ny)
        return i, j, k

    def window_indices(
        self, i0: int, i1: int, j0: int, j1: int, k0: int, k1: int
    ) -> np.ndarray:
        """Flat indices of an inclusive 0-based window, i fastest.

        Bounds are not checked here; callers validate through BoxWindow.
        """
        i = np.arange(i0, i1 + 1)
        j = np.arange(j0, j1 + 1)
        k = np.arange(k0, k1 + 1)
        kk, jj, ii = np.meshgrid(k, j, i, indexing="ij")
        return (ii + self.nx * (jj + self.ny * kk)).ravel()
