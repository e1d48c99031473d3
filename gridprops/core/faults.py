"""Named faults and their transmissibility multipliers (FAULTS / MULTFLT)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from fnmatch import fnmatchcase
from typing import Any, Iterator, Sequence

from gridprops.core.box import BoxWindow
from gridprops.core.errors import RecordError, UnknownFault
from gridprops.core.grid import GridDims

logger = logging.getLogger(__name__)


class FaultFace(Enum):
    """Cell face a fault segment lies on."""

    X = "X"
    X_MINUS = "X-"
    Y = "Y"
    Y_MINUS = "Y-"
    Z = "Z"
    Z_MINUS = "Z-"

    @classmethod
    def parse(cls, tag: str) -> FaultFace:
        key = str(tag).strip().upper()
        key = {"I": "X", "I-": "X-", "J": "Y", "J-": "Y-", "K": "Z", "K-": "Z-"}.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise RecordError(f"Unknown fault face '{tag}'") from None

    @property
    def axis(self) -> str:
        return self.value[0]


@dataclass(frozen=True)
class FaultSegment:
    """A box of cells whose *face* is part of a fault."""

    window: BoxWindow
    face: FaultFace


@dataclass
class Fault:
    """A named fault made of one or more face segments."""

    name: str
    segments: list[FaultSegment] = field(default_factory=list)
    multiplier: float = 1.0


class FaultCollection:
    """Insertion-ordered faults of one grid.

    Args:
        dims: Grid dimensions used to validate segment boxes.
    """

    def __init__(self, dims: GridDims):
        self.dims = dims
        self._faults: dict[str, Fault] = {}

    def add_segment(self, name: str, bounds: Sequence[int], face: FaultFace | str) -> Fault:
        """Add a segment to fault *name*, creating the fault if needed.

        Raises:
            InvalidBox: If the box is outside the grid.
            RecordError: If the box is not flat along the face normal.
        """
        if not isinstance(face, FaultFace):
            face = FaultFace.parse(face)
        window = BoxWindow.from_one_based(self.dims, bounds)
        lo, hi = {
            "X": (window.i0, window.i1),
            "Y": (window.j0, window.j1),
            "Z": (window.k0, window.k1),
        }[face.axis]
        if lo != hi:
            raise RecordError(
                f"Fault '{name}': {face.value} face segment must span a single "
                f"{'IJK'['XYZ'.index(face.axis)]} layer"
            )

        fault = self._faults.get(name)
        if fault is None:
            fault = self._faults[name] = Fault(name)
            logger.debug("Defined fault %s", name)
        fault.segments.append(FaultSegment(window, face))
        return fault

    def multiply(self, pattern: str, factor: float) -> list[str]:
        """Multiply the multiplier of every fault matching *pattern*.

        Shell-style wildcards are accepted. Returns the names touched.

        Raises:
            UnknownFault: If no fault matches.
        """
        names = [n for n in self._faults if fnmatchcase(n, pattern)]
        if not names:
            raise UnknownFault(f"No fault matches '{pattern}'")
        for n in names:
            self._faults[n].multiplier *= float(factor)
        return names

    def apply_faults_row(self, row: Sequence[Any]) -> None:
        """Interpret ``name i1 i2 j1 j2 k1 k2 face``."""
        if len(row) != 8:
            raise RecordError(f"FAULTS row needs 8 operands, got {list(row)}")
        self.add_segment(str(row[0]), row[1:7], row[7])

    def apply_multflt_row(self, row: Sequence[Any]) -> None:
        """Interpret ``name factor``."""
        if len(row) != 2:
            raise RecordError(f"MULTFLT row needs 2 operands, got {list(row)}")
        try:
            factor = float(row[1])
        except (TypeError, ValueError) as exc:
            raise RecordError(f"MULTFLT: invalid factor {row[1]!r}") from exc
        self.multiply(str(row[0]), factor)

    def get(self, name: str) -> Fault:
        try:
            return self._faults[name]
        except KeyError:
            raise UnknownFault(f"Fault '{name}' is not defined") from None

    def names(self) -> list[str]:
        return list(self._faults)

    def __contains__(self, name: object) -> bool:
        return name in self._faults

    def __iter__(self) -> Iterator[Fault]:
        return iter(self._faults.values())

    def __len__(self) -> int:
        return len(self._faults)
