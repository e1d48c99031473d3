"""Case definition management and project I/O for GridProps.

Handles saving/loading cases (metadata, grid dimensions, record stream) in
JSON, and exporting built property arrays to HDF5.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from gridprops.core.properties import GridProperties
from gridprops.core.records import Record

logger = logging.getLogger(__name__)

# Attempt HDF5 import; gracefully degrade if not installed
try:
    import h5py

    _HAS_H5PY = True
except ImportError:
    _HAS_H5PY = False
    logger.info("h5py not available, HDF5 export disabled")


# --- Case metadata ---


@dataclass
class CaseMeta:
    """Top-level case metadata."""

    name: str = "Untitled"
    description: str = ""
    author: str = ""
    version: str = "0.1.0"
    created: str = ""
    modified: str = ""
    unit_system: str = "METRIC"  # "METRIC", "FIELD" or "SI"

    def touch(self) -> None:
        """Update the modified timestamp."""
        self.modified = datetime.now(timezone.utc).isoformat()


@dataclass
class CaseDefinition:
    """Grid dimensions plus the ordered record stream of one case."""

    meta: CaseMeta = field(default_factory=CaseMeta)
    dims: list[int] = field(default_factory=lambda: [1, 1, 1])
    records: list[dict[str, Any]] = field(default_factory=list)

    def to_records(self) -> list[Record]:
        """Record stream including the leading DIMENS record."""
        return [Record("DIMENS", list(self.dims))] + [Record.from_dict(r) for r in self.records]

    def add_record(self, name: str, items: list[Any] | None = None) -> None:
        self.records.append(Record(name, items if items is not None else []).to_dict())


# --- JSON serialization ---


class _NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, (np.integer,)):
            return int(obj)
        if isinstance(obj, (np.floating,)):
            return float(obj)
        return super().default(obj)


def save_case_json(case: CaseDefinition, path: str | Path) -> None:
    """Save a case definition to a JSON file."""
    path = Path(path)
    if not case.meta.created:
        case.meta.created = datetime.now(timezone.utc).isoformat()
    case.meta.touch()

    with open(path, "w") as f:
        json.dump(asdict(case), f, indent=2, cls=_NumpyEncoder)

    logger.info("Saved case to %s", path)


def load_case_json(path: str | Path) -> CaseDefinition:
    """Load a case definition from a JSON file."""
    path = Path(path)
    with open(path) as f:
        data = json.load(f)

    meta = CaseMeta(**data.pop("meta", {}))
    case = CaseDefinition(meta=meta, **data)
    logger.info("Loaded case '%s' (%d records) from %s", meta.name, len(case.records), path)
    return case


def build_properties(case: CaseDefinition, finalize: bool = True) -> GridProperties:
    """Run the case record stream through the property engine."""
    return GridProperties.from_records(
        case.to_records(), unit_system=case.meta.unit_system, finalize=finalize
    )


# --- HDF5 helpers ---


def save_arrays_hdf5(arrays: dict[str, np.ndarray], path: str | Path) -> None:
    """Save a dictionary of numpy arrays to HDF5."""
    if not _HAS_H5PY:
        logger.warning("h5py not available, skipping HDF5 save")
        return
    path = Path(path)
    with h5py.File(path, "w") as f:
        for key, arr in arrays.items():
            f.create_dataset(key, data=arr)
        f.attrs["created"] = datetime.now(timezone.utc).isoformat()
    logger.info("Saved %d arrays to %s", len(arrays), path)


def load_arrays_hdf5(path: str | Path) -> dict[str, np.ndarray]:
    """Load all datasets from an HDF5 file into a dictionary."""
    if not _HAS_H5PY:
        logger.warning("h5py not available, skipping HDF5 load")
        return {}
    path = Path(path)
    arrays: dict[str, np.ndarray] = {}
    with h5py.File(path, "r") as f:
        for key in f.keys():
            arrays[key] = f[key][:]
    return arrays


def property_arrays(props: GridProperties) -> dict[str, np.ndarray]:
    """All materialized property arrays keyed by keyword name."""
    arrays = {p.name: np.array(p.values()) for p in props.int_properties()}
    arrays.update({p.name: np.array(p.values()) for p in props.double_properties()})
    return arrays


def export_properties_hdf5(props: GridProperties, path: str | Path) -> None:
    """Write every materialized property array to an HDF5 file."""
    save_arrays_hdf5(property_arrays(props), path)
