"""Grid property summary reports for GridProps.

Produces a plain-text report listing the grid, every materialized
property with basic statistics, region ids and faults.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from gridprops.core.properties import GridProperties
from gridprops.core.property import GridProperty
from gridprops.utils.units import si_unit


def property_statistics(prop: GridProperty) -> dict[str, float]:
    """Min / max / mean of a property's cell values."""
    values = prop.values()
    return {
        "min": float(np.min(values)),
        "max": float(np.max(values)),
        "mean": float(np.mean(values)),
    }


def generate_text_report(props: GridProperties, title: str = "Untitled") -> str:
    """Generate a plain-text property summary report.

    Args:
        props: Built grid properties.
        title: Case name shown in the header.

    Returns:
        Multi-line text report string.
    """
    lines: list[str] = []
    _hr = "=" * 60

    lines.append(_hr)
    lines.append("  GridProps - Property Report")
    lines.append(f"  {title}")
    lines.append(_hr)
    lines.append("")

    lines.append("GRID")
    lines.append("-" * 40)
    lines.append(f"  Dimensions:        {props.dims.nx} x {props.dims.ny} x {props.dims.nz}")
    lines.append(f"  Cells:             {props.dims.size}")
    lines.append(f"  Input units:       {props.converter.unit_system.value}")
    lines.append("")

    int_props = list(props.int_properties())
    if int_props:
        lines.append("INTEGER PROPERTIES")
        lines.append("-" * 40)
        for prop in int_props:
            regions = prop.regions()
            shown = ", ".join(str(r) for r in regions[:10])
            if len(regions) > 10:
                shown += ", ..."
            lines.append(f"  {prop.name:<18} regions: {shown}")
        lines.append("")

    double_props = list(props.double_properties())
    if double_props:
        lines.append("DOUBLE PROPERTIES")
        lines.append("-" * 40)
        for prop in double_props:
            stats = property_statistics(prop)
            unit = si_unit(prop.dimension) if prop.dimension else "-"
            lines.append(
                f"  {prop.name:<18} min {stats['min']:.6g}  max {stats['max']:.6g}  "
                f"mean {stats['mean']:.6g}  [{unit}]"
            )
        lines.append("")

    if len(props.faults):
        lines.append("FAULTS")
        lines.append("-" * 40)
        for fault in props.faults:
            lines.append(
                f"  {fault.name:<18} segments: {len(fault.segments)}  "
                f"multiplier: {fault.multiplier:.4g}"
            )
        lines.append("")

    lines.append(f"Generated {datetime.now(timezone.utc).isoformat()}")
    return "\n".join(lines)


def save_text_report(props: GridProperties, path: str | Path, title: str = "Untitled") -> None:
    """Write the text report to *path*."""
    Path(path).write_text(generate_text_report(props, title))
