"""Core grid property modules for GridProps.

This package contains the property engine:
- registry: Supported keywords with kind, default and dimension
- grid: Grid dimensions and (i, j, k) indexing
- property: Dense per-cell property arrays
- collection: Materialized properties of one numeric kind
- box: BOX/ENDBOX clipping window
- regions: Region-driven edits (ADDREG, MULTIREG, EQUALREG)
- faults: Named faults and MULTFLT multipliers
- properties: Record dispatch and query facade
- config: Case persistence (JSON + HDF5)
"""
