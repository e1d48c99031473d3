"""Keyword records consumed by the property engine.

Records arrive already tokenized: a keyword name plus its operands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from gridprops.core.errors import RecordError
from gridprops.core.registry import normalize_keyword


@dataclass
class Record:
    """One keyword instruction.

    For property keywords ``items`` holds the flat cell values; for
    multi-row keywords (ADDREG, FAULTS, ...) it holds a list of rows.
    """

    name: str
    items: list[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.name = normalize_keyword(self.name)
        self.items = list(self.items)

    def rows(self) -> list[list[Any]]:
        """Items interpreted as a list of operand rows."""
        rows = []
        for row in self.items:
            if not isinstance(row, (list, tuple)):
                raise RecordError(f"{self.name}: expected a list of rows, got {row!r}")
            rows.append(list(row))
        return rows

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Record:
        if "name" not in data:
            raise RecordError(f"Record without a name: {data}")
        return cls(data["name"], data.get("items", []))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "items": self.items}
