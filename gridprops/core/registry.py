"""Keyword registry for GridProps.

Fixed catalogue of supported grid property keywords, each with its numeric
kind, default value and physical dimension. Built once and shared by
reference; never mutated after construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from gridprops.core.errors import UnsupportedKeyword
from gridprops.utils.units import Dimension

DEFAULT_REGION_KEYWORD = "FLUXNUM"


class PropertyKind(Enum):
    """Numeric kind of a grid property."""

    INTEGER = "int"
    DOUBLE = "double"


def normalize_keyword(name: str) -> str:
    """Canonical form of a keyword name (stripped, upper case)."""
    return name.strip().upper()


@dataclass(frozen=True)
class PropertyDescriptor:
    """Static description of one supported keyword."""

    name: str
    kind: PropertyKind
    default_value: int | float
    dimension: Dimension | None = None
    region_eligible: bool = False

    @property
    def is_integer(self) -> bool:
        return self.kind is PropertyKind.INTEGER


def _int(name: str, default: int = 1, region: bool = False) -> PropertyDescriptor:
    return PropertyDescriptor(name, PropertyKind.INTEGER, default, None, region)


def _double(
    name: str, default: float = 0.0, dimension: Dimension | None = None
) -> PropertyDescriptor:
    return PropertyDescriptor(name, PropertyKind.DOUBLE, default, dimension)


_DEFAULT_TABLE: tuple[PropertyDescriptor, ...] = (
    # Integer region / flag properties
    _int("ACTNUM"),
    _int("SATNUM"),
    _int("IMBNUM"),
    _int("PVTNUM"),
    _int("EQLNUM"),
    _int("ENDNUM"),
    _int("FLUXNUM", region=True),
    _int("MULTNUM", region=True),
    _int("FIPNUM"),
    _int("MISCNUM"),
    _int("OPERNUM", region=True),
    _int("ROCKNUM"),
    _int("KRNUMX"),
    _int("KRNUMY"),
    _int("KRNUMZ"),
    # Double properties, defaults in SI
    _double("PORO"),
    _double("NTG", 1.0),
    _double("PERMX", dimension=Dimension.PERMEABILITY),
    _double("PERMY", dimension=Dimension.PERMEABILITY),
    _double("PERMZ", dimension=Dimension.PERMEABILITY),
    _double("MULTPV", 1.0),
    _double("MULTX", 1.0),
    _double("MULTY", 1.0),
    _double("MULTZ", 1.0),
    _double("MULTX-", 1.0),
    _double("MULTY-", 1.0),
    _double("MULTZ-", 1.0),
    _double("SWATINIT"),
    _double("DX", dimension=Dimension.LENGTH),
    _double("DY", dimension=Dimension.LENGTH),
    _double("DZ", dimension=Dimension.LENGTH),
    _double("TOPS", dimension=Dimension.LENGTH),
    _double("TEMPI", 288.15, Dimension.TEMPERATURE),
    _double("PRESSURE", dimension=Dimension.PRESSURE),
    _double("THCONR", dimension=Dimension.THERMAL_CONDUCTIVITY),
)


class KeywordRegistry:
    """Read-only, case-insensitive keyword catalogue.

    Args:
        descriptors: Descriptors to register. Names are normalized; a name
            may appear only once across both kinds.
        default_region_keyword: Driver used by region edits that name none.
    """

    def __init__(
        self,
        descriptors: Iterable[PropertyDescriptor],
        default_region_keyword: str = DEFAULT_REGION_KEYWORD,
    ):
        table: dict[str, PropertyDescriptor] = {}
        for desc in descriptors:
            key = normalize_keyword(desc.name)
            if key in table:
                raise ValueError(f"Keyword '{key}' registered twice")
            if key != desc.name:
                desc = PropertyDescriptor(
                    key, desc.kind, desc.default_value, desc.dimension, desc.region_eligible
                )
            table[key] = desc
        self._table: Mapping[str, PropertyDescriptor] = MappingProxyType(table)

        region_kw = normalize_keyword(default_region_keyword)
        if region_kw not in self._table or not self._table[region_kw].is_integer:
            raise ValueError(f"Default region keyword '{region_kw}' must be an integer keyword")
        self._default_region_keyword = region_kw

    def supports(self, name: str) -> bool:
        return normalize_keyword(name) in self._table

    def descriptor_for(self, name: str) -> PropertyDescriptor:
        """Return the descriptor for *name*.

        Raises:
            UnsupportedKeyword: If *name* is not registered.
        """
        try:
            return self._table[normalize_keyword(name)]
        except KeyError:
            raise UnsupportedKeyword(name) from None

    @property
    def default_region_keyword(self) -> str:
        return self._default_region_keyword

    def keywords(self, kind: PropertyKind | None = None) -> list[str]:
        """Registered keyword names, optionally restricted to one kind."""
        return [n for n, d in self._table.items() if kind is None or d.kind is kind]

    def region_sets(self) -> dict[str, str]:
        """Map of region-set selector letter to region-eligible keyword.

        ``{"M": "MULTNUM", "F": "FLUXNUM", "O": "OPERNUM"}`` for the default table.
        """
        return {n[0]: n for n, d in self._table.items() if d.region_eligible}

    def __iter__(self) -> Iterator[PropertyDescriptor]:
        return iter(self._table.values())

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.supports(name)


@lru_cache(maxsize=1)
def default_registry() -> KeywordRegistry:
    """Return the shared registry built from the built-in keyword table."""
    return KeywordRegistry(_DEFAULT_TABLE)
