"""Materialized properties of one numeric kind."""

from __future__ import annotations

import logging
from typing import Iterator

from gridprops.core.errors import TypeMismatch
from gridprops.core.grid import GridDims
from gridprops.core.property import GridProperty
from gridprops.core.registry import KeywordRegistry, PropertyKind, normalize_keyword
from gridprops.utils.sequences import LazyMap, lazy_map

logger = logging.getLogger(__name__)


class PropertyCollection:
    """Insertion-ordered set of materialized properties of a single kind.

    Properties are created lazily on first reference and filled with the
    registry default.

    Args:
        kind: Numeric kind held by this collection.
        registry: Keyword registry used for kind/default/dimension look-ups.
        dims: Grid dimensions shared by every property.
    """

    def __init__(self, kind: PropertyKind, registry: KeywordRegistry, dims: GridDims):
        self.kind = kind
        self.registry = registry
        self.dims = dims
        self._properties: dict[str, GridProperty] = {}

    def get_or_create(self, name: str) -> GridProperty:
        """Return the property *name*, materializing it if needed.

        Raises:
            UnsupportedKeyword: If *name* is not registered.
            TypeMismatch: If *name* is registered under the other kind.
        """
        key = normalize_keyword(name)
        prop = self._properties.get(key)
        if prop is not None:
            return prop

        descriptor = self.registry.descriptor_for(key)
        self._check_kind(key, descriptor.kind)
        prop = GridProperty(descriptor, self.dims)
        self._properties[key] = prop
        logger.debug("Materialized %s property %s", self.kind.value, key)
        return prop

    def get(self, name: str) -> GridProperty | None:
        """Non-creating look-up."""
        return self._properties.get(normalize_keyword(name))

    def create_detached(self, name: str) -> GridProperty:
        """Default-filled, read-only property that is not registered here."""
        descriptor = self.registry.descriptor_for(name)
        self._check_kind(descriptor.name, descriptor.kind)
        prop = GridProperty(descriptor, self.dims)
        prop.freeze()
        return prop

    def iterate(self) -> LazyMap:
        """Restartable view of the materialized properties, in insertion order."""
        return lazy_map(self._properties.__getitem__, self._properties)

    def names(self) -> list[str]:
        return list(self._properties)

    def freeze(self) -> None:
        for prop in self._properties.values():
            prop.freeze()

    def _check_kind(self, key: str, kind: PropertyKind) -> None:
        if kind is not self.kind:
            raise TypeMismatch(
                f"Keyword '{key}' is a {kind.value} property, not {self.kind.value}"
            )

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_keyword(name) in self._properties

    def __iter__(self) -> Iterator[GridProperty]:
        return iter(self._properties.values())

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"PropertyCollection({self.kind.value}: {', '.join(self._properties)})"
