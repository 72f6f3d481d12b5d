"""Catalog type records and the declared-type grammar.

Declared types follow the profile schema notation::

    Edm.String                         scalar
    graph.personRelationship           enumeration, string-like or composite
    Collection(graph.relatedPerson)    collection wrapping either of the above
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache

_COLLECTION_PATTERN = re.compile(r"^Collection\((.+)\)$")

SCALAR_NAMESPACE = "Edm"
CATALOG_NAMESPACE = "graph"

SUPPORTED_SCALARS = frozenset(
    {
        "Edm.String",
        "Edm.Date",
        "Edm.DateTimeOffset",
        "Edm.TimeOfDay",
        "Edm.Boolean",
        "Edm.Int32",
        "Edm.Int64",
        "Edm.Double",
    }
)


@dataclass(frozen=True)
class CatalogProperty:
    """A declared property of a catalog type."""

    name: str
    declared_type: str
    nullable: bool = True


@dataclass(frozen=True)
class CatalogType:
    """A named composite type of the catalog, optionally extending a base type."""

    name: str
    properties: tuple[CatalogProperty, ...] = ()
    base_type: str | None = None

    def property_names(self) -> list[str]:
        return [prop.name for prop in self.properties]


@dataclass(frozen=True)
class DeclaredType:
    """A parsed declared type reference.

    ``element`` is the declared type with any ``Collection(...)`` wrapper
    removed; ``local_name`` is the part after the namespace prefix.
    """

    raw: str
    element: str
    is_collection: bool
    namespace: str | None
    local_name: str

    @property
    def is_scalar(self) -> bool:
        return self.namespace == SCALAR_NAMESPACE

    @property
    def catalog_name(self) -> str | None:
        """The catalog lookup name, or None for scalars and unqualified names."""
        return self.local_name if self.namespace == CATALOG_NAMESPACE else None


@lru_cache(maxsize=512)
def parse_declared_type(declared: str) -> DeclaredType:
    """Parse a declared type string, unwrapping one level of ``Collection(...)``."""
    text = declared.strip()
    match = _COLLECTION_PATTERN.match(text)
    element = match.group(1).strip() if match else text
    namespace, sep, local_name = element.partition(".")
    if not sep:
        return DeclaredType(
            raw=text,
            element=element,
            is_collection=match is not None,
            namespace=None,
            local_name=element,
        )
    return DeclaredType(
        raw=text,
        element=element,
        is_collection=match is not None,
        namespace=namespace,
        local_name=local_name,
    )


@dataclass
class CatalogSnapshot:
    """Raw content of a catalog snapshot before it is indexed by the registry."""

    types: list[CatalogType] = field(default_factory=list)
    enums: dict[str, tuple[str, ...]] = field(default_factory=dict)
    string_types: frozenset[str] = frozenset()
    aliases: dict[str, str] = field(default_factory=dict)
    version: str | None = None
