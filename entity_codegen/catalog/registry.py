"""Type catalog - loads and indexes the profile type snapshot.

The snapshot is a JSON document with four sections:

    types        composite types with their declared properties
    enums        closed enumerations (name -> members)
    stringTypes  opaque declared types rendered as plain strings
    aliases      alternative entity names (personAnniversary -> personAnnualEvent)
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

from entity_codegen.catalog.model import (
    CatalogProperty,
    CatalogSnapshot,
    CatalogType,
    parse_declared_type,
)
from entity_codegen.core.exceptions import (
    CatalogLoadError,
    CatalogTypeNotFoundError,
    DuplicateCatalogTypeError,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_RESOURCE = "profile_catalog.json"


def _parse_type(raw: dict[str, Any]) -> CatalogType:
    properties = tuple(
        CatalogProperty(
            name=prop["name"],
            declared_type=prop["type"],
            nullable=prop.get("nullable", True),
        )
        for prop in raw.get("properties", [])
    )
    return CatalogType(
        name=raw["name"],
        properties=properties,
        base_type=raw.get("baseType"),
    )


def parse_snapshot(document: dict[str, Any]) -> CatalogSnapshot:
    """Build a CatalogSnapshot from a decoded JSON document."""
    return CatalogSnapshot(
        types=[_parse_type(raw) for raw in document.get("types", [])],
        enums={
            name: tuple(members) for name, members in document.get("enums", {}).items()
        },
        string_types=frozenset(document.get("stringTypes", [])),
        aliases=dict(document.get("aliases", {})),
        version=document.get("version"),
    )


def load_snapshot(path: Path | str | None = None) -> CatalogSnapshot:
    """Read a snapshot from *path*, or the packaged snapshot when None.

    Raises:
        CatalogLoadError: If the file cannot be read or is not a valid snapshot.
    """
    location = str(path) if path is not None else DEFAULT_CATALOG_RESOURCE
    try:
        if path is None:
            text = (
                resources.files("entity_codegen.catalog")
                .joinpath("data")
                .joinpath(DEFAULT_CATALOG_RESOURCE)
                .read_text(encoding="utf-8")
            )
        else:
            text = Path(path).read_text(encoding="utf-8")
        document = json.loads(text)
        return parse_snapshot(document)
    except (OSError, ValueError) as e:
        raise CatalogLoadError(location, str(e)) from e
    except (KeyError, TypeError, AttributeError) as e:
        raise CatalogLoadError(location, f"malformed snapshot: {e!r}") from e


class TypeCatalog:
    """Read-only index over one catalog snapshot.

    There is exactly one catalog per generation run: load once, then
    read-only access for the lifetime of the run.

    Args:
        snapshot: Parsed snapshot content.

    Raises:
        DuplicateCatalogTypeError: If two types share a name.
    """

    def __init__(self, snapshot: CatalogSnapshot) -> None:
        self._types: dict[str, CatalogType] = {}
        self._enums = dict(snapshot.enums)
        self._string_types = snapshot.string_types
        self._aliases = dict(snapshot.aliases)
        self.version = snapshot.version
        self._load(snapshot.types)

    @classmethod
    def load(cls, path: Path | str | None = None) -> TypeCatalog:
        """Create a catalog from a snapshot file (packaged snapshot by default)."""
        catalog = cls(load_snapshot(path))
        logger.debug(
            "Loaded type catalog %s: %d types, %d enums",
            path or DEFAULT_CATALOG_RESOURCE,
            len(catalog),
            len(catalog._enums),
        )
        return catalog

    def _load(self, types: list[CatalogType]) -> None:
        for catalog_type in types:
            if catalog_type.name in self._types:
                raise DuplicateCatalogTypeError(catalog_type.name)
            self._types[catalog_type.name] = catalog_type

    def resolve_name(self, name: str) -> str:
        """Map an alternative entity name onto its catalog type name."""
        return self._aliases.get(name, name)

    def get(self, name: str) -> CatalogType:
        """Look up a composite type by (possibly aliased) name.

        Raises:
            CatalogTypeNotFoundError: If no type matches the given name.
        """
        try:
            return self._types[self.resolve_name(name)]
        except KeyError:
            raise CatalogTypeNotFoundError(name) from None

    def has(self, name: str) -> bool:
        """Check if a composite type name (or alias) is registered."""
        return self.resolve_name(name) in self._types

    def find(self, name: str) -> CatalogType | None:
        return self._types.get(self.resolve_name(name))

    @property
    def type_names(self) -> list[str]:
        """List all composite type names, sorted alphabetically."""
        return sorted(self._types.keys())

    @property
    def enum_names(self) -> list[str]:
        return sorted(self._enums.keys())

    def is_enum(self, name: str) -> bool:
        return name in self._enums

    def enum_members(self, name: str) -> tuple[str, ...]:
        try:
            return self._enums[name]
        except KeyError:
            raise CatalogTypeNotFoundError(name) from None

    def is_string_like(self, declared_type: str) -> bool:
        """True for opaque declared types that render as plain strings."""
        return parse_declared_type(declared_type).element in self._string_types

    def all_properties(self, name: str) -> list[CatalogProperty]:
        """Properties of a type including inherited ones, base type first."""
        chain: list[CatalogType] = []
        current: CatalogType | None = self.get(name)
        seen: set[str] = set()
        while current is not None and current.name not in seen:
            seen.add(current.name)
            chain.append(current)
            current = self.find(current.base_type) if current.base_type else None

        properties: dict[str, CatalogProperty] = {}
        for catalog_type in reversed(chain):
            for prop in catalog_type.properties:
                properties[prop.name] = prop
        return list(properties.values())

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self._types.values())

    def __len__(self) -> int:
        """Number of composite types."""
        return len(self._types)
