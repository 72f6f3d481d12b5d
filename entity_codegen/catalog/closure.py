"""Reachability closure over the type catalog.

Starting from a seed set, the closure follows two edge kinds until a pass
adds nothing new:

1. a type's base type;
2. the composite or enumeration named by a property's declared type, after
   unwrapping one level of ``Collection(...)``.

Scalars and string-like declared types are leaves. Names missing from the
catalog are not added; they become placeholder derived types later.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from entity_codegen.catalog.labels import PEOPLE_LABELS
from entity_codegen.catalog.model import (
    SUPPORTED_SCALARS,
    CatalogProperty,
    parse_declared_type,
)
from entity_codegen.catalog.registry import TypeCatalog
from entity_codegen.core.exceptions import UnsupportedDeclaredTypeError
from entity_codegen.core.ir import ConnectorSchema

logger = logging.getLogger(__name__)


def referenced_name(
    catalog: TypeCatalog,
    prop: CatalogProperty,
    owner: str,
) -> str | None:
    """Return the catalog composite or enum a property points at, if any.

    Raises:
        UnsupportedDeclaredTypeError: If the property names an unknown scalar.
    """
    declared = parse_declared_type(prop.declared_type)
    if declared.is_scalar or declared.namespace is None:
        if declared.element not in SUPPORTED_SCALARS:
            raise UnsupportedDeclaredTypeError(prop.declared_type, f"{owner}.{prop.name}")
        return None
    if catalog.is_string_like(declared.element):
        return None
    name = declared.catalog_name
    if name is None:
        raise UnsupportedDeclaredTypeError(prop.declared_type, f"{owner}.{prop.name}")
    if catalog.is_enum(name) or catalog.has(name):
        return name
    return None


def compute_closure(catalog: TypeCatalog, seeds: Iterable[str]) -> list[str]:
    """Compute the names reachable from *seeds*.

    The result lists the seeds first (in the given order, aliases resolved,
    unknown names skipped) followed by names in discovery order. Enumeration
    names are included alongside composite types.
    """
    closure: list[str] = []
    members: set[str] = set()

    def _add(name: str) -> bool:
        if name in members:
            return False
        members.add(name)
        closure.append(name)
        return True

    for seed in seeds:
        resolved = catalog.resolve_name(seed)
        if catalog.has(resolved) or catalog.is_enum(resolved):
            _add(resolved)
        else:
            logger.debug("Closure seed '%s' is not a catalog type; skipped", seed)

    passes = 0
    added = True
    while added:
        added = False
        passes += 1
        for name in list(closure):
            if catalog.is_enum(name):
                continue
            catalog_type = catalog.get(name)
            if catalog_type.base_type and catalog.has(catalog_type.base_type):
                added = _add(catalog.resolve_name(catalog_type.base_type)) or added
            for prop in catalog_type.properties:
                referenced = referenced_name(catalog, prop, name)
                if referenced is not None:
                    added = _add(referenced) or added

    logger.debug("Catalog closure: %d names after %d passes", len(closure), passes)
    return closure


def closure_seeds(
    catalog: TypeCatalog,
    schema: ConnectorSchema | None = None,
    root_facet: str = "itemFacet",
) -> list[str]:
    """Seed set for a schema: label payload types, the root facet and entity names."""
    seeds: list[str] = [info.catalog_type for info in PEOPLE_LABELS.values()]
    seeds.append(root_facet)
    if schema is not None:
        for prop in schema.properties:
            if prop.person_entity and catalog.has(prop.person_entity.entity):
                seeds.append(catalog.resolve_name(prop.person_entity.entity))

    unique: list[str] = []
    for seed in seeds:
        if seed not in unique:
            unique.append(seed)
    return unique
