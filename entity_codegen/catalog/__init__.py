"""Type catalog: the fixed profile types, people labels and reachability closure."""

from __future__ import annotations

from entity_codegen.catalog.closure import closure_seeds, compute_closure
from entity_codegen.catalog.labels import (
    BlockedPeopleLabel,
    PeopleLabelInfo,
    get_blocked_people_label,
    get_people_label_info,
    is_supported_people_label,
    supported_people_labels,
)
from entity_codegen.catalog.model import (
    CatalogProperty,
    CatalogType,
    DeclaredType,
    parse_declared_type,
)
from entity_codegen.catalog.registry import TypeCatalog

__all__ = [
    "BlockedPeopleLabel",
    "CatalogProperty",
    "CatalogType",
    "DeclaredType",
    "PeopleLabelInfo",
    "TypeCatalog",
    "closure_seeds",
    "compute_closure",
    "get_blocked_people_label",
    "get_people_label_info",
    "is_supported_people_label",
    "parse_declared_type",
    "supported_people_labels",
]
