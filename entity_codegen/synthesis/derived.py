"""Derived type synthesis for entity names absent from the catalog.

Derived types are inferred from the shape of entity mappings. Their shape is
a function of the whole schema: every property naming the same entity
contributes fields, so synthesis runs over the complete property list inside
one SynthesisContext, which is then frozen before any expression is compiled.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from entity_codegen.catalog.model import CATALOG_NAMESPACE, parse_declared_type
from entity_codegen.catalog.registry import TypeCatalog
from entity_codegen.core.exceptions import SynthesisFrozenError
from entity_codegen.core.ir import ConnectorSchema, EntityFieldMapping
from entity_codegen.core.naming import to_cs_pascal, unique_field_var_name
from entity_codegen.synthesis.tree import PathTree, build_path_tree, is_leaf

logger = logging.getLogger(__name__)

LEAF_DECLARED_TYPE = "Edm.String"


@dataclass(frozen=True)
class DerivedField:
    """A field of a derived type.

    ``target_type_ref`` is a declared type: ``Edm.String`` for leaves and
    ``graph.<nestedName>`` for nested derived types.
    """

    name: str
    var_name: str
    target_type_ref: str
    is_collection: bool = False

    @property
    def is_composite(self) -> bool:
        return self.target_type_ref != LEAF_DECLARED_TYPE

    @property
    def nested_type_name(self) -> str | None:
        if not self.is_composite:
            return None
        return parse_declared_type(self.target_type_ref).local_name


@dataclass(frozen=True)
class DerivedType:
    """A frozen derived type."""

    name: str
    fields: tuple[DerivedField, ...] = ()

    def field_names(self) -> list[str]:
        return [item.name for item in self.fields]

    def get_field(self, name: str) -> DerivedField | None:
        for item in self.fields:
            if item.name == name:
                return item
        return None


@dataclass
class _DerivedTypeBuilder:
    name: str
    fields: list[DerivedField] = field(default_factory=list)
    used_var_names: set[str] = field(default_factory=set)

    def find(self, key: str) -> DerivedField | None:
        for item in self.fields:
            if item.name == key:
                return item
        return None

    def freeze(self) -> DerivedType:
        return DerivedType(name=self.name, fields=tuple(self.fields))


class SynthesisContext:
    """Owned build-phase state for derived type synthesis.

    ``synthesize`` is idempotent and cumulative. Once ``freeze`` is called the
    context refuses further synthesis and only hands out frozen types.
    """

    def __init__(self) -> None:
        self._builders: dict[str, _DerivedTypeBuilder] = {}
        self._frozen: tuple[DerivedType, ...] | None = None

    @property
    def is_frozen(self) -> bool:
        return self._frozen is not None

    def has(self, name: str) -> bool:
        return name in self._builders

    def get(self, name: str) -> DerivedType:
        return self._builders[name].freeze()

    @property
    def type_names(self) -> list[str]:
        """Derived type names in creation order."""
        return list(self._builders)

    def __len__(self) -> int:
        return len(self._builders)

    def synthesize(self, name: str, tree: PathTree) -> DerivedType:
        """Create or extend the derived type *name* from a path tree.

        Raises:
            SynthesisFrozenError: If the context has been frozen.
        """
        if self._frozen is not None:
            raise SynthesisFrozenError(name)
        return self._synthesize(name, tree).freeze()

    def _synthesize(self, name: str, tree: PathTree) -> _DerivedTypeBuilder:
        builder = self._builders.get(name)
        merging = builder is not None
        if builder is None:
            builder = _DerivedTypeBuilder(name)
            self._builders[name] = builder
            logger.debug("Created derived type '%s'", name)

        for key, child in tree.items():
            existing = builder.find(key)
            if existing is not None:
                if is_leaf(child):
                    continue
                if existing.nested_type_name is not None:
                    self._synthesize(existing.nested_type_name, child)  # type: ignore[arg-type]
                else:
                    logger.debug(
                        "Derived type '%s' keeps leaf field '%s'; nested paths ignored",
                        name,
                        key,
                    )
                continue

            var_name = unique_field_var_name(key, builder.used_var_names)
            if is_leaf(child):
                target = LEAF_DECLARED_TYPE
            else:
                nested_name = f"{name}{to_cs_pascal(key)}"
                self._synthesize(nested_name, child)  # type: ignore[arg-type]
                target = f"{CATALOG_NAMESPACE}.{nested_name}"
            builder.fields.append(DerivedField(name=key, var_name=var_name, target_type_ref=target))
            if merging:
                logger.debug("Merged field '%s' into derived type '%s'", key, name)
        return builder

    def freeze(self) -> tuple[DerivedType, ...]:
        """End the build phase and return every derived type in creation order."""
        if self._frozen is None:
            self._frozen = tuple(builder.freeze() for builder in self._builders.values())
            logger.debug("Synthesis frozen with %d derived types", len(self._frozen))
        return self._frozen


def group_entity_fields(
    schema: ConnectorSchema,
) -> dict[str, list[EntityFieldMapping]]:
    """Group entity mappings by entity name, in property order.

    Principal properties are skipped: their shape is fixed.
    """
    grouped: dict[str, list[EntityFieldMapping]] = {}
    for prop in schema.properties:
        if prop.person_entity is None or prop.type.is_principal:
            continue
        grouped.setdefault(prop.person_entity.entity, []).extend(prop.person_entity.fields)
    return grouped


def _missing_reference(catalog: TypeCatalog, declared_type: str) -> str | None:
    """Composite name referenced by *declared_type* that the catalog lacks."""
    declared = parse_declared_type(declared_type)
    name = declared.catalog_name
    if name is None or catalog.is_string_like(declared.element):
        return None
    if catalog.is_enum(name) or catalog.has(name):
        return None
    return name


def synthesize_schema(
    schema: ConnectorSchema,
    catalog: TypeCatalog,
    closure: Iterable[str] = (),
) -> SynthesisContext:
    """Run derived type synthesis over a whole schema.

    The returned context is not frozen yet; callers freeze it once every
    contributor has been processed.
    """
    context = SynthesisContext()

    for entity, fields in group_entity_fields(schema).items():
        tree = build_path_tree(fields)
        catalog_type = catalog.find(entity)
        if catalog_type is None:
            context.synthesize(entity, tree)
            continue

        for prop in catalog.all_properties(catalog_type.name):
            if parse_declared_type(prop.declared_type).is_collection:
                continue
            missing = _missing_reference(catalog, prop.declared_type)
            node = tree.get(prop.name)
            if missing is None or node is None or is_leaf(node):
                continue
            context.synthesize(missing, node)  # type: ignore[arg-type]

    for name in closure:
        if catalog.is_enum(name) or not catalog.has(name):
            continue
        for prop in catalog.get(name).properties:
            missing = _missing_reference(catalog, prop.declared_type)
            if missing is not None and not context.has(missing):
                logger.debug("Placeholder derived type '%s' for %s.%s", missing, name, prop.name)
                context.synthesize(missing, {})

    return context
