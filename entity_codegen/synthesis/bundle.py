"""Type bundle - the immutable result of the build phase.

The bundle runs closure, synthesis, alias table and descriptor resolution
over a whole schema, in that order, and exposes the per-type views consumed
by the expression compilers and the declaration renderers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from entity_codegen.catalog.closure import closure_seeds, compute_closure
from entity_codegen.catalog.registry import TypeCatalog
from entity_codegen.core.enums import TargetLanguage
from entity_codegen.core.ir import ConnectorSchema
from entity_codegen.core.naming import (
    to_cs_pascal,
    to_py_identifier,
    to_ts_identifier,
    unique_field_var_name,
)
from entity_codegen.synthesis.aliases import TypeAlias, TypeAliasTable, build_alias_table
from entity_codegen.synthesis.derived import DerivedType, synthesize_schema
from entity_codegen.synthesis.descriptor import TypeDescriptor, resolve_descriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyInfo:
    """A declared property as seen by the expression compiler."""

    name: str
    member_name: str
    descriptor: TypeDescriptor
    nullable: bool = True

    @property
    def is_collection(self) -> bool:
        return self.descriptor.is_collection


@dataclass(frozen=True)
class TypeInfo:
    """A catalog or derived type with its declared properties (inherited included)."""

    name: str
    alias: TypeAlias
    properties: Mapping[str, PropertyInfo] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def display_name(self, language: TargetLanguage) -> str:
        return self.alias.for_target(language)

    def get(self, key: str) -> PropertyInfo | None:
        return self.properties.get(key)


TypeMap = dict[str, TypeInfo]


@dataclass(frozen=True)
class DeclaredField:
    """A field of a type declaration block."""

    name: str
    var_name: str
    member_name: str
    descriptor: TypeDescriptor
    optional: bool = True


@dataclass(frozen=True)
class DeclaredTypeTemplate:
    """One type declaration: own fields plus an optional base type."""

    name: str
    alias: TypeAlias
    fields: tuple[DeclaredField, ...]
    base_name: str | None = None
    base_alias: TypeAlias | None = None
    is_derived: bool = False
    inherited: tuple[DeclaredField, ...] = ()


@dataclass(frozen=True)
class EnumTemplate:
    name: str
    ts_name: str
    cs_name: str
    py_name: str
    guard_name: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class TypeBundle:
    """Everything the compile phase needs to know about types."""

    closure: tuple[str, ...]
    derived: tuple[DerivedType, ...]
    aliases: TypeAliasTable
    type_map: TypeMap
    templates: tuple[DeclaredTypeTemplate, ...]
    enums: tuple[EnumTemplate, ...]
    catalog: TypeCatalog

    def type_info_for(self, entity: str) -> TypeInfo | None:
        """TypeInfo for an entity name, following catalog aliases."""
        info = self.type_map.get(entity)
        if info is not None:
            return info
        return self.type_map.get(self.catalog.resolve_name(entity))


def _declared_fields(
    properties: list[tuple[str, str, bool]],
    aliases: TypeAliasTable,
    catalog: TypeCatalog,
) -> tuple[DeclaredField, ...]:
    used: set[str] = set()
    fields: list[DeclaredField] = []
    for name, declared_type, nullable in properties:
        fields.append(
            DeclaredField(
                name=name,
                var_name=unique_field_var_name(name, used),
                member_name=to_cs_pascal(name),
                descriptor=resolve_descriptor(declared_type, aliases, catalog),
                optional=nullable,
            )
        )
    return tuple(fields)


def _type_info(
    name: str,
    alias: TypeAlias,
    fields: tuple[DeclaredField, ...],
) -> TypeInfo:
    return TypeInfo(
        name=name,
        alias=alias,
        properties={
            item.name: PropertyInfo(
                name=item.name,
                member_name=item.member_name,
                descriptor=item.descriptor,
                nullable=item.optional,
            )
            for item in fields
        },
    )


def build_type_bundle(
    schema: ConnectorSchema,
    catalog: TypeCatalog,
    root_facet: str = "itemFacet",
) -> TypeBundle:
    """Run the whole build phase for *schema*.

    Synthesis sees every property before the bundle is returned, so derived
    types are complete when expression compilation starts.

    Raises:
        UnsupportedDeclaredTypeError: If a reachable property names an unknown type.
    """
    closure = compute_closure(catalog, closure_seeds(catalog, schema, root_facet))
    context = synthesize_schema(schema, catalog, closure)
    derived = context.freeze()
    aliases = build_alias_table(catalog, derived)
    derived_names = {item.name for item in derived}

    type_map: TypeMap = {}
    templates: list[DeclaredTypeTemplate] = []
    enums: list[EnumTemplate] = []

    for name in closure:
        if catalog.is_enum(name):
            alias = to_ts_identifier(name)
            enums.append(
                EnumTemplate(
                    name=name,
                    ts_name=alias,
                    cs_name=to_cs_pascal(name),
                    py_name=alias,
                    guard_name=f"is_{to_py_identifier(name)}",
                    values=catalog.enum_members(name),
                )
            )
            continue
        if name in derived_names:
            continue

        catalog_type = catalog.get(name)
        alias = aliases.get(name) or TypeAlias(to_ts_identifier(name), to_cs_pascal(name))
        own = _declared_fields(
            [(p.name, p.declared_type, p.nullable) for p in catalog_type.properties],
            aliases,
            catalog,
        )
        inherited_props = [
            prop
            for prop in catalog.all_properties(name)
            if prop.name not in {p.name for p in catalog_type.properties}
        ]
        inherited = _declared_fields(
            [(p.name, p.declared_type, p.nullable) for p in inherited_props],
            aliases,
            catalog,
        )
        base_name = catalog_type.base_type
        templates.append(
            DeclaredTypeTemplate(
                name=name,
                alias=alias,
                fields=own,
                base_name=base_name,
                base_alias=aliases.get(base_name) if base_name else None,
                inherited=inherited,
            )
        )
        type_map[name] = _type_info(name, alias, inherited + own)

    for derived_type in derived:
        alias = aliases.get(derived_type.name) or TypeAlias(
            to_ts_identifier(derived_type.name), to_cs_pascal(derived_type.name)
        )
        fields = _declared_fields(
            [(item.name, item.target_type_ref, True) for item in derived_type.fields],
            aliases,
            catalog,
        )
        templates.append(
            DeclaredTypeTemplate(
                name=derived_type.name,
                alias=alias,
                fields=fields,
                is_derived=True,
            )
        )
        type_map[derived_type.name] = _type_info(derived_type.name, alias, fields)

    logger.debug(
        "Type bundle: %d catalog types, %d derived types, %d enums",
        len(templates) - len(derived),
        len(derived),
        len(enums),
    )
    return TypeBundle(
        closure=tuple(closure),
        derived=derived,
        aliases=aliases,
        type_map=type_map,
        templates=tuple(templates),
        enums=tuple(enums),
        catalog=catalog,
    )
