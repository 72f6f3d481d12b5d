"""Synthesis layer - path trees, derived types and type descriptors."""

from __future__ import annotations

from entity_codegen.synthesis.aliases import TypeAlias, TypeAliasTable, build_alias_table
from entity_codegen.synthesis.bundle import (
    DeclaredField,
    DeclaredTypeTemplate,
    EnumTemplate,
    PropertyInfo,
    TypeBundle,
    TypeInfo,
    TypeMap,
    build_type_bundle,
)
from entity_codegen.synthesis.derived import (
    DerivedField,
    DerivedType,
    SynthesisContext,
    synthesize_schema,
)
from entity_codegen.synthesis.descriptor import TypeDescriptor, TypeRef, resolve_descriptor
from entity_codegen.synthesis.tree import PathTree, build_path_tree, collect_leaves, is_leaf

__all__ = [
    "PathTree",
    "build_path_tree",
    "collect_leaves",
    "is_leaf",
    "DerivedField",
    "DerivedType",
    "SynthesisContext",
    "synthesize_schema",
    "TypeAlias",
    "TypeAliasTable",
    "build_alias_table",
    "TypeDescriptor",
    "TypeRef",
    "resolve_descriptor",
    "DeclaredField",
    "DeclaredTypeTemplate",
    "EnumTemplate",
    "PropertyInfo",
    "TypeBundle",
    "TypeInfo",
    "TypeMap",
    "build_type_bundle",
]
