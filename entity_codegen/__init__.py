"""entity_codegen - entity type synthesis and expression compilation for people connectors."""

from __future__ import annotations

from entity_codegen.catalog.registry import TypeCatalog
from entity_codegen.compiler.entity import EntityCompiler
from entity_codegen.compiler.principal import PrincipalCompiler
from entity_codegen.compiler.validation import identity_leaf_wrap, leaf_wrap_for
from entity_codegen.core.config import GeneratorConfig, available_targets, load_target_profile
from entity_codegen.core.enums import InputFormat, PropertyType, TargetLanguage
from entity_codegen.core.exceptions import (
    CatalogError,
    CatalogLoadError,
    CatalogTypeNotFoundError,
    CompilationError,
    DuplicateCatalogTypeError,
    EntityCodegenError,
    MissingMappingError,
    RowValidationError,
    SynthesisError,
    SynthesisFrozenError,
    UnknownTargetError,
    UnsupportedDeclaredTypeError,
)
from entity_codegen.core.ir import (
    ConnectorProperty,
    ConnectorSchema,
    EntityFieldMapping,
    PersonEntity,
    SourceDescriptor,
)
from entity_codegen.generator import CompiledProperty, GenerationResult, Generator
from entity_codegen.synthesis.bundle import TypeBundle, build_type_bundle
from entity_codegen.synthesis.tree import build_path_tree

__all__ = [
    # Pipeline
    "Generator",
    "GenerationResult",
    "CompiledProperty",
    # Config
    "GeneratorConfig",
    "available_targets",
    "load_target_profile",
    # IR
    "ConnectorSchema",
    "ConnectorProperty",
    "PersonEntity",
    "EntityFieldMapping",
    "SourceDescriptor",
    # Catalog and synthesis
    "TypeCatalog",
    "TypeBundle",
    "build_type_bundle",
    "build_path_tree",
    # Compilers
    "EntityCompiler",
    "PrincipalCompiler",
    "identity_leaf_wrap",
    "leaf_wrap_for",
    # Enums
    "InputFormat",
    "PropertyType",
    "TargetLanguage",
    # Exceptions
    "EntityCodegenError",
    "CatalogError",
    "CatalogLoadError",
    "CatalogTypeNotFoundError",
    "DuplicateCatalogTypeError",
    "UnsupportedDeclaredTypeError",
    "SynthesisError",
    "SynthesisFrozenError",
    "CompilationError",
    "UnknownTargetError",
    "MissingMappingError",
    "RowValidationError",
]
