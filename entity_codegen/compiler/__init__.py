"""Expression compilers for entity and principal properties."""

from __future__ import annotations

from entity_codegen.compiler.entity import EntityCompiler, common_array_root
from entity_codegen.compiler.principal import (
    KNOWN_PRINCIPAL_MEMBERS,
    PrincipalCompiler,
    PrincipalEntry,
    principal_field_entries,
)
from entity_codegen.compiler.validation import (
    LeafWrap,
    ValidatingLeafWrap,
    apply_validation,
    identity_leaf_wrap,
    leaf_wrap_for,
)

__all__ = [
    # Entity
    "EntityCompiler",
    "common_array_root",
    # Principal
    "KNOWN_PRINCIPAL_MEMBERS",
    "PrincipalCompiler",
    "PrincipalEntry",
    "principal_field_entries",
    # Validation
    "LeafWrap",
    "ValidatingLeafWrap",
    "apply_validation",
    "identity_leaf_wrap",
    "leaf_wrap_for",
]
