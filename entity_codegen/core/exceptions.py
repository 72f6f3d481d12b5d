"""entity_codegen exception hierarchy.

Every failure of the synthesis and compilation pipeline is a deterministic
function of its input, so errors are raised synchronously and never retried.
"""

from __future__ import annotations


class EntityCodegenError(Exception):
    """Base exception for all entity_codegen errors."""


# --- Catalog ---


class CatalogError(EntityCodegenError):
    """Base for type catalog errors."""


class CatalogLoadError(CatalogError):
    """Raised when a catalog snapshot cannot be read or parsed."""

    def __init__(self, location: str, detail: str) -> None:
        self.location = location
        super().__init__(f"Failed to load type catalog from {location}: {detail}")


class CatalogTypeNotFoundError(CatalogError):
    """Raised when a type name cannot be found in the catalog."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Catalog type not found: '{type_name}'")


class DuplicateCatalogTypeError(CatalogError):
    """Raised when two catalog entries resolve to the same type name."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Duplicate catalog type name '{type_name}'")


class UnsupportedDeclaredTypeError(CatalogError):
    """Raised when a declared type names a primitive outside the known set.

    Generation must stop: emitting code for an unknown primitive would
    reference a type that does not exist in the generated project.
    """

    def __init__(self, declared_type: str, context: str | None = None) -> None:
        self.declared_type = declared_type
        self.context = context
        where = f" (in {context})" if context else ""
        super().__init__(
            f"Unsupported declared type '{declared_type}'{where}. "
            "Add a mapping for it before generating code."
        )


# --- Synthesis ---


class SynthesisError(EntityCodegenError):
    """Base for derived type synthesis errors."""


class SynthesisFrozenError(SynthesisError):
    """Raised when a frozen synthesis context is asked to synthesize again."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(
            f"Cannot synthesize '{type_name}': the synthesis context is frozen"
        )


# --- Compilation ---


class CompilationError(EntityCodegenError):
    """Base for expression compilation errors."""


class UnknownTargetError(CompilationError):
    """Raised when a target language profile cannot be resolved."""

    def __init__(self, target: str, detail: str | None = None) -> None:
        self.target = target
        suffix = f": {detail}" if detail else ""
        super().__init__(f"Unsupported target language '{target}'{suffix}")


class MissingMappingError(CompilationError):
    """Raised by a generated transform for a people property with no entity mappings."""

    def __init__(self, property_name: str) -> None:
        self.property_name = property_name
        super().__init__(
            f"Missing entity mappings for people property '{property_name}'. "
            "Implement its transform by hand."
        )


# --- Runtime ---


class RowValidationError(EntityCodegenError):
    """Raised by the runtime helpers when a raw value violates a constraint."""

    def __init__(self, property_name: str, detail: str) -> None:
        self.property_name = property_name
        super().__init__(f"Invalid value for '{property_name}': {detail}")
