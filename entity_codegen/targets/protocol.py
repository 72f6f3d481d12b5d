"""Target profile protocol.

Every target module MUST implement this protocol. The expression compilers
walk path trees once and delegate all syntax to a profile, so the targets
differ only in the fragments below.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from entity_codegen.core.enums import PropertyType, TargetLanguage
from entity_codegen.core.ir import ConnectorProperty, SourceDescriptor

if TYPE_CHECKING:
    from entity_codegen.synthesis.bundle import PropertyInfo, TypeBundle, TypeInfo
    from entity_codegen.synthesis.descriptor import TypeDescriptor

PRINCIPAL_ODATA_TYPE = "microsoft.graph.externalConnectors.principal"


@dataclass(frozen=True)
class ValidationConstraints:
    """String and number constraints of a schema property."""

    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    format: str | None = None
    min_value: float | None = None
    max_value: float | None = None

    @classmethod
    def from_property(cls, prop: ConnectorProperty) -> ValidationConstraints:
        return cls(
            min_length=prop.min_length,
            max_length=prop.max_length,
            pattern=prop.pattern.regex if prop.pattern and prop.pattern.regex else None,
            format=prop.format or None,
            min_value=prop.min_value,
            max_value=prop.max_value,
        )

    @property
    def has_string(self) -> bool:
        return (
            self.min_length is not None
            or self.max_length is not None
            or self.pattern is not None
            or self.format is not None
        )

    @property
    def has_number(self) -> bool:
        return self.min_value is not None or self.max_value is not None


@dataclass(frozen=True)
class PrincipalMember:
    """One principal entry: its key, the typed member it maps to (if known) and its value."""

    key: str
    member: str | None
    value: str


@runtime_checkable
class TargetProfile(Protocol):
    """Syntax primitives of one target language."""

    @property
    def language(self) -> TargetLanguage:
        """The language this profile emits."""
        ...

    @property
    def indent_unit(self) -> str:
        ...

    @property
    def no_value(self) -> str:
        """Literal for an absent value."""
        ...

    @property
    def empty_principal_collection(self) -> str:
        ...

    # --- Raw reads ---

    def source_literal(self, source: SourceDescriptor) -> str:
        """Literal addressing the raw input: a JSON path or a column list."""
        ...

    def read_string(self, source_literal: str) -> str:
        ...

    def read_string_collection(self, source_literal: str) -> str:
        ...

    def read_entry_string(self, relative_path: str) -> str:
        """Read a value relative to the current array entry."""
        ...

    def read_entry_string_collection(self, relative_path: str) -> str:
        ...

    def apply_default(self, expression: str, default: str, *, collection: bool) -> str:
        ...

    def validate(
        self,
        prop_type: PropertyType,
        name: str,
        expression: str,
        constraints: ValidationConstraints,
        *,
        source_literal: str | None = None,
    ) -> str:
        """Wrap *expression* in the validator matching *prop_type*."""
        ...

    def parse_property(self, prop_type: PropertyType, source_literal: str) -> str:
        """Plain parse expression for a property without an entity mapping."""
        ...

    # --- Construction ---

    def object_literal(self, entries: Sequence[tuple[str, str]], level: int) -> str:
        """Untyped structural literal keyed by tree keys."""
        ...

    def typed_object(
        self,
        type_info: TypeInfo,
        entries: Sequence[tuple[PropertyInfo, str]],
        level: int,
    ) -> str:
        """Nominally typed construction of *type_info*."""
        ...

    def coerce_leaf(self, expression: str, descriptor: TypeDescriptor) -> str:
        """Convert a string leaf read into the member type of *descriptor*.

        String-like members and anything without a leaf parser come back
        unchanged.
        """
        ...

    def serialize(self, expression: str, level: int) -> str:
        ...

    def singleton_list(self, value: str) -> str:
        ...

    def broadcast_value(self, var_name: str, *, collection: bool) -> str:
        """Broadcast read of one element of a correlated array at ``index``."""
        ...

    # --- Collection blocks ---

    def render_nested_values(self, read: str, level: int) -> str:
        """A multi-valued read that yields no value when empty."""
        ...

    def render_map(
        self,
        read: str,
        body: str,
        *,
        element_type: str,
        empty_as_no_value: bool,
        level: int,
    ) -> str:
        """Map every raw value (bound to ``value``) through *body*."""
        ...

    def render_broadcast(
        self,
        reads: Sequence[tuple[str, str]],
        body: str,
        *,
        element_type: str,
        empty_as_no_value: bool,
        level: int,
    ) -> str:
        """Zip correlated arrays positionally, binding ``index`` for *body*."""
        ...

    def render_array_entries(self, root: str, body: str, level: int) -> str:
        """Iterate the entries (bound to ``entry``) under a ``[*]`` JSON path."""
        ...

    # --- Principals ---

    @property
    def principal_type(self) -> str:
        ...

    def principal_object(self, members: Sequence[PrincipalMember], level: int) -> str:
        ...

    # --- Placeholders ---

    def missing_mapping(self, property_name: str) -> str:
        """Expression that fails at runtime for an unmapped people property."""
        ...

    def no_source(self, prop_type: PropertyType) -> str:
        ...

    # --- Declarations ---

    def render_declarations(self, bundle: TypeBundle) -> str:
        """Type declaration block for every catalog and derived type of the bundle."""
        ...
