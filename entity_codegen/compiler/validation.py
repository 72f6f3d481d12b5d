"""Validation wrapping for compiled reads.

Entity compilers never call the row parser directly: every raw read goes
through a :class:`LeafWrap`, which applies source defaults and the owning
property's string constraints.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from entity_codegen.core.enums import PropertyType
from entity_codegen.core.ir import ConnectorProperty, SourceDescriptor
from entity_codegen.targets.protocol import TargetProfile, ValidationConstraints


@runtime_checkable
class LeafWrap(Protocol):
    """Produces the read expression for one entity leaf."""

    def read(self, source: SourceDescriptor) -> str:
        """Single-valued read from the row."""
        ...

    def read_many(self, source: SourceDescriptor) -> str:
        """Multi-valued read from the row."""
        ...

    def read_relative(self, relative: str, default: str | None = None) -> str:
        """Single-valued read relative to the current array entry."""
        ...

    def read_many_relative(self, relative: str, default: str | None = None) -> str:
        ...


class ValidatingLeafWrap:
    """LeafWrap applying defaults and string constraints of one property.

    With no constraints it is the identity wrap: reads are only defaulted.
    """

    def __init__(
        self,
        profile: TargetProfile,
        property_name: str = "",
        constraints: ValidationConstraints | None = None,
    ) -> None:
        self._profile = profile
        self._name = property_name
        self._constraints = constraints or ValidationConstraints()

    @property
    def validates(self) -> bool:
        return self._constraints.has_string

    def _finish(self, expression: str, default: str | None, *, collection: bool) -> str:
        if default is not None:
            expression = self._profile.apply_default(expression, default, collection=collection)
        if not self.validates:
            return expression
        prop_type = PropertyType.STRING_COLLECTION if collection else PropertyType.STRING
        return self._profile.validate(prop_type, self._name, expression, self._constraints)

    def read(self, source: SourceDescriptor) -> str:
        literal = self._profile.source_literal(source)
        return self._finish(self._profile.read_string(literal), source.default, collection=False)

    def read_many(self, source: SourceDescriptor) -> str:
        literal = self._profile.source_literal(source)
        return self._finish(
            self._profile.read_string_collection(literal), source.default, collection=True
        )

    def read_relative(self, relative: str, default: str | None = None) -> str:
        return self._finish(self._profile.read_entry_string(relative), default, collection=False)

    def read_many_relative(self, relative: str, default: str | None = None) -> str:
        return self._finish(
            self._profile.read_entry_string_collection(relative), default, collection=True
        )


def identity_leaf_wrap(profile: TargetProfile) -> LeafWrap:
    return ValidatingLeafWrap(profile)


def leaf_wrap_for(prop: ConnectorProperty, profile: TargetProfile) -> LeafWrap:
    """LeafWrap for the entity leaves of *prop*.

    Leaves are raw strings, so only string constraints apply; numeric
    constraints are checked on the plain parse path instead.
    """
    if not prop.has_string_constraints:
        return identity_leaf_wrap(profile)
    return ValidatingLeafWrap(profile, prop.name, ValidationConstraints.from_property(prop))


def apply_validation(
    prop: ConnectorProperty,
    expression: str,
    profile: TargetProfile,
    source_literal: str | None = None,
) -> str:
    """Wrap a plain parse *expression* of *prop* with its validator, if any."""
    constraints = ValidationConstraints.from_property(prop)
    if prop.type.is_numeric:
        if not constraints.has_number:
            return expression
    elif not constraints.has_string:
        return expression
    return profile.validate(
        prop.type, prop.name, expression, constraints, source_literal=source_literal
    )
