"""Type descriptor resolution for declared types.

One call resolves the display names for every target together with the
TypeScript runtime guard, so the declaration sets emitted for the targets
always agree on type names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from entity_codegen.catalog.model import parse_declared_type
from entity_codegen.catalog.registry import TypeCatalog
from entity_codegen.core.enums import TargetLanguage
from entity_codegen.core.exceptions import UnsupportedDeclaredTypeError
from entity_codegen.core.naming import to_cs_pascal, to_ts_identifier
from entity_codegen.synthesis.aliases import TypeAliasTable

# Reference kinds
SCALAR = "scalar"
STRING_LIKE = "string"
ENUM = "enum"
COMPOSITE = "composite"


@dataclass(frozen=True)
class TypeRef:
    """Target-neutral reference to an element type.

    ``name`` is the primitive (``string``, ``boolean``, ``number``) for
    scalars, the declared type for string-like types and the catalog or
    derived type name otherwise.
    """

    kind: str
    name: str

    @property
    def is_string(self) -> bool:
        return self.kind == STRING_LIKE or (self.kind == SCALAR and self.name == "string")

    @property
    def is_composite(self) -> bool:
        return self.kind == COMPOSITE


@dataclass(frozen=True)
class _Scalar:
    ts_type: str
    cs_type: str
    py_type: str
    expected: str


_SCALARS: dict[str, _Scalar] = {
    "Edm.String": _Scalar("string", "string", "str", "a string"),
    "Edm.Date": _Scalar("string", "string", "str", "a string"),
    "Edm.DateTimeOffset": _Scalar("string", "DateTimeOffset", "str", "a string"),
    "Edm.TimeOfDay": _Scalar("string", "string", "str", "a string"),
    "Edm.Boolean": _Scalar("boolean", "bool", "bool", "a boolean"),
    "Edm.Int32": _Scalar("number", "int", "int", "a number"),
    "Edm.Int64": _Scalar("number", "long", "int", "a number"),
    "Edm.Double": _Scalar("number", "double", "float", "a number"),
}

_VALUE_PLACEHOLDER = re.compile(r"\bvalue\b")
_ENTRY_PLACEHOLDER = re.compile(r"\bentry\b")

# C# scalars that need an explicit ``?`` to be nullable
CS_VALUE_TYPES = frozenset({"int", "long", "double", "bool", "DateTimeOffset"})


@dataclass(frozen=True)
class TypeDescriptor:
    """Per-target display names and the TypeScript guard for a declared type.

    Guards are written against the placeholder variable ``value`` (and
    ``entry`` for collection elements); renderers substitute real names.
    """

    ts_type: str
    cs_type: str
    py_type: str
    is_collection: bool
    type_check: str
    expected: str
    element: TypeRef
    ts_element: str
    cs_element: str
    py_element: str
    element_type_check: str | None = None
    element_expected: str | None = None

    def type_name(self, language: TargetLanguage, *, element: bool = False) -> str:
        if language is TargetLanguage.CSHARP:
            return self.cs_element if element else self.cs_type
        if language is TargetLanguage.PYTHON:
            return self.py_element if element else self.py_type
        return self.ts_element if element else self.ts_type

    def check_for(self, var_name: str) -> str:
        """The guard expression with ``value`` replaced by *var_name*."""
        return _VALUE_PLACEHOLDER.sub(var_name, self.type_check)

    def element_check_for(self, var_name: str) -> str | None:
        if self.element_type_check is None:
            return None
        return _ENTRY_PLACEHOLDER.sub(var_name, self.element_type_check)


@dataclass(frozen=True)
class _Element:
    ref: TypeRef
    ts: str
    cs: str
    py: str
    check: str
    expected: str


def _resolve_element(
    element_type: str,
    aliases: TypeAliasTable,
    catalog: TypeCatalog,
    var_name: str,
) -> _Element:
    if catalog.is_string_like(element_type):
        return _Element(
            TypeRef(STRING_LIKE, element_type),
            "string",
            "string",
            "str",
            f'typeof {var_name} === "string"',
            "a string",
        )

    declared = parse_declared_type(element_type)
    name = declared.catalog_name
    if name is not None and catalog.is_enum(name):
        alias = to_ts_identifier(name)
        return _Element(
            TypeRef(ENUM, name),
            alias,
            to_cs_pascal(name),
            alias,
            f"is{alias}({var_name})",
            f"{name} value",
        )

    if name is not None:
        type_alias = aliases.get(name)
        if type_alias is not None:
            return _Element(
                TypeRef(COMPOSITE, name),
                type_alias.ts_alias,
                type_alias.cs_name,
                type_alias.py_name,
                f"isRecord({var_name})",
                "an object",
            )

    scalar = _SCALARS.get(element_type)
    if scalar is None:
        raise UnsupportedDeclaredTypeError(element_type)
    return _Element(
        TypeRef(SCALAR, scalar.ts_type),
        scalar.ts_type,
        scalar.cs_type,
        scalar.py_type,
        f'typeof {var_name} === "{scalar.ts_type}"',
        scalar.expected,
    )


def resolve_descriptor(
    declared_type: str,
    aliases: TypeAliasTable,
    catalog: TypeCatalog,
) -> TypeDescriptor:
    """Resolve a declared type into a TypeDescriptor.

    Dispatch order: collection unwrap, string-like whitelist, closed
    enumeration, alias table composite, supported scalar.

    Raises:
        UnsupportedDeclaredTypeError: If the declared type matches none of the above.
    """
    declared = parse_declared_type(declared_type)
    if declared.is_collection:
        element = _resolve_element(declared.element, aliases, catalog, "entry")
        return TypeDescriptor(
            ts_type=f"{element.ts}[]",
            cs_type=f"List<{element.cs}>",
            py_type=f"list[{element.py}]",
            is_collection=True,
            type_check="Array.isArray(value)",
            expected="an array",
            element=element.ref,
            ts_element=element.ts,
            cs_element=element.cs,
            py_element=element.py,
            element_type_check=element.check,
            element_expected=element.expected,
        )

    element = _resolve_element(declared.element, aliases, catalog, "value")
    return TypeDescriptor(
        ts_type=element.ts,
        cs_type=element.cs,
        py_type=element.py,
        is_collection=False,
        type_check=element.check,
        expected=element.expected,
        element=element.ref,
        ts_element=element.ts,
        cs_element=element.cs,
        py_element=element.py,
    )
