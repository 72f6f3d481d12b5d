"""Python target profile.

Compiled expressions are plain Python expressions evaluated against the
namespace built by :func:`entity_codegen.runtime.expression_namespace`,
which binds ``row`` and the row parser helpers.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TYPE_CHECKING

from entity_codegen.core.enums import PropertyType, TargetLanguage
from entity_codegen.core.ir import SourceDescriptor
from entity_codegen.core.naming import to_py_identifier
from entity_codegen.synthesis.descriptor import SCALAR
from entity_codegen.targets.protocol import (
    PRINCIPAL_ODATA_TYPE,
    PrincipalMember,
    ValidationConstraints,
)

if TYPE_CHECKING:
    from entity_codegen.synthesis.bundle import (
        DeclaredTypeTemplate,
        EnumTemplate,
        PropertyInfo,
        TypeBundle,
        TypeInfo,
    )
    from entity_codegen.synthesis.descriptor import TypeDescriptor

_PARSERS: dict[PropertyType, str] = {
    PropertyType.STRING: "parse_string",
    PropertyType.PRINCIPAL: "parse_string",
    PropertyType.DATE_TIME: "parse_date_time",
    PropertyType.BOOLEAN: "parse_boolean",
    PropertyType.INT64: "parse_int",
    PropertyType.DOUBLE: "parse_float",
    PropertyType.STRING_COLLECTION: "parse_string_collection",
    PropertyType.PRINCIPAL_COLLECTION: "parse_string_collection",
    PropertyType.DATE_TIME_COLLECTION: "parse_date_time_collection",
    PropertyType.INT64_COLLECTION: "parse_int_collection",
    PropertyType.DOUBLE_COLLECTION: "parse_float_collection",
}


_LEAF_PARSERS: dict[str, str] = {
    "bool": "parse_boolean",
    "int": "parse_int",
    "float": "parse_float",
}

def _keyword_arguments(pairs: Sequence[tuple[str, object]]) -> str:
    return ", ".join(f"{key}={value!r}" for key, value in pairs if value is not None)


class PythonProfile:
    """Python syntax for the shared expression compilers."""

    indent_unit = "    "
    no_value = "None"
    empty_principal_collection = "[]"
    principal_type = "Principal"

    @property
    def language(self) -> TargetLanguage:
        return TargetLanguage.PYTHON

    def _indent(self, level: int) -> str:
        return self.indent_unit * level

    # --- Raw reads ---

    def source_literal(self, source: SourceDescriptor) -> str:
        if source.has_json_path:
            return json.dumps(source.json_path)
        return json.dumps(list(source.csv_headers))

    def read_string(self, source_literal: str) -> str:
        return f"parse_string(read_source_value(row, {source_literal}))"

    def read_string_collection(self, source_literal: str) -> str:
        return f"parse_string_collection(read_source_value(row, {source_literal}))"

    def read_entry_string(self, relative_path: str) -> str:
        return f"parse_string(read_entry_value(entry, {json.dumps(relative_path)}))"

    def read_entry_string_collection(self, relative_path: str) -> str:
        return f"parse_string_collection(read_entry_value(entry, {json.dumps(relative_path)}))"

    def apply_default(self, expression: str, default: str, *, collection: bool) -> str:
        helper = "apply_default_collection" if collection else "apply_default_string"
        return f"{helper}({expression}, {json.dumps(default)})"

    def validate(
        self,
        prop_type: PropertyType,
        name: str,
        expression: str,
        constraints: ValidationConstraints,
        *,
        source_literal: str | None = None,
    ) -> str:
        if prop_type is PropertyType.BOOLEAN:
            return expression
        if prop_type.is_numeric:
            arguments = _keyword_arguments(
                [("min_value", constraints.min_value), ("max_value", constraints.max_value)]
            )
            helper = "validate_number_collection" if prop_type.is_collection else "validate_number"
        else:
            arguments = _keyword_arguments(
                [
                    ("min_length", constraints.min_length),
                    ("max_length", constraints.max_length),
                    ("pattern", constraints.pattern),
                    ("format", constraints.format),
                ]
            )
            helper = "validate_string_collection" if prop_type.is_collection else "validate_string"
        if not arguments:
            return expression
        return f"{helper}({json.dumps(name)}, {expression}, {arguments})"

    def parse_property(self, prop_type: PropertyType, source_literal: str) -> str:
        return f"{_PARSERS[prop_type]}(read_source_value(row, {source_literal}))"

    # --- Construction ---

    def object_literal(self, entries: Sequence[tuple[str, str]], level: int) -> str:
        if not entries:
            return "{}"
        child = self._indent(level + 1)
        lines = [f"{child}{json.dumps(key)}: {value}" for key, value in entries]
        return "{\n" + ",\n".join(lines) + f",\n{self._indent(level)}}}"

    def typed_object(
        self,
        type_info: TypeInfo,
        entries: Sequence[tuple[PropertyInfo, str]],
        level: int,
    ) -> str:
        literal = self.object_literal([(prop.name, value) for prop, value in entries], level)
        return f"{type_info.alias.py_name}({literal})"

    def coerce_leaf(self, expression: str, descriptor: TypeDescriptor) -> str:
        if descriptor.is_collection or descriptor.element.kind != SCALAR:
            return expression
        parser = _LEAF_PARSERS.get(descriptor.py_type)
        return f"{parser}({expression})" if parser else expression

    def serialize(self, expression: str, level: int) -> str:
        return f"to_json({expression})"

    def singleton_list(self, value: str) -> str:
        return f"([{value}] if {value} else [])"

    def broadcast_value(self, var_name: str, *, collection: bool) -> str:
        helper = "get_collection_value" if collection else "get_value"
        return f"{helper}({var_name}, index)"

    # --- Collection blocks ---

    def render_nested_values(self, read: str, level: int) -> str:
        return f"({read} or None)"

    def render_map(
        self,
        read: str,
        body: str,
        *,
        element_type: str,
        empty_as_no_value: bool,
        level: int,
    ) -> str:
        comprehension = f"[{body} for value in {read}]"
        return f"({comprehension} or None)" if empty_as_no_value else comprehension

    def render_broadcast(
        self,
        reads: Sequence[tuple[str, str]],
        body: str,
        *,
        element_type: str,
        empty_as_no_value: bool,
        level: int,
    ) -> str:
        var_names = ", ".join(var for var, _ in reads)
        comprehension = f"[{body} for index in range(broadcast_length({var_names}))]"
        if empty_as_no_value:
            comprehension = f"{comprehension} or None"
        inner = self._indent(level + 1)
        arguments = ",\n".join(f"{inner}{read}" for _, read in reads)
        return f"(lambda {var_names}: {comprehension})(\n{arguments},\n{self._indent(level)})"

    def render_array_entries(self, root: str, body: str, level: int) -> str:
        return f"[{body} for entry in read_array_entries(row, {json.dumps(root)})]"

    # --- Principals ---

    def principal_object(self, members: Sequence[PrincipalMember], level: int) -> str:
        entries = [("@odata.type", json.dumps(PRINCIPAL_ODATA_TYPE))]
        entries.extend((member.key, member.value) for member in members)
        return self.object_literal(entries, level)

    # --- Placeholders ---

    def missing_mapping(self, property_name: str) -> str:
        return f"raise_missing_mapping({json.dumps(property_name)})"

    def no_source(self, prop_type: PropertyType) -> str:
        return "None"

    # --- Declarations ---

    def render_declarations(self, bundle: TypeBundle) -> str:
        blocks = ["from typing import Literal, TypedDict"]
        blocks.extend(self._render_enum(template) for template in bundle.enums)
        blocks.extend(self._render_type(template) for template in bundle.templates)
        return "\n\n\n".join(blocks) + "\n"

    def _render_enum(self, template: EnumTemplate) -> str:
        values_name = f"_{to_py_identifier(template.name).upper()}_VALUES"
        members = ", ".join(json.dumps(value) for value in template.values)
        return (
            f"{template.py_name} = Literal[{members}]\n"
            f"{values_name} = frozenset({{{members}}})\n\n\n"
            f"def {template.guard_name}(value):\n"
            f"    return isinstance(value, str) and value in {values_name}"
        )

    def _render_type(self, template: DeclaredTypeTemplate) -> str:
        name = template.alias.py_name
        fields = (*template.inherited, *template.fields)
        if not fields:
            return f"{name} = TypedDict({json.dumps(name)}, {{}}, total=False)"
        lines = [f"{name} = TypedDict(", f"    {json.dumps(name)},", "    {"]
        lines.extend(
            f"        {json.dumps(item.name)}: {json.dumps(item.descriptor.py_type)},"
            for item in fields
        )
        lines.extend(["    },", "    total=False,", ")"])
        return "\n".join(lines)
