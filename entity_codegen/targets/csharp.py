"""C# target profile.

Expressions are emitted for a transform method taking ``row`` (the raw
record) with the ``RowParser`` and ``Validation`` helper classes in scope.
Collection blocks become immediately invoked ``Func`` delegates so that
every property is still a single expression.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TYPE_CHECKING

from entity_codegen.core.enums import PropertyType, TargetLanguage
from entity_codegen.core.ir import SourceDescriptor
from entity_codegen.core.naming import to_cs_pascal
from entity_codegen.synthesis.descriptor import CS_VALUE_TYPES, ENUM, SCALAR
from entity_codegen.targets.protocol import (
    PRINCIPAL_ODATA_TYPE,
    PrincipalMember,
    ValidationConstraints,
)

if TYPE_CHECKING:
    from entity_codegen.synthesis.bundle import (
        DeclaredField,
        DeclaredTypeTemplate,
        EnumTemplate,
        PropertyInfo,
        TypeBundle,
        TypeInfo,
    )
    from entity_codegen.synthesis.descriptor import TypeDescriptor

_PARSERS: dict[PropertyType, str] = {
    PropertyType.STRING: "ParseString",
    PropertyType.PRINCIPAL: "ParseString",
    PropertyType.DATE_TIME: "ParseDateTime",
    PropertyType.BOOLEAN: "ParseBoolean",
    PropertyType.INT64: "ParseInt64",
    PropertyType.DOUBLE: "ParseDouble",
    PropertyType.STRING_COLLECTION: "ParseStringCollection",
    PropertyType.PRINCIPAL_COLLECTION: "ParseStringCollection",
    PropertyType.DATE_TIME_COLLECTION: "ParseDateTimeCollection",
    PropertyType.INT64_COLLECTION: "ParseInt64Collection",
    PropertyType.DOUBLE_COLLECTION: "ParseDoubleCollection",
}

# Single-argument overloads converting an already read string
_LEAF_PARSERS: dict[str, str] = {
    "bool": "ParseBoolean",
    "int": "ParseInt32",
    "long": "ParseInt64",
    "double": "ParseDouble",
    "DateTimeOffset": "ParseDateTime",
}

_PROPERTY_TYPES: dict[PropertyType, str] = {
    PropertyType.STRING: "string",
    PropertyType.DATE_TIME: "DateTimeOffset",
    PropertyType.BOOLEAN: "bool",
    PropertyType.INT64: "long",
    PropertyType.DOUBLE: "double",
    PropertyType.STRING_COLLECTION: "List<string>",
    PropertyType.DATE_TIME_COLLECTION: "List<DateTimeOffset>",
    PropertyType.INT64_COLLECTION: "List<long>",
    PropertyType.DOUBLE_COLLECTION: "List<double>",
    PropertyType.PRINCIPAL: "Principal",
    PropertyType.PRINCIPAL_COLLECTION: "List<Principal>",
}

_NUMBER_VALIDATORS: dict[PropertyType, str] = {
    PropertyType.INT64: "ValidateInt64",
    PropertyType.INT64_COLLECTION: "ValidateInt64Collection",
    PropertyType.DOUBLE: "ValidateDouble",
    PropertyType.DOUBLE_COLLECTION: "ValidateDoubleCollection",
}

# Well-known principal members; anything else lands in AdditionalData
_PRINCIPAL_MEMBERS = ("Upn", "TenantId", "ExternalName", "ExternalId", "EntraDisplayName", "EntraId", "Email")


def _literal_or_null(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, str):
        return json.dumps(value)
    number = float(value)  # type: ignore[arg-type]
    return str(int(number)) if number.is_integer() else repr(number)


def member_name_for(type_name: str, member_name: str) -> str:
    """C# member name, renamed when it would clash with its enclosing type."""
    return f"{member_name}Value" if member_name == type_name else member_name


class CSharpProfile:
    """C# syntax for the shared expression compilers."""

    indent_unit = "    "
    no_value = "null"
    empty_principal_collection = "new List<Principal>()"
    principal_type = "Principal"

    @property
    def language(self) -> TargetLanguage:
        return TargetLanguage.CSHARP

    def _indent(self, level: int) -> str:
        return self.indent_unit * level

    # --- Raw reads ---

    def source_literal(self, source: SourceDescriptor) -> str:
        if source.has_json_path:
            return json.dumps(source.json_path)
        headers = ", ".join(json.dumps(header) for header in source.csv_headers)
        return f"new[] {{ {headers} }}"

    def read_string(self, source_literal: str) -> str:
        return f"RowParser.ParseString(row, {source_literal})"

    def read_string_collection(self, source_literal: str) -> str:
        return f"RowParser.ParseStringCollection(row, {source_literal})"

    def read_entry_string(self, relative_path: str) -> str:
        return f"RowParser.ParseString(entry, {json.dumps(relative_path)})"

    def read_entry_string_collection(self, relative_path: str) -> str:
        return f"RowParser.ParseStringCollection(entry, {json.dumps(relative_path)})"

    def apply_default(self, expression: str, default: str, *, collection: bool) -> str:
        helper = "ApplyDefaultCollection" if collection else "ApplyDefault"
        return f"RowParser.{helper}({expression}, {json.dumps(default)})"

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
            if not constraints.has_number:
                return expression
            bounds = f"{_literal_or_null(constraints.min_value)}, {_literal_or_null(constraints.max_value)}"
            return f"Validation.{_NUMBER_VALIDATORS[prop_type]}({json.dumps(name)}, {expression}, {bounds})"
        if not constraints.has_string:
            return expression
        arguments = ", ".join(
            _literal_or_null(value)
            for value in (
                constraints.min_length,
                constraints.max_length,
                constraints.pattern,
                constraints.format,
            )
        )
        if prop_type is PropertyType.DATE_TIME and source_literal is not None:
            raw = f"RowParser.ReadValue(row, {source_literal})"
            return (
                "RowParser.ParseDateTime("
                f"Validation.ValidateString({json.dumps(name)}, {raw}, {arguments}))"
            )
        helper = "ValidateStringCollection" if prop_type.is_collection else "ValidateString"
        return f"Validation.{helper}({json.dumps(name)}, {expression}, {arguments})"

    def parse_property(self, prop_type: PropertyType, source_literal: str) -> str:
        return f"RowParser.{_PARSERS[prop_type]}(row, {source_literal})"

    # --- Construction ---

    def _block(self, head: str, lines: Sequence[str], level: int) -> str:
        indent = self._indent(level)
        if not lines:
            return f"{head}()"
        return f"{head}\n{indent}{{\n" + ",\n".join(lines) + f"\n{indent}}}"

    def object_literal(self, entries: Sequence[tuple[str, str]], level: int) -> str:
        child = self._indent(level + 1)
        lines = [f"{child}[{json.dumps(key)}] = {value}" for key, value in entries]
        return self._block("new Dictionary<string, object?>", lines, level)

    def typed_object(
        self,
        type_info: TypeInfo,
        entries: Sequence[tuple[PropertyInfo, str]],
        level: int,
    ) -> str:
        type_name = type_info.alias.cs_name
        child = self._indent(level + 1)
        lines = [
            f"{child}{member_name_for(type_name, prop.member_name)} = {value}"
            for prop, value in entries
        ]
        return self._block(f"new {type_name}", lines, level)

    def coerce_leaf(self, expression: str, descriptor: TypeDescriptor) -> str:
        if descriptor.is_collection:
            return expression
        if descriptor.element.kind == ENUM:
            return f"RowParser.ParseEnum<{descriptor.cs_type}>({expression})"
        if descriptor.element.kind != SCALAR:
            return expression
        parser = _LEAF_PARSERS.get(descriptor.cs_type)
        return f"RowParser.{parser}({expression})" if parser else expression

    def serialize(self, expression: str, level: int) -> str:
        indent = self._indent(level)
        return f"JsonSerializer.Serialize(\n{indent}{expression}\n{indent})"

    def singleton_list(self, value: str) -> str:
        return f"new List<string> {{ {value} }}"

    def broadcast_value(self, var_name: str, *, collection: bool) -> str:
        helper = "GetCollectionValue" if collection else "GetValue"
        return f"{helper}({var_name}, index)"

    # --- Collection blocks ---

    def _func(self, result_type: str, body: Sequence[str], level: int) -> str:
        indent = self._indent(level)
        return (
            f"new Func<{result_type}>(() =>\n{indent}{{\n"
            + "\n".join(body)
            + f"\n{indent}}}).Invoke()"
        )

    def render_nested_values(self, read: str, level: int) -> str:
        inner = self._indent(level + 1)
        return self._func(
            "List<string>?",
            [
                f"{inner}var values = {read};",
                f"{inner}return values.Count == 0 ? null : values;",
            ],
            level,
        )

    def render_map(
        self,
        read: str,
        body: str,
        *,
        element_type: str,
        empty_as_no_value: bool,
        level: int,
    ) -> str:
        if not empty_as_no_value:
            inner = self._indent(level + 1)
            return f"{read}\n{inner}.Select(value => {body})\n{inner}.ToList()"
        inner = self._indent(level + 1)
        step = self._indent(level + 2)
        return self._func(
            f"List<{element_type}>?",
            [
                f"{inner}var values = {read};",
                f"{inner}if (values.Count == 0) return null;",
                f"{inner}var results = new List<{element_type}>();",
                f"{inner}foreach (var value in values)",
                f"{inner}{{",
                f"{step}results.Add({body});",
                f"{inner}}}",
                f"{inner}return results;",
            ],
            level,
        )

    def render_broadcast(
        self,
        reads: Sequence[tuple[str, str]],
        body: str,
        *,
        element_type: str,
        empty_as_no_value: bool,
        level: int,
    ) -> str:
        inner = self._indent(level + 1)
        step = self._indent(level + 2)
        lines = [f"{inner}var {var} = {read};" for var, read in reads]
        lines.extend(
            [
                f"{inner}string GetValue(List<string> values, int index)",
                f"{inner}{{",
                f'{step}if (values.Count == 0) return "";',
                f'{step}if (values.Count == 1) return values[0] ?? "";',
                f'{step}return index < values.Count ? (values[index] ?? "") : "";',
                f"{inner}}}",
                f"{inner}List<string> GetCollectionValue(List<string> values, int index)",
                f"{inner}{{",
                f"{step}if (values.Count == 0) return new List<string>();",
                f'{step}if (values.Count == 1) return new List<string> {{ values[0] ?? "" }};',
                f'{step}return index < values.Count ? new List<string> {{ values[index] ?? "" }} : new List<string>();',
                f"{inner}}}",
                f"{inner}var maxLen = 0;",
            ]
        )
        lines.extend(f"{inner}maxLen = Math.Max(maxLen, {var}.Count);" for var, _ in reads)
        if empty_as_no_value:
            lines.append(f"{inner}if (maxLen == 0) return null;")
        lines.extend(
            [
                f"{inner}var results = new List<{element_type}>();",
                f"{inner}for (var index = 0; index < maxLen; index++)",
                f"{inner}{{",
                f"{step}results.Add({body});",
                f"{inner}}}",
                f"{inner}return results;",
            ]
        )
        result_type = f"List<{element_type}>?" if empty_as_no_value else f"List<{element_type}>"
        return self._func(result_type, lines, level)

    def render_array_entries(self, root: str, body: str, level: int) -> str:
        inner = self._indent(level + 1)
        step = self._indent(level + 2)
        return self._func(
            "List<string>",
            [
                f"{inner}var results = new List<string>();",
                f"{inner}foreach (var entry in RowParser.ReadArrayEntries(row, {json.dumps(root)}))",
                f"{inner}{{",
                f"{step}results.Add({body});",
                f"{inner}}}",
                f"{inner}return results;",
            ],
            level,
        )

    # --- Principals ---

    def principal_object(self, members: Sequence[PrincipalMember], level: int) -> str:
        child = self._indent(level + 1)
        lines = [f"{child}OdataType = {json.dumps(PRINCIPAL_ODATA_TYPE)}"]
        extra: list[tuple[str, str]] = []
        for member in members:
            if member.member in _PRINCIPAL_MEMBERS:
                lines.append(f"{child}{member.member} = {member.value}")
            else:
                extra.append((member.key, member.value))
        if extra:
            lines.append(f"{child}AdditionalData = {self.object_literal(extra, level + 1)}")
        return self._block("new Principal", lines, level)

    # --- Placeholders ---

    def missing_mapping(self, property_name: str) -> str:
        message = (
            f"Missing entity mappings for people property '{property_name}'. "
            "Implement its transform by hand."
        )
        return f"new Func<object?>(() => throw new NotImplementedException({json.dumps(message)})).Invoke()"

    def no_source(self, prop_type: PropertyType) -> str:
        return "default!"

    # --- Declarations ---

    def render_declarations(self, bundle: TypeBundle) -> str:
        blocks = [
            "using System.Collections.Generic;\n"
            "using System.Text.Json.Serialization;"
        ]
        blocks.extend(self._render_enum(template) for template in bundle.enums)
        blocks.extend(self._render_class(template) for template in bundle.templates)
        return "\n\n".join(blocks) + "\n"

    def _render_enum(self, template: EnumTemplate) -> str:
        lines = [
            "[JsonConverter(typeof(JsonStringEnumConverter))]",
            f"public enum {template.cs_name}",
            "{",
        ]
        for value in template.values:
            lines.append(f"    [JsonStringEnumMemberName({json.dumps(value)})]")
            lines.append(f"    {to_cs_pascal(value)},")
        lines.append("}")
        return "\n".join(lines)

    def _render_member(self, type_name: str, item: DeclaredField) -> list[str]:
        cs_type = item.descriptor.cs_type
        nullable = item.optional or cs_type not in CS_VALUE_TYPES
        suffix = "?" if nullable else ""
        return [
            f"    [JsonPropertyName({json.dumps(item.name)})]",
            f"    public {cs_type}{suffix} {member_name_for(type_name, item.member_name)} {{ get; set; }}",
        ]

    def _render_class(self, template: DeclaredTypeTemplate) -> str:
        type_name = template.alias.cs_name
        base = f" : {template.base_alias.cs_name}" if template.base_alias else ""
        lines = [f"public class {type_name}{base}", "{"]
        for index, item in enumerate(template.fields):
            if index:
                lines.append("")
            lines.extend(self._render_member(type_name, item))
        lines.append("}")
        return "\n".join(lines)
