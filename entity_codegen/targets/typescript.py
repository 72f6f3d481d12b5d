"""TypeScript target profile.

Generated expressions run inside a per-property transform where ``row`` is
the raw record and the row parser helpers (``readSourceValue``,
``parseString``, ``validateString``, ...) are in scope.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TYPE_CHECKING

from entity_codegen.core.enums import PropertyType, TargetLanguage
from entity_codegen.core.ir import SourceDescriptor
from entity_codegen.core.naming import is_plain_identifier
from entity_codegen.synthesis.descriptor import SCALAR
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
    PropertyType.STRING: "parseString",
    PropertyType.DATE_TIME: "parseString",
    PropertyType.PRINCIPAL: "parseString",
    PropertyType.BOOLEAN: "parseBoolean",
    PropertyType.INT64: "parseNumber",
    PropertyType.DOUBLE: "parseNumber",
    PropertyType.STRING_COLLECTION: "parseStringCollection",
    PropertyType.DATE_TIME_COLLECTION: "parseStringCollection",
    PropertyType.PRINCIPAL_COLLECTION: "parseStringCollection",
    PropertyType.INT64_COLLECTION: "parseNumberCollection",
    PropertyType.DOUBLE_COLLECTION: "parseNumberCollection",
}

# Typed members read from a string leaf
_LEAF_PARSERS: dict[str, str] = {
    "boolean": "parseBoolean",
    "number": "parseNumber",
}

_PROPERTY_TYPES: dict[PropertyType, str] = {
    PropertyType.STRING: "string",
    PropertyType.DATE_TIME: "string",
    PropertyType.BOOLEAN: "boolean",
    PropertyType.INT64: "number",
    PropertyType.DOUBLE: "number",
    PropertyType.STRING_COLLECTION: "string[]",
    PropertyType.DATE_TIME_COLLECTION: "string[]",
    PropertyType.INT64_COLLECTION: "number[]",
    PropertyType.DOUBLE_COLLECTION: "number[]",
    PropertyType.PRINCIPAL: "Principal",
    PropertyType.PRINCIPAL_COLLECTION: "Principal[]",
}


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(value)


def _key(name: str) -> str:
    return name if is_plain_identifier(name) else json.dumps(name)


class TypeScriptProfile:
    """TypeScript syntax for the shared expression compilers."""

    indent_unit = "  "
    no_value = "undefined"
    empty_principal_collection = "[]"
    principal_type = "Principal"

    @property
    def language(self) -> TargetLanguage:
        return TargetLanguage.TYPESCRIPT

    def _indent(self, level: int) -> str:
        return self.indent_unit * level

    # --- Raw reads ---

    def source_literal(self, source: SourceDescriptor) -> str:
        if source.has_json_path:
            return json.dumps(source.json_path)
        return json.dumps(list(source.csv_headers))

    def read_string(self, source_literal: str) -> str:
        return f"parseString(readSourceValue(row, {source_literal}))"

    def read_string_collection(self, source_literal: str) -> str:
        return f"parseStringCollection(readSourceValue(row, {source_literal}))"

    def read_entry_string(self, relative_path: str) -> str:
        if not relative_path:
            return "parseString(entry)"
        return f"parseString(readEntryValue(entry, {json.dumps(relative_path)}))"

    def read_entry_string_collection(self, relative_path: str) -> str:
        if not relative_path:
            return "parseStringCollection(entry)"
        return f"parseStringCollection(readEntryValue(entry, {json.dumps(relative_path)}))"

    def apply_default(self, expression: str, default: str, *, collection: bool) -> str:
        helper = "applyDefaultCollection" if collection else "applyDefaultString"
        return f"{helper}({expression}, {json.dumps(default)})"

    def _constraints_literal(
        self, constraints: ValidationConstraints, *, numeric: bool
    ) -> str | None:
        parts: list[str] = []
        if numeric:
            if constraints.min_value is not None:
                parts.append(f"minValue: {_number(constraints.min_value)}")
            if constraints.max_value is not None:
                parts.append(f"maxValue: {_number(constraints.max_value)}")
        else:
            if constraints.min_length is not None:
                parts.append(f"minLength: {constraints.min_length}")
            if constraints.max_length is not None:
                parts.append(f"maxLength: {constraints.max_length}")
            if constraints.pattern:
                parts.append(f"pattern: {json.dumps(constraints.pattern)}")
            if constraints.format:
                parts.append(f"format: {json.dumps(constraints.format)}")
        return "{ " + ", ".join(parts) + " }" if parts else None

    def validate(
        self,
        prop_type: PropertyType,
        name: str,
        expression: str,
        constraints: ValidationConstraints,
        *,
        source_literal: str | None = None,
    ) -> str:
        if prop_type.is_numeric:
            helper = "validateNumberCollection" if prop_type.is_collection else "validateNumber"
            literal = self._constraints_literal(constraints, numeric=True)
        elif prop_type is PropertyType.BOOLEAN:
            return expression
        else:
            helper = "validateStringCollection" if prop_type.is_collection else "validateString"
            literal = self._constraints_literal(constraints, numeric=False)
        if literal is None:
            return expression
        return f"{helper}({json.dumps(name)}, {expression}, {literal})"

    def parse_property(self, prop_type: PropertyType, source_literal: str) -> str:
        return f"{_PARSERS[prop_type]}(readSourceValue(row, {source_literal}))"

    # --- Construction ---

    def object_literal(self, entries: Sequence[tuple[str, str]], level: int) -> str:
        if not entries:
            return "{}"
        child = self._indent(level + 1)
        lines = [f"{child}{json.dumps(key)}: {value}" for key, value in entries]
        return "{\n" + ",\n".join(lines) + f"\n{self._indent(level)}}}"

    def typed_object(
        self,
        type_info: TypeInfo,
        entries: Sequence[tuple[PropertyInfo, str]],
        level: int,
    ) -> str:
        literal = self.object_literal([(prop.name, value) for prop, value in entries], level)
        return f"({literal} as {type_info.alias.ts_alias})"

    def coerce_leaf(self, expression: str, descriptor: TypeDescriptor) -> str:
        if descriptor.is_collection or descriptor.element.kind != SCALAR:
            return expression
        parser = _LEAF_PARSERS.get(descriptor.ts_type)
        return f"{parser}({expression})" if parser else expression

    def serialize(self, expression: str, level: int) -> str:
        return f"JSON.stringify({expression})"

    def singleton_list(self, value: str) -> str:
        return f"({value} ? [{value}] : [])"

    def broadcast_value(self, var_name: str, *, collection: bool) -> str:
        helper = "getCollectionValue" if collection else "getValue"
        return f"{helper}({var_name}, index)"

    # --- Collection blocks ---

    def render_nested_values(self, read: str, level: int) -> str:
        body = self._indent(level + 1)
        return (
            "(() => {\n"
            f"{body}const values = {read};\n"
            f"{body}return values.length > 0 ? values : undefined;\n"
            f"{self._indent(level)}}})()"
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
            return f"{read}.map((value) => {body})"
        inner = self._indent(level + 1)
        return (
            "(() => {\n"
            f"{inner}const values = {read};\n"
            f"{inner}if (values.length === 0) return undefined;\n"
            f"{inner}return values.map((value): {element_type} => {body});\n"
            f"{self._indent(level)}}})()"
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
        var_names = ", ".join(var for var, _ in reads)
        lines = ["(() => {"]
        lines.extend(f"{inner}const {var} = {read};" for var, read in reads)
        lines.append(f"{inner}const lengths = [{var_names}].map((value) => value.length);")
        lines.append(f"{inner}const maxLen = Math.max(0, ...lengths);")
        if empty_as_no_value:
            lines.append(f"{inner}if (maxLen === 0) return undefined;")
        lines.extend(
            [
                f"{inner}const getValue = (values: string[], index: number): string => {{",
                f'{step}if (values.length === 0) return "";',
                f'{step}if (values.length === 1) return values[0] ?? "";',
                f'{step}return values[index] ?? "";',
                f"{inner}}};",
                f"{inner}const getCollectionValue = (values: string[], index: number): string[] => {{",
                f"{step}if (values.length === 0) return [];",
                f'{step}if (values.length === 1) return [values[0] ?? ""];',
                f'{step}return index < values.length ? [values[index] ?? ""] : [];',
                f"{inner}}};",
                f"{inner}const results: Array<{element_type}> = [];",
                f"{inner}for (let index = 0; index < maxLen; index++) {{",
                f"{step}results.push({body});",
                f"{inner}}}",
                f"{inner}return results;",
                f"{self._indent(level)}}})()",
            ]
        )
        return "\n".join(lines)

    def render_array_entries(self, root: str, body: str, level: int) -> str:
        return f"readArrayEntries(row, {json.dumps(root)}).map((entry) => {body})"

    # --- Principals ---

    def principal_object(self, members: Sequence[PrincipalMember], level: int) -> str:
        entries = [("@odata.type", json.dumps(PRINCIPAL_ODATA_TYPE))]
        entries.extend((member.key, member.value) for member in members)
        return f"({self.object_literal(entries, level)} as Principal)"

    # --- Placeholders ---

    def missing_mapping(self, property_name: str) -> str:
        message = (
            f"Missing entity mappings for people property '{property_name}'. "
            "Implement its transform by hand."
        )
        return f"(() => {{ throw new Error({json.dumps(message)}); }})()"

    def no_source(self, prop_type: PropertyType) -> str:
        return f"undefined as unknown as {_PROPERTY_TYPES[prop_type]}"

    # --- Declarations ---

    def render_declarations(self, bundle: TypeBundle) -> str:
        blocks = [
            "export const isRecord = (value: unknown): value is Record<string, unknown> =>\n"
            '  typeof value === "object" && value !== null && !Array.isArray(value);'
        ]
        blocks.extend(self._render_enum(template) for template in bundle.enums)
        blocks.extend(self._render_type(template) for template in bundle.templates)
        blocks.extend(self._render_validator(template) for template in bundle.templates)
        return "\n\n".join(blocks) + "\n"

    def _render_enum(self, template: EnumTemplate) -> str:
        values_name = f"{template.name}Values"
        members = ", ".join(json.dumps(value) for value in template.values)
        return (
            f"const {values_name} = [{members}] as const;\n"
            f"export type {template.ts_name} = (typeof {values_name})[number];\n"
            f"export const is{template.ts_name} = (value: unknown): value is {template.ts_name} =>\n"
            f'  typeof value === "string" && ({values_name} as readonly string[]).includes(value);'
        )

    def _render_type(self, template: DeclaredTypeTemplate) -> str:
        lines = []
        for item in template.fields:
            optional = "?" if item.optional else ""
            lines.append(f"  {_key(item.name)}{optional}: {item.descriptor.ts_type};")
        body = "{\n" + "\n".join(lines) + "\n}" if lines else "{}"
        base = f"{template.base_alias.ts_alias} & " if template.base_alias else ""
        return f"export type {template.alias.ts_alias} = {base}{body};"

    def _render_field_check(self, item: DeclaredField) -> list[str]:
        access = f"input[{json.dumps(item.name)}]"
        path = "${path}." + item.name
        lines = [f"  const {item.var_name} = {access};"]
        guard = f"{item.var_name} !== undefined && {item.var_name} !== null"
        lines.append(f"  if ({guard}) {{")
        lines.append(f"    if (!({item.descriptor.check_for(item.var_name)})) {{")
        lines.append(f"      errors.push(`{path} must be {item.descriptor.expected}`);")
        element_check = item.descriptor.element_check_for("entry")
        if element_check is not None:
            lines.append("    } else {")
            lines.append(f"      {item.var_name}.forEach((entry, index) => {{")
            lines.append(
                f"        if (!({element_check})) "
                f"errors.push(`{path}[${{index}}] must be {item.descriptor.element_expected}`);"
            )
            lines.append("      });")
        lines.append("    }")
        if not item.optional:
            lines.append("  } else {")
            lines.append(f"    errors.push(`{path} is required`);")
        lines.append("  }")
        return lines

    def _render_validator(self, template: DeclaredTypeTemplate) -> str:
        alias = template.alias.ts_alias
        lines = [
            f"export function validate{alias}(input: unknown, path = {json.dumps(template.name)}): string[] {{",
            "  if (!isRecord(input)) return [`${path} must be an object`];",
            "  const errors: string[] = [];",
        ]
        for item in (*template.inherited, *template.fields):
            lines.extend(self._render_field_check(item))
        lines.append("  return errors;")
        lines.append("}")
        return "\n".join(lines)
