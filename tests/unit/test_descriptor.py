"""Unit tests for type descriptor resolution and the alias table."""

from __future__ import annotations

import pytest

from entity_codegen.core.enums import TargetLanguage
from entity_codegen.core.exceptions import UnsupportedDeclaredTypeError
from entity_codegen.synthesis.aliases import TypeAlias, build_alias_table
from entity_codegen.synthesis.derived import DerivedType
from entity_codegen.synthesis.descriptor import COMPOSITE, ENUM, SCALAR, STRING_LIKE, resolve_descriptor


@pytest.fixture
def aliases(catalog):
    return build_alias_table(catalog, [DerivedType("customEntity")])


class TestAliasTable:
    def test_catalog_and_derived(self, aliases) -> None:
        assert aliases.get("relatedPerson") == TypeAlias("RelatedPerson", "RelatedPerson")
        assert "customEntity" in aliases
        assert aliases.get("missing") is None

    def test_for_target(self) -> None:
        alias = TypeAlias("My_Type", "MyType")
        assert alias.for_target(TargetLanguage.TYPESCRIPT) == "My_Type"
        assert alias.for_target(TargetLanguage.CSHARP) == "MyType"
        assert alias.for_target(TargetLanguage.PYTHON) == "My_Type"


class TestResolveDescriptor:
    def test_string_scalar(self, aliases, catalog) -> None:
        descriptor = resolve_descriptor("Edm.String", aliases, catalog)
        assert (descriptor.ts_type, descriptor.cs_type, descriptor.py_type) == ("string", "string", "str")
        assert descriptor.element.kind == SCALAR
        assert descriptor.element.is_string
        assert descriptor.check_for("name") == 'typeof name === "string"'

    def test_numeric_scalars(self, aliases, catalog) -> None:
        assert resolve_descriptor("Edm.Int64", aliases, catalog).cs_type == "long"
        assert resolve_descriptor("Edm.Int32", aliases, catalog).ts_type == "number"
        assert resolve_descriptor("Edm.Double", aliases, catalog).py_type == "float"
        assert resolve_descriptor("Edm.DateTimeOffset", aliases, catalog).cs_type == "DateTimeOffset"

    def test_string_like(self, aliases, catalog) -> None:
        descriptor = resolve_descriptor("graph.emailType", aliases, catalog)
        assert descriptor.ts_type == "string"
        assert descriptor.element.kind == STRING_LIKE

    def test_enum(self, aliases, catalog) -> None:
        descriptor = resolve_descriptor("graph.personRelationship", aliases, catalog)
        assert descriptor.ts_type == "PersonRelationship"
        assert descriptor.element.kind == ENUM
        assert descriptor.check_for("relationship") == "isPersonRelationship(relationship)"
        assert descriptor.expected == "personRelationship value"

    def test_composite(self, aliases, catalog) -> None:
        descriptor = resolve_descriptor("graph.relatedPerson", aliases, catalog)
        assert descriptor.element.kind == COMPOSITE
        assert descriptor.element.is_composite
        assert descriptor.type_name(TargetLanguage.CSHARP) == "RelatedPerson"
        assert descriptor.check_for("manager") == "isRecord(manager)"

    def test_derived_composite(self, aliases, catalog) -> None:
        descriptor = resolve_descriptor("graph.customEntity", aliases, catalog)
        assert descriptor.ts_type == "CustomEntity"

    def test_collection_of_composite(self, aliases, catalog) -> None:
        descriptor = resolve_descriptor("Collection(graph.relatedPerson)", aliases, catalog)
        assert descriptor.is_collection
        assert descriptor.ts_type == "RelatedPerson[]"
        assert descriptor.cs_type == "List<RelatedPerson>"
        assert descriptor.py_type == "list[RelatedPerson]"
        assert descriptor.type_name(TargetLanguage.TYPESCRIPT, element=True) == "RelatedPerson"
        assert descriptor.check_for("colleagues") == "Array.isArray(colleagues)"
        assert descriptor.element_check_for("item") == "isRecord(item)"
        assert descriptor.element_expected == "an object"

    def test_collection_of_strings(self, aliases, catalog) -> None:
        descriptor = resolve_descriptor("Collection(Edm.String)", aliases, catalog)
        assert descriptor.ts_type == "string[]"
        assert descriptor.element.is_string
        assert descriptor.element_check_for("entry") == 'typeof entry === "string"'

    def test_scalar_has_no_element_check(self, aliases, catalog) -> None:
        assert resolve_descriptor("Edm.Boolean", aliases, catalog).element_check_for("x") is None

    @pytest.mark.parametrize("declared", ["Edm.Guid", "graph.unknownThing", "Collection(Edm.Binary)"])
    def test_unsupported(self, aliases, catalog, declared: str) -> None:
        with pytest.raises(UnsupportedDeclaredTypeError):
            resolve_descriptor(declared, aliases, catalog)
