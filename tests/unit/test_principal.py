"""Unit tests for the principal expression compiler."""

from __future__ import annotations

from entity_codegen.compiler.principal import PrincipalCompiler, principal_field_entries
from entity_codegen.core.ir import SourceDescriptor
from entity_codegen.runtime import expression_namespace
from entity_codegen.targets.protocol import PRINCIPAL_ODATA_TYPE


def _evaluate(expression: str, row):
    return eval(expression, expression_namespace(row))


class TestPrincipalFieldEntries:
    def test_last_segment_is_the_key(self, field) -> None:
        entries = principal_field_entries(
            [field("owner.userPrincipalName", "Upn"), field("owner.tenantId", "Tenant")],
            SourceDescriptor(),
        )
        assert [entry.key for entry in entries] == ["upn", "tenantId"]

    def test_fallback_source(self) -> None:
        source = SourceDescriptor(csv_headers=("Owner",))
        entries = principal_field_entries(None, source)
        assert len(entries) == 1
        assert entries[0].key == "upn"
        assert entries[0].source == source

    def test_no_input(self) -> None:
        assert principal_field_entries([], SourceDescriptor()) == []


class TestCompilePrincipal:
    def test_python_record(self, py_profile, field) -> None:
        expression = PrincipalCompiler(py_profile).compile_principal(
            [field("upn", "Owner"), field("externalName", "Owner Name")],
            SourceDescriptor(),
        )
        assert _evaluate(expression, {"Owner": "ann@x.org", "Owner Name": "Ann"}) == {
            "@odata.type": PRINCIPAL_ODATA_TYPE,
            "upn": "ann@x.org",
            "externalName": "Ann",
        }

    def test_typescript_record(self, ts_profile) -> None:
        expression = PrincipalCompiler(ts_profile).compile_principal(
            None, SourceDescriptor(csv_headers=("Owner",))
        )
        assert f'"@odata.type": "{PRINCIPAL_ODATA_TYPE}"' in expression
        assert '"upn": parseString(readSourceValue(row, ["Owner"]))' in expression
        assert expression.endswith("as Principal)")

    def test_csharp_members(self, cs_profile, field) -> None:
        expression = PrincipalCompiler(cs_profile).compile_principal(
            [field("userPrincipalName", "Upn"), field("department", "Dept")],
            SourceDescriptor(),
        )
        assert expression.startswith("new Principal")
        assert 'Upn = RowParser.ParseString(row, new[] { "Upn" })' in expression
        assert "AdditionalData = new Dictionary<string, object?>" in expression
        assert '["department"] = RowParser.ParseString(row, new[] { "Dept" })' in expression


class TestCompilePrincipalCollection:
    def test_empty(self, ts_profile, cs_profile, py_profile) -> None:
        assert PrincipalCompiler(ts_profile).compile_principal_collection(None, SourceDescriptor()) == "[]"
        assert (
            PrincipalCompiler(cs_profile).compile_principal_collection(None, SourceDescriptor())
            == "new List<Principal>()"
        )
        assert PrincipalCompiler(py_profile).compile_principal_collection([], SourceDescriptor()) == "[]"

    def test_positional_zip(self, py_profile, field) -> None:
        expression = PrincipalCompiler(py_profile).compile_principal_collection(
            [field("upn", "Upns"), field("tenantId", "Tenant")],
            SourceDescriptor(),
        )
        result = _evaluate(expression, {"Upns": "a@x.org;b@x.org", "Tenant": "t1"})
        assert [item["upn"] for item in result] == ["a@x.org", "b@x.org"]
        assert [item["tenantId"] for item in result] == ["t1", "t1"]
        assert _evaluate(expression, {}) == []

    def test_typescript_broadcast(self, ts_profile) -> None:
        expression = PrincipalCompiler(ts_profile).compile_principal_collection(
            None, SourceDescriptor(csv_headers=("Owners",))
        )
        assert "const results: Array<Principal> = [];" in expression
        assert '"upn": getValue(field0, index)' in expression
