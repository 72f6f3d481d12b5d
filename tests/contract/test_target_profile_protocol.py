"""Contract tests for target profile protocol compliance."""

from __future__ import annotations

import pytest

from entity_codegen.core.config import available_targets, load_target_profile
from entity_codegen.core.enums import PropertyType, TargetLanguage
from entity_codegen.core.ir import SourceDescriptor
from entity_codegen.synthesis.bundle import build_type_bundle
from entity_codegen.targets.protocol import PrincipalMember, TargetProfile


@pytest.fixture(params=available_targets())
def profile(request) -> TargetProfile:
    return load_target_profile(request.param)


class TestTargetProfileProtocol:
    def test_implements_protocol(self, profile) -> None:
        assert isinstance(profile, TargetProfile)

    def test_language_matches_target(self, profile) -> None:
        assert isinstance(profile.language, TargetLanguage)
        assert load_target_profile(profile.language.value).language is profile.language

    def test_reads_reference_source(self, profile) -> None:
        literal = profile.source_literal(SourceDescriptor(csv_headers=("First Name",)))
        assert '"First Name"' in literal
        assert literal in profile.read_string(literal)
        assert literal in profile.read_string_collection(literal)

    def test_json_path_literal(self, profile) -> None:
        literal = profile.source_literal(
            SourceDescriptor(csv_headers=("Ignored",), json_path="$.user.name")
        )
        assert literal == '"$.user.name"'

    @pytest.mark.parametrize("prop_type", list(PropertyType))
    def test_every_property_type_parses(self, profile, prop_type: PropertyType) -> None:
        assert profile.parse_property(prop_type, '"$.x"')
        assert profile.no_source(prop_type)

    def test_empty_object_literal(self, profile) -> None:
        assert profile.object_literal([], 1)

    def test_principal_object_carries_odata_type(self, profile) -> None:
        rendered = profile.principal_object([PrincipalMember("upn", "Upn", "v")], 1)
        assert "microsoft.graph.externalConnectors.principal" in rendered

    def test_missing_mapping_names_property(self, profile) -> None:
        assert "managerInfo" in profile.missing_mapping("managerInfo")

    def test_declarations_cover_derived_types(self, profile, catalog, custom_entity_schema) -> None:
        bundle = build_type_bundle(custom_entity_schema, catalog)
        declarations = profile.render_declarations(bundle)
        for template in bundle.templates:
            assert template.alias.for_target(profile.language) in declarations
        assert declarations.endswith("\n")

    def test_coerce_leaf_converts_only_non_string_members(self, profile, catalog, skills_schema) -> None:
        info = build_type_bundle(skills_schema, catalog).type_info_for("skillProficiency")
        assert profile.coerce_leaf("raw", info.get("displayName").descriptor) == "raw"
        assert profile.coerce_leaf("raw", info.get("categories").descriptor) == "raw"
        coerced = profile.coerce_leaf("raw", info.get("isSearchable").descriptor)
        assert coerced != "raw"
        assert "raw" in coerced
