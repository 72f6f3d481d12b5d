"""Integration test for the full generation workflow.

Covers: catalog loading, closure, synthesis, declarations and compiled
expressions evaluated against real rows through the Python target.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from entity_codegen import Generator, GeneratorConfig, MissingMappingError, RowValidationError
from entity_codegen.core.enums import InputFormat
from entity_codegen.core.ir import ConnectorSchema


@pytest.fixture
def generator(catalog) -> Generator:
    return Generator(GeneratorConfig(targets=["typescript", "csharp", "python"]), catalog)


@pytest.fixture
def run(generator, python_namespace):
    """Generate *schema* and evaluate the Python expression of *name* against *row*."""

    def _run(schema: ConnectorSchema, name: str, row: dict[str, Any]) -> Any:
        result = generator.generate(schema)
        namespace = python_namespace(row, result.declarations.get("python"))
        return eval(result.expression("python", name), namespace)

    return _run


class TestSkillsWorkflow:
    def test_positional_zip(self, run, skills_schema) -> None:
        assert run(skills_schema, "skills", {"Skill": "a;b", "Level": "x;y"}) == [
            '{"displayName":"a","proficiency":"x"}',
            '{"displayName":"b","proficiency":"y"}',
        ]

    def test_length_one_broadcast(self, run, skills_schema) -> None:
        assert run(skills_schema, "skills", {"Skill": "a;b", "Level": "x"}) == [
            '{"displayName":"a","proficiency":"x"}',
            '{"displayName":"b","proficiency":"x"}',
        ]

    def test_length_one_leaf_first_broadcast(self, run, skills_schema) -> None:
        assert run(skills_schema, "skills", {"Skill": "a", "Level": "x;y;z"}) == [
            '{"displayName":"a","proficiency":"x"}',
            '{"displayName":"a","proficiency":"y"}',
            '{"displayName":"a","proficiency":"z"}',
        ]

    def test_empty_input_yields_empty_list(self, run, skills_schema) -> None:
        assert run(skills_schema, "skills", {"Skill": "", "Level": " "}) == []

    def test_plain_property(self, run, skills_schema) -> None:
        assert run(skills_schema, "id", {"id": " 42 "}) == "42"

    def test_generation_is_deterministic(self, generator, skills_schema) -> None:
        first = generator.generate(skills_schema)
        second = generator.generate(skills_schema)
        assert first.properties == second.properties
        assert first.declarations == second.declarations


class TestCustomEntityWorkflow:
    def test_union_type_is_declared_once(self, generator, custom_entity_schema) -> None:
        result = generator.generate(custom_entity_schema)
        declarations = result.declarations["typescript"]
        assert declarations.count("export type CustomEntityDetails = ") == 1
        assert '  manager?: CustomEntityDetailsManager;' in declarations
        assert '  title?: string;' in declarations
        assert "public class CustomEntityDetailsManager" in result.declarations["csharp"]

    def test_each_property_builds_its_own_slice(self, run, custom_entity_schema) -> None:
        row = {"Manager Name": "Grace", "Manager Email": "grace@x.org", "Title": "Lead"}
        manager = run(custom_entity_schema, "managerInfo", row)
        title = run(custom_entity_schema, "titleInfo", row)
        assert json.loads(manager) == {
            "details": {"manager": {"name": "Grace", "email": "grace@x.org"}}
        }
        assert json.loads(title) == {"details": {"title": "Lead"}}


class TestJsonWorkflow:
    def test_array_root_iterates_entries(self, run, field, prop) -> None:
        schema = ConnectorSchema(
            content_category="people",
            input_format=InputFormat.JSON,
            properties=(
                prop(
                    "skills",
                    "stringCollection",
                    labels=("personSkills",),
                    entity="skillProficiency",
                    fields=[
                        field("displayName", json_path="$.skills[*].name"),
                        field("proficiency", json_path="$.skills[*].level"),
                    ],
                ),
            ),
        )
        row = {"skills": [{"name": "Go", "level": "expert"}, {"name": "Rust", "level": "novice"}]}
        assert run(schema, "skills", row) == [
            '{"displayName":"Go","proficiency":"expert"}',
            '{"displayName":"Rust","proficiency":"novice"}',
        ]

    def test_nested_fast_path_matches_leaf(self, run, field, prop) -> None:
        def schema_for(path: str) -> ConnectorSchema:
            return ConnectorSchema(
                content_category="people",
                properties=(
                    prop("skill", entity="skillProficiency", fields=[field(path, "Tags")]),
                ),
            )

        row = {"Tags": "one;two"}
        nested = run(schema_for("categories.value"), "skill", row)
        leaf = run(schema_for("categories"), "skill", row)
        assert nested == leaf == '{"categories":["one","two"]}'


class TestValidationWorkflow:
    def test_entity_leaves_are_validated(self, run, field, prop) -> None:
        schema = ConnectorSchema(
            content_category="people",
            properties=(
                prop(
                    "email",
                    entity="itemEmail",
                    fields=[field("address", "Email")],
                    format="email",
                ),
            ),
        )
        assert run(schema, "email", {"Email": "ann@x.org"}) == '{"address":"ann@x.org"}'
        with pytest.raises(RowValidationError, match="not a valid email"):
            run(schema, "email", {"Email": "nope"})


class TestMissingMappingWorkflow:
    def test_unmapped_people_property_raises(self, run, prop) -> None:
        schema = ConnectorSchema(
            content_category="people",
            properties=(prop("skills", "stringCollection", labels=("personSkills",)),),
        )
        with pytest.raises(MissingMappingError) as excinfo:
            run(schema, "skills", {"skills": "Go"})
        assert excinfo.value.property_name == "skills"
