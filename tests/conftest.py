"""Shared test fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from entity_codegen.catalog.registry import TypeCatalog
from entity_codegen.core.enums import PropertyType
from entity_codegen.core.ir import (
    ConnectorProperty,
    ConnectorSchema,
    EntityFieldMapping,
    PersonEntity,
    SourceDescriptor,
)
from entity_codegen.runtime import expression_namespace
from entity_codegen.targets.csharp import CSharpProfile
from entity_codegen.targets.python import PythonProfile
from entity_codegen.targets.typescript import TypeScriptProfile


@pytest.fixture(scope="session")
def catalog() -> TypeCatalog:
    """The packaged profile catalog."""
    return TypeCatalog.load()


@pytest.fixture
def ts_profile() -> TypeScriptProfile:
    return TypeScriptProfile()


@pytest.fixture
def cs_profile() -> CSharpProfile:
    return CSharpProfile()


@pytest.fixture
def py_profile() -> PythonProfile:
    return PythonProfile()


@pytest.fixture
def python_namespace():
    """Helper to build the globals a compiled Python expression runs with.

    Usage:
        namespace = python_namespace(row, result.declarations["python"])
        value = eval(result.expression("python", "skills"), namespace)
    """

    def _namespace(row: Any, declarations: str | None = None) -> dict[str, Any]:
        namespace = expression_namespace(row)
        if declarations:
            exec(compile(declarations, "<declarations>", "exec"), namespace)
        return namespace

    return _namespace


@pytest.fixture
def field():
    """Helper to build an entity field mapping.

    Usage:
        field("detail.jobTitle", "Title")            # CSV columns
        field("displayName", json_path="$.skills[*].name")
    """

    def _field(
        path: str,
        *headers: str,
        json_path: str | None = None,
        default: str | None = None,
    ) -> EntityFieldMapping:
        return EntityFieldMapping(
            path=path,
            source=SourceDescriptor(csv_headers=headers, json_path=json_path, default=default),
        )

    return _field


@pytest.fixture
def prop():
    """Helper to build a connector property.

    Usage:
        prop("skills", "stringCollection", entity="skillProficiency", fields=[...])
    """

    def _prop(
        name: str,
        type_: str = "string",
        *,
        entity: str | None = None,
        fields: list[EntityFieldMapping] | None = None,
        labels: tuple[str, ...] = (),
        headers: tuple[str, ...] | None = None,
        **extra: Any,
    ) -> ConnectorProperty:
        person_entity = (
            PersonEntity(entity=entity, fields=tuple(fields or ())) if entity is not None else None
        )
        source = extra.pop("source", None) or SourceDescriptor(
            csv_headers=headers if headers is not None else (name,)
        )
        return ConnectorProperty(
            name=name,
            type=PropertyType(type_),
            labels=labels,
            person_entity=person_entity,
            source=source,
            **extra,
        )

    return _prop


@pytest.fixture
def skills_schema(field, prop) -> ConnectorSchema:
    """A people schema with a two-column skills collection."""
    return ConnectorSchema(
        content_category="people",
        properties=(
            prop("id"),
            prop(
                "skills",
                "stringCollection",
                labels=("personSkills",),
                entity="skillProficiency",
                fields=[field("displayName", "Skill"), field("proficiency", "Level")],
            ),
        ),
    )


@pytest.fixture
def custom_entity_schema(field, prop) -> ConnectorSchema:
    """Two properties contributing disjoint nested paths to one custom entity."""
    return ConnectorSchema(
        content_category="people",
        properties=(
            prop(
                "managerInfo",
                entity="customEntity",
                fields=[
                    field("details.manager.name", "Manager Name"),
                    field("details.manager.email", "Manager Email"),
                ],
            ),
            prop(
                "titleInfo",
                entity="customEntity",
                fields=[field("details.title", "Title")],
            ),
        ),
    )
