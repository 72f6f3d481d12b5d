"""Connector schema IR consumed by the synthesis and compilation pipeline.

The IR is produced by an external schema loader. Models accept both the
loader's camelCase keys and Python attribute names, so a loader can hand over
plain dicts via ``ConnectorSchema.model_validate(...)``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from entity_codegen.core.enums import InputFormat, PropertyType


class _IrModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class SourceDescriptor(_IrModel):
    """Reference to raw input: CSV columns or a single JSON path.

    ``no_source`` marks a field that must be implemented by hand downstream.
    """

    csv_headers: tuple[str, ...] = ()
    json_path: str | None = None
    default: str | None = None
    explicit: bool = False
    no_source: bool = False

    @property
    def has_json_path(self) -> bool:
        return bool(self.json_path and self.json_path.strip())

    @property
    def is_empty(self) -> bool:
        """True when neither a JSON path nor any column is referenced."""
        return not self.has_json_path and not self.csv_headers


class EntityFieldMapping(_IrModel):
    """One ``dotted.path -> source`` pair of an entity mapping."""

    path: str
    source: SourceDescriptor


class PersonEntity(_IrModel):
    """Entity mapping of one property: the entity name and its field mappings."""

    entity: str
    fields: tuple[EntityFieldMapping, ...] = ()


class SearchFlags(_IrModel):
    searchable: bool | None = None
    queryable: bool | None = None
    retrievable: bool | None = None
    refinable: bool | None = None
    exact_match_required: bool | None = None


class PatternConstraint(_IrModel):
    regex: str
    message: str | None = None


class ConnectorProperty(_IrModel):
    """A single output property of the connector schema."""

    name: str
    type: PropertyType
    description: str | None = None
    labels: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    search: SearchFlags = Field(default_factory=SearchFlags)
    person_entity: PersonEntity | None = None
    source: SourceDescriptor = Field(default_factory=SourceDescriptor)
    min_length: int | None = None
    max_length: int | None = None
    pattern: PatternConstraint | None = None
    format: str | None = None
    min_value: float | None = None
    max_value: float | None = None

    @property
    def is_people_labelled(self) -> bool:
        return any(label.startswith("person") for label in self.labels)

    @property
    def has_string_constraints(self) -> bool:
        return (
            self.min_length is not None
            or self.max_length is not None
            or bool(self.pattern and self.pattern.regex)
            or bool(self.format)
        )

    @property
    def has_number_constraints(self) -> bool:
        return self.min_value is not None or self.max_value is not None


class ConnectorSchema(_IrModel):
    """The whole connector schema: connection facts plus the property list."""

    content_category: str | None = None
    input_format: InputFormat = InputFormat.CSV
    item_type_name: str = "Item"
    id_property_name: str = "id"
    properties: tuple[ConnectorProperty, ...] = ()

    @property
    def has_people_support(self) -> bool:
        return self.content_category == "people" or any(
            prop.is_people_labelled for prop in self.properties
        )
