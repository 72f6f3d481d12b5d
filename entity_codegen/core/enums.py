"""Enumerations shared by the IR, the catalog and the target profiles."""

from __future__ import annotations

from enum import Enum


class TargetLanguage(Enum):
    """Languages a compiled expression can be emitted in."""

    TYPESCRIPT = "typescript"
    CSHARP = "csharp"
    PYTHON = "python"


class InputFormat(Enum):
    """Raw input formats of a generated connector."""

    CSV = "csv"
    JSON = "json"
    YAML = "yaml"
    REST = "rest"
    CUSTOM = "custom"

    @property
    def is_row_format(self) -> bool:
        """True for column-addressed formats, False for structured documents."""
        return self is InputFormat.CSV


class PropertyType(Enum):
    """Declared type of a connector schema property."""

    STRING = "string"
    INT64 = "int64"
    DOUBLE = "double"
    DATE_TIME = "dateTime"
    BOOLEAN = "boolean"
    STRING_COLLECTION = "stringCollection"
    INT64_COLLECTION = "int64Collection"
    DOUBLE_COLLECTION = "doubleCollection"
    DATE_TIME_COLLECTION = "dateTimeCollection"
    PRINCIPAL = "principal"
    PRINCIPAL_COLLECTION = "principalCollection"

    @property
    def is_collection(self) -> bool:
        return self.value.endswith("Collection")

    @property
    def is_numeric(self) -> bool:
        return self in (
            PropertyType.INT64,
            PropertyType.DOUBLE,
            PropertyType.INT64_COLLECTION,
            PropertyType.DOUBLE_COLLECTION,
        )

    @property
    def is_principal(self) -> bool:
        return self in (PropertyType.PRINCIPAL, PropertyType.PRINCIPAL_COLLECTION)
