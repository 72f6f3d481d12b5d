"""Unit tests for the Python row parser helpers."""

from __future__ import annotations

import pytest

from entity_codegen.core.exceptions import CompilationError, MissingMappingError, RowValidationError
from entity_codegen.runtime import (
    apply_default_collection,
    apply_default_string,
    broadcast_length,
    expression_namespace,
    get_collection_value,
    get_value,
    parse_boolean,
    parse_date_time,
    parse_int,
    parse_string,
    parse_string_collection,
    raise_missing_mapping,
    read_array_entries,
    read_entry_value,
    read_source_value,
    to_json,
    validate_number,
    validate_string,
    validate_string_collection,
)


class TestReads:
    def test_first_non_blank_column(self) -> None:
        row = {"A": "  ", "B": "b", "C": "c"}
        assert read_source_value(row, ["A", "B", "C"]) == "b"
        assert read_source_value(row, ["Z"]) is None

    def test_json_path(self) -> None:
        row = {"user": {"name": "Ada"}, "tags": ["x", "y"]}
        assert read_source_value(row, "$.user.name") == "Ada"
        assert read_source_value(row, "tags[*]") == ["x", "y"]
        assert read_source_value(row, "$.missing") is None

    def test_entry_value(self) -> None:
        entry = {"name": "a", "info": {"level": 3}}
        assert read_entry_value(entry, "") is entry
        assert read_entry_value(entry, "info.level") == 3

    def test_array_entries(self) -> None:
        row = {"skills": [{"name": "a"}, {"name": "b"}]}
        assert read_array_entries(row, "$.skills[*]") == row["skills"]
        assert read_array_entries({}, "$.skills[*]") == []


class TestParsing:
    def test_parse_string(self) -> None:
        assert parse_string(None) == ""
        assert parse_string(" a ") == "a"
        assert parse_string(True) == "true"
        assert parse_string(["", "x"]) == "x"
        assert parse_string(42) == "42"

    def test_parse_string_collection(self) -> None:
        assert parse_string_collection("a; ;b") == ["a", "b"]
        assert parse_string_collection(["a", " ", 1]) == ["a", "1"]
        assert parse_string_collection(None) == []

    def test_scalars(self) -> None:
        assert parse_boolean("Yes")
        assert not parse_boolean("")
        assert parse_int("4.0") == 4
        assert parse_int("") is None
        assert parse_date_time("2024-01-02T03:04:05Z") == "2024-01-02T03:04:05Z"
        with pytest.raises(ValueError):
            parse_date_time("yesterday")

    def test_defaults(self) -> None:
        assert apply_default_string("", "n/a") == "n/a"
        assert apply_default_string("x", "n/a") == "x"
        assert apply_default_collection([], "a;b") == ["a", "b"]


class TestBroadcast:
    def test_get_value(self) -> None:
        assert get_value([], 3) == ""
        assert get_value(["only"], 3) == "only"
        assert get_value(["a", "b"], 1) == "b"
        assert get_value(["a", "b"], 2) == ""

    def test_get_collection_value(self) -> None:
        assert get_collection_value([], 0) == []
        assert get_collection_value(["only"], 5) == ["only"]
        assert get_collection_value(["a", "b"], 5) == []

    def test_broadcast_length(self) -> None:
        assert broadcast_length(["a", "b"], ["x"]) == 2
        assert broadcast_length() == 0


class TestValidation:
    def test_empty_is_not_checked(self) -> None:
        assert validate_string("p", "", min_length=3) == ""

    def test_length(self) -> None:
        with pytest.raises(RowValidationError, match="'p'.*below minimum 3"):
            validate_string("p", "ab", min_length=3)
        with pytest.raises(RowValidationError, match="exceeds maximum 1"):
            validate_string("p", "ab", max_length=1)

    def test_pattern(self) -> None:
        assert validate_string("p", "A-1", pattern=r"^[A-Z]-\d$") == "A-1"
        with pytest.raises(RowValidationError):
            validate_string("p", "a-1", pattern=r"^[A-Z]-\d$")

    @pytest.mark.parametrize(
        "fmt, good, bad",
        [
            ("email", "ann@x.org", "ann"),
            ("uri", "https://x.org/a", "x.org"),
            ("uuid", "123e4567-e89b-12d3-a456-426614174000", "123"),
            ("ipv4", "10.0.0.1", "::1"),
            ("ipv6", "::1", "10.0.0.1"),
            ("date", "2024-02-29", "2023-02-29"),
            ("hostname", "api.example.com", "-bad-"),
        ],
    )
    def test_formats(self, fmt: str, good: str, bad: str) -> None:
        assert validate_string("p", good, format=fmt) == good
        with pytest.raises(RowValidationError):
            validate_string("p", bad, format=fmt)

    def test_unknown_format_is_ignored(self) -> None:
        assert validate_string("p", "anything", format="color") == "anything"

    def test_collection(self) -> None:
        with pytest.raises(RowValidationError):
            validate_string_collection("p", ["ok", "toolong"], max_length=3)

    def test_number(self) -> None:
        assert validate_number("n", None, min_value=1) is None
        with pytest.raises(RowValidationError, match="below minimum"):
            validate_number("n", 0, min_value=1)


class TestConstruction:
    def test_to_json_drops_none(self) -> None:
        assert to_json({"a": None, "b": {"c": None, "d": "x"}, "e": [1]}) == '{"b":{"d":"x"},"e":[1]}'

    def test_missing_mapping(self) -> None:
        with pytest.raises(MissingMappingError, match="'manager'") as excinfo:
            raise_missing_mapping("manager")
        assert excinfo.value.property_name == "manager"
        assert isinstance(excinfo.value, CompilationError)

    def test_namespace(self) -> None:
        namespace = expression_namespace({"A": "1"})
        assert namespace["row"] == {"A": "1"}
        assert namespace["to_json"] is to_json
        assert eval('parse_int(read_source_value(row, ["A"]))', namespace) == 1

    def test_declarations_bind_into_a_fresh_namespace(self, python_namespace) -> None:
        namespace = python_namespace({"A": "1"}, "Thing = dict\n")
        assert namespace["Thing"] is dict
        assert "Thing" not in expression_namespace({"A": "1"})
