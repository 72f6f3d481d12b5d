"""Unit tests for identifier conversion."""

from __future__ import annotations

from entity_codegen.core.naming import (
    is_plain_identifier,
    to_cs_identifier,
    to_cs_pascal,
    to_py_identifier,
    to_ts_identifier,
    unique_field_var_name,
)


class TestTsIdentifier:
    def test_camel_case_to_pascal(self) -> None:
        assert to_ts_identifier("skillProficiency") == "SkillProficiency"

    def test_separators_split_words(self) -> None:
        assert to_ts_identifier("skill proficiency-level") == "SkillProficiencyLevel"

    def test_leading_digit_is_prefixed(self) -> None:
        assert to_ts_identifier("3d model") == "_3dModel"

    def test_no_words_falls_back(self) -> None:
        assert to_ts_identifier("!!!") == "Item"


class TestCsNames:
    def test_pascal_upper_cases_first_char_only(self) -> None:
        assert to_cs_pascal("customEntity") == "CustomEntity"

    def test_pascal_empty(self) -> None:
        assert to_cs_pascal("") == "Value"

    def test_identifier_splits_on_underscores(self) -> None:
        assert to_cs_identifier("people_directory") == "PeopleDirectory"


class TestPyIdentifier:
    def test_snake_case(self) -> None:
        assert to_py_identifier("personRelationship") == "person_relationship"

    def test_plain_identifier(self) -> None:
        assert is_plain_identifier("displayName") is True
        assert is_plain_identifier("first name") is False
        assert is_plain_identifier("1st") is False


class TestUniqueFieldVarName:
    def test_camel_case(self) -> None:
        used: set[str] = set()
        assert unique_field_var_name("Display Name", used) == "displayName"
        assert "displayName" in used

    def test_collisions_get_suffix(self) -> None:
        used: set[str] = set()
        first = unique_field_var_name("first-name", used)
        second = unique_field_var_name("first name", used)
        third = unique_field_var_name("firstName", used)
        assert (first, second, third) == ("firstName", "firstName1", "firstName2")
