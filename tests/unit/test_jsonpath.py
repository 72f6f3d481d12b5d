"""Unit tests for JSON path handling."""

from __future__ import annotations

import pytest

from entity_codegen.core.jsonpath import (
    PathSegment,
    evaluate_json_path,
    normalize_json_path,
    parse_json_path,
    split_array_root,
)


class TestNormalize:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("user.name", "$.user.name"),
            ("first name", "$['first name']"),
            ("skills[*].name", "$.skills[*].name"),
            ("$.already.rooted", "$.already.rooted"),
            ("[0].name", "$[0].name"),
            ("  ", ""),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_json_path(raw) == expected

    def test_quotes_are_escaped(self) -> None:
        assert normalize_json_path("o'brien") == "$['o\\'brien']"


class TestParse:
    def test_segments(self) -> None:
        assert parse_json_path("$.skills[*]['display name'][0]") == (
            PathSegment("member", "skills"),
            PathSegment("wildcard"),
            PathSegment("member", "display name"),
            PathSegment("index", 0),
        )


class TestEvaluate:
    def test_member_lookup(self) -> None:
        assert evaluate_json_path({"user": {"name": "Ada"}}, "user.name") == ["Ada"]

    def test_missing_member(self) -> None:
        assert evaluate_json_path({"user": {}}, "$.user.name") == []

    def test_wildcard_fans_out(self) -> None:
        document = {"skills": [{"name": "a"}, {"name": "b"}, {"level": "x"}]}
        assert evaluate_json_path(document, "$.skills[*].name") == ["a", "b"]

    def test_index(self) -> None:
        assert evaluate_json_path({"tags": ["x", "y"]}, "$.tags[1]") == ["y"]
        assert evaluate_json_path({"tags": ["x", "y"]}, "$.tags[5]") == []


class TestSplitArrayRoot:
    def test_split(self) -> None:
        assert split_array_root("$.skills[*].name") == ("$.skills[*]", "name")

    def test_entry_itself(self) -> None:
        assert split_array_root("$.tags[*]") == ("$.tags[*]", "")

    def test_first_wildcard_wins(self) -> None:
        assert split_array_root("$.a[*].b[*].c") == ("$.a[*]", "b[*].c")

    def test_no_wildcard(self) -> None:
        assert split_array_root("$.name") is None
        assert split_array_root(None) is None
