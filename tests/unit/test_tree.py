"""Unit tests for path tree building."""

from __future__ import annotations

from entity_codegen.core.ir import EntityFieldMapping
from entity_codegen.synthesis.tree import build_path_tree, collect_leaves, is_leaf, split_path


class TestBuildPathTree:
    def test_nested_paths(self, field) -> None:
        name = field("skills.name", "Skill")
        level = field("skills.level", "Level")
        tree = build_path_tree([name, level])
        assert tree == {"skills": {"name": name, "level": level}}

    def test_insertion_order(self, field) -> None:
        tree = build_path_tree([field("b", "B"), field("a", "A"), field("c.d", "D")])
        assert list(tree) == ["b", "a", "c"]

    def test_leaf_replaces_subtree(self, field) -> None:
        later = field("detail", "Detail")
        tree = build_path_tree([field("detail.title", "Title"), later])
        assert tree == {"detail": later}

    def test_subtree_replaces_leaf(self, field) -> None:
        later = field("detail.title", "Title")
        tree = build_path_tree([field("detail", "Detail"), later])
        assert tree == {"detail": {"title": later}}

    def test_empty_segments_are_dropped(self, field) -> None:
        mapping = field(" a .. b ", "A")
        assert build_path_tree([mapping, field("...", "X")]) == {"a": {"b": mapping}}

    def test_empty_input(self) -> None:
        assert build_path_tree([]) == {}


class TestLeaves:
    def test_is_leaf(self, field) -> None:
        assert is_leaf(field("a", "A"))
        assert not is_leaf({})

    def test_collect_leaves_depth_first(self, field) -> None:
        mappings = [field("a.x", "1"), field("b", "2"), field("a.y", "3")]
        leaves = collect_leaves(build_path_tree(mappings))
        assert [leaf.path for leaf in leaves] == ["a.x", "a.y", "b"]

    def test_split_path(self) -> None:
        assert split_path("a.b .c") == ["a", "b", "c"]

    def test_leaf_type(self, field) -> None:
        assert isinstance(collect_leaves({"k": field("k", "K")})[0], EntityFieldMapping)
