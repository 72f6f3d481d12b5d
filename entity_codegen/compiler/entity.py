"""Entity expression compiler.

Turns the entity field mappings of one property into a target expression
that builds the entity from a raw record and serializes it to a JSON string
(or to one JSON string per element for collection properties).

The tree walk is shared by all targets; every fragment of syntax comes from
the :class:`~entity_codegen.targets.protocol.TargetProfile`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from entity_codegen.compiler.validation import LeafWrap
from entity_codegen.core.enums import InputFormat
from entity_codegen.core.ir import EntityFieldMapping
from entity_codegen.core.jsonpath import split_array_root
from entity_codegen.synthesis.bundle import PropertyInfo, TypeInfo, TypeMap
from entity_codegen.synthesis.tree import PathTree, build_path_tree, collect_leaves, is_leaf
from entity_codegen.targets.protocol import TargetProfile

logger = logging.getLogger(__name__)

# Indent level of the top-level construction inside a generated transform
BASE_LEVEL = 2


class _LeafReader(Protocol):
    def single(self, field: EntityFieldMapping) -> str: ...

    def many(self, field: EntityFieldMapping) -> str: ...


class _RowReader:
    """Reads leaves straight from the row."""

    def __init__(self, wrap: LeafWrap) -> None:
        self._wrap = wrap

    def single(self, field: EntityFieldMapping) -> str:
        return self._wrap.read(field.source)

    def many(self, field: EntityFieldMapping) -> str:
        return self._wrap.read_many(field.source)


class _ValueReader:
    """Reads the single mapped leaf from the ``value`` bound by a map block."""

    def __init__(self, profile: TargetProfile) -> None:
        self._profile = profile

    def single(self, field: EntityFieldMapping) -> str:
        return "value"

    def many(self, field: EntityFieldMapping) -> str:
        return self._profile.singleton_list("value")


class _IndexedReader:
    """Reads leaves element-wise from correlated arrays at ``index``."""

    def __init__(self, profile: TargetProfile, var_by_path: dict[str, str]) -> None:
        self._profile = profile
        self._var_by_path = var_by_path

    def single(self, field: EntityFieldMapping) -> str:
        return self._profile.broadcast_value(self._var_by_path[field.path], collection=False)

    def many(self, field: EntityFieldMapping) -> str:
        return self._profile.broadcast_value(self._var_by_path[field.path], collection=True)


class _EntryReader:
    """Reads leaves relative to the current array entry."""

    def __init__(self, wrap: LeafWrap, relative_by_path: dict[str, str]) -> None:
        self._wrap = wrap
        self._relative_by_path = relative_by_path

    def single(self, field: EntityFieldMapping) -> str:
        return self._wrap.read_relative(self._relative_by_path[field.path], field.source.default)

    def many(self, field: EntityFieldMapping) -> str:
        return self._wrap.read_many_relative(
            self._relative_by_path[field.path], field.source.default
        )


def common_array_root(
    leaves: Sequence[EntityFieldMapping],
) -> tuple[str, dict[str, str]] | None:
    """Return the shared ``[*]`` root of *leaves* and each leaf's relative path.

    Returns None unless every leaf has a JSON path and all of them split at
    the same array root.
    """
    root: str | None = None
    relative_by_path: dict[str, str] = {}
    for leaf in leaves:
        split = split_array_root(leaf.source.json_path)
        if split is None:
            return None
        candidate, relative = split
        if root is not None and candidate != root:
            return None
        root = candidate
        relative_by_path[leaf.path] = relative
    if root is None:
        return None
    return root, relative_by_path


class EntityCompiler:
    """Compiles entity field mappings into target expressions.

    Example::

        compiler = EntityCompiler(TypeScriptProfile(), bundle.type_map)
        expression = compiler.compile_entity(fields, wrap, bundle.type_info_for("skillProficiency"))
    """

    def __init__(
        self,
        profile: TargetProfile,
        type_map: TypeMap | None = None,
        input_format: InputFormat = InputFormat.CSV,
    ) -> None:
        self._profile = profile
        self._type_map: TypeMap = type_map or {}
        self._input_format = input_format
        self._next_var = 0

    @property
    def profile(self) -> TargetProfile:
        return self._profile

    # --- Public API ---

    def compile_entity(
        self,
        fields: Sequence[EntityFieldMapping],
        leaf_wrap: LeafWrap,
        type_info: TypeInfo | None = None,
    ) -> str:
        """Expression producing one serialized entity for a scalar property."""
        self._next_var = 0
        tree = build_path_tree(fields)
        if not collect_leaves(tree):
            return self._profile.no_value
        construction = self._render_object(
            tree, type_info, _RowReader(leaf_wrap), leaf_wrap, BASE_LEVEL
        )
        return self._profile.serialize(construction, BASE_LEVEL)

    def compile_entity_collection(
        self,
        fields: Sequence[EntityFieldMapping],
        leaf_wrap: LeafWrap,
        type_info: TypeInfo | None = None,
    ) -> str:
        """Expression producing a list of serialized entities.

        Structured input whose leaves share one ``[*]`` root iterates the
        array entries; otherwise one leaf maps every raw value and several
        leaves are zipped positionally.
        """
        self._next_var = 0
        tree = build_path_tree(fields)
        leaves = collect_leaves(tree)
        if not leaves:
            return self._profile.no_value

        level = BASE_LEVEL + 1
        if not self._input_format.is_row_format:
            common = common_array_root(leaves)
            if common is not None:
                root, relative_by_path = common
                logger.debug("Iterating array entries under '%s'", root)
                construction = self._render_object(
                    tree, type_info, _EntryReader(leaf_wrap, relative_by_path), leaf_wrap, level
                )
                return self._profile.render_array_entries(
                    root, self._profile.serialize(construction, level), BASE_LEVEL - 1
                )

        if len(leaves) == 1:
            construction = self._render_object(
                tree, type_info, _ValueReader(self._profile), leaf_wrap, level
            )
            return self._profile.render_map(
                leaf_wrap.read_many(leaves[0].source),
                self._profile.serialize(construction, level),
                element_type="string",
                empty_as_no_value=False,
                level=BASE_LEVEL - 1,
            )

        reads, reader = self._broadcast_reads(leaves, leaf_wrap)
        construction = self._render_object(tree, type_info, reader, leaf_wrap, level)
        return self._profile.render_broadcast(
            reads,
            self._profile.serialize(construction, level),
            element_type="string",
            empty_as_no_value=False,
            level=BASE_LEVEL - 1,
        )

    # --- Tree walk ---

    def _nested_info(self, prop: PropertyInfo) -> TypeInfo | None:
        element = prop.descriptor.element
        if not element.is_composite:
            return None
        return self._type_map.get(element.name)

    def _broadcast_reads(
        self, leaves: Sequence[EntityFieldMapping], wrap: LeafWrap
    ) -> tuple[list[tuple[str, str]], _IndexedReader]:
        reads: list[tuple[str, str]] = []
        var_by_path: dict[str, str] = {}
        for leaf in leaves:
            var_name = f"field{self._next_var}"
            self._next_var += 1
            var_by_path[leaf.path] = var_name
            reads.append((var_name, wrap.read_many(leaf.source)))
        return reads, _IndexedReader(self._profile, var_by_path)

    def _render_object(
        self,
        node: PathTree,
        type_info: TypeInfo | None,
        reader: _LeafReader,
        wrap: LeafWrap,
        level: int,
    ) -> str:
        if type_info is None:
            entries: list[tuple[str, str]] = []
            for key, child in node.items():
                if is_leaf(child):
                    entries.append((key, reader.single(child)))  # type: ignore[arg-type]
                else:
                    rendered = self._render_object(child, None, reader, wrap, level + 1)  # type: ignore[arg-type]
                    entries.append((key, rendered))
            return self._profile.object_literal(entries, level)

        typed: list[tuple[PropertyInfo, str]] = []
        for key, child in node.items():
            prop = type_info.get(key)
            if prop is None:
                logger.debug("Dropping '%s': not a property of %s", key, type_info.name)
                continue
            if is_leaf(child):
                if prop.is_collection and prop.descriptor.element.is_string:
                    value = reader.many(child)  # type: ignore[arg-type]
                else:
                    value = self._profile.coerce_leaf(
                        reader.single(child), prop.descriptor  # type: ignore[arg-type]
                    )
            elif prop.is_collection:
                value = self._render_collection_node(child, prop, wrap, level + 1)  # type: ignore[arg-type]
            else:
                value = self._render_object(
                    child, self._nested_info(prop), reader, wrap, level + 1  # type: ignore[arg-type]
                )
            typed.append((prop, value))
        return self._profile.typed_object(type_info, typed, level)

    def _render_collection_node(
        self,
        node: PathTree,
        prop: PropertyInfo,
        wrap: LeafWrap,
        level: int,
    ) -> str:
        leaves = collect_leaves(node)
        if not leaves:
            return self._profile.no_value

        element_info = self._nested_info(prop)
        if element_info is None and prop.descriptor.element.is_string:
            return self._profile.render_nested_values(wrap.read_many(leaves[0].source), level)

        language = self._profile.language
        element_type = (
            element_info.display_name(language)
            if element_info is not None
            else prop.descriptor.type_name(language, element=True)
        )
        if len(leaves) == 1:
            body = self._render_object(
                node, element_info, _ValueReader(self._profile), wrap, level + 2
            )
            return self._profile.render_map(
                wrap.read_many(leaves[0].source),
                body,
                element_type=element_type,
                empty_as_no_value=True,
                level=level,
            )

        reads, reader = self._broadcast_reads(leaves, wrap)
        body = self._render_object(node, element_info, reader, wrap, level + 2)
        return self._profile.render_broadcast(
            reads,
            body,
            element_type=element_type,
            empty_as_no_value=True,
            level=level,
        )
