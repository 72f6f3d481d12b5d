"""Path tree building for entity field mappings.

A flat list of ``(dotted.path, source)`` pairs becomes a nested dict::

    [("skills.name", s1), ("skills.level", s2)]
    -> {"skills": {"name": <mapping s1>, "level": <mapping s2>}}

A node is a leaf iff it is an EntityFieldMapping.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Union

from entity_codegen.core.ir import EntityFieldMapping

logger = logging.getLogger(__name__)

PathTree = dict[str, Union["PathTree", EntityFieldMapping]]


def split_path(path: str) -> list[str]:
    """Split a dotted path into trimmed, non-empty segments."""
    return [segment.strip() for segment in path.split(".") if segment.strip()]


def is_leaf(node: object) -> bool:
    return isinstance(node, EntityFieldMapping)


def build_path_tree(fields: Iterable[EntityFieldMapping]) -> PathTree:
    """Build a nested path tree from entity field mappings.

    Collisions are last-write-wins: a later leaf replaces an existing
    subtree, and a later intermediate segment replaces an existing leaf
    with a fresh subtree.
    """
    tree: PathTree = {}
    for mapping in fields:
        segments = split_path(mapping.path)
        if not segments:
            continue

        node = tree
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                if child is not None:
                    logger.debug(
                        "Path '%s' replaces leaf '%s' with a subtree", mapping.path, segment
                    )
                child = {}
                node[segment] = child
            node = child

        last = segments[-1]
        if isinstance(node.get(last), dict):
            logger.debug("Path '%s' replaces subtree '%s' with a leaf", mapping.path, last)
        node[last] = mapping
    return tree


def collect_leaves(tree: PathTree) -> list[EntityFieldMapping]:
    """Collect all leaves depth-first in insertion order."""
    collected: list[EntityFieldMapping] = []
    for child in tree.values():
        if isinstance(child, EntityFieldMapping):
            collected.append(child)
        else:
            collected.extend(collect_leaves(child))
    return collected
