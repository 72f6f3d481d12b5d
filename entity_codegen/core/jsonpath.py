"""JSON path normalization and evaluation for structured-document sources.

Supports the subset used by connector schemas: dotted member names,
bracket-quoted member names (``['first name']``), numeric indices and the
``[*]`` wildcard.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

_SIMPLE_SEGMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_INDEXED_SEGMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\[[^\]]+\])+$")

WILDCARD = "[*]"


@dataclass(frozen=True)
class PathSegment:
    """One step of a parsed JSON path: a member name, an index or a wildcard."""

    kind: str  # "member" | "index" | "wildcard"
    value: str | int | None = None


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def _split_segments(raw: str) -> list[str]:
    """Split *raw* on top-level dots, keeping quoted and bracketed text intact."""
    segments: list[str] = []
    current: list[str] = []
    bracket_depth = 0
    in_single = False
    in_double = False
    escaped = False

    for char in raw:
        if escaped:
            current.append(char)
            escaped = False
            continue
        if char == "\\":
            current.append(char)
            escaped = True
            continue
        if char == "'" and not in_double:
            in_single = not in_single
        elif char == '"' and not in_single:
            in_double = not in_double
        elif not in_single and not in_double:
            if char == "[":
                bracket_depth += 1
            elif char == "]":
                bracket_depth = max(0, bracket_depth - 1)
            elif char == "." and bracket_depth == 0:
                if current:
                    segments.append("".join(current))
                current = []
                continue
        current.append(char)

    if current:
        segments.append("".join(current))
    return [segment for segment in segments if segment]


@lru_cache(maxsize=256)
def normalize_json_path(value: str) -> str:
    """Normalize a user-written path to ``$``-rooted form.

    ``"user.name"`` -> ``"$.user.name"``, ``"first name"`` ->
    ``"$['first name']"``. Paths already starting with ``$`` are returned
    trimmed but otherwise untouched.
    """
    trimmed = value.strip()
    if not trimmed:
        return ""
    if trimmed.startswith("$"):
        return trimmed
    if trimmed.startswith("["):
        return f"${trimmed}"

    encoded: list[str] = []
    for segment in _split_segments(trimmed):
        if _SIMPLE_SEGMENT.match(segment) or _INDEXED_SEGMENT.match(segment):
            encoded.append(f".{segment}")
        else:
            escaped = segment.replace("\\", "\\\\").replace("'", "\\'")
            encoded.append(f"['{escaped}']")
    return "$" + "".join(encoded) if encoded else ""


# ---------------------------------------------------------------------------
# Parsing and evaluation
# ---------------------------------------------------------------------------


def _parse_bracket(body: str) -> PathSegment:
    body = body.strip()
    if body == "*":
        return PathSegment("wildcard")
    if len(body) >= 2 and body[0] == body[-1] and body[0] in ("'", '"'):
        inner = body[1:-1]
        return PathSegment("member", inner.replace("\\'", "'").replace("\\\\", "\\"))
    if body.lstrip("-").isdigit():
        return PathSegment("index", int(body))
    return PathSegment("member", body)


@lru_cache(maxsize=256)
def parse_json_path(value: str) -> tuple[PathSegment, ...]:
    """Parse a (normalized or user-written) path into segments."""
    path = normalize_json_path(value)
    if not path:
        return ()
    segments: list[PathSegment] = []
    i = 1  # skip "$"
    n = len(path)
    while i < n:
        char = path[i]
        if char == ".":
            j = i + 1
            while j < n and path[j] not in ".[":
                j += 1
            if j > i + 1:
                segments.append(PathSegment("member", path[i + 1 : j]))
            i = j
        elif char == "[":
            j = i + 1
            quote: str | None = None
            while j < n:
                if quote:
                    if path[j] == "\\":
                        j += 2
                        continue
                    if path[j] == quote:
                        quote = None
                elif path[j] in ("'", '"'):
                    quote = path[j]
                elif path[j] == "]":
                    break
                j += 1
            segments.append(_parse_bracket(path[i + 1 : j]))
            i = j + 1
        else:
            j = i
            while j < n and path[j] not in ".[":
                j += 1
            segments.append(PathSegment("member", path[i:j]))
            i = j
    return tuple(segments)


def evaluate_json_path(document: Any, value: str) -> list[Any]:
    """Return every value matched by the path inside *document*."""
    current: list[Any] = [document]
    for segment in parse_json_path(value):
        matched: list[Any] = []
        for node in current:
            if segment.kind == "wildcard":
                if isinstance(node, list):
                    matched.extend(node)
                elif isinstance(node, dict):
                    matched.extend(node.values())
            elif segment.kind == "index":
                if isinstance(node, list) and -len(node) <= segment.value < len(node):  # type: ignore[operator]
                    matched.append(node[segment.value])  # type: ignore[index]
            elif isinstance(node, dict) and segment.value in node:
                matched.append(node[segment.value])
        current = matched
    return current


def split_array_root(json_path: str | None) -> tuple[str, str] | None:
    """Split a path at its first ``[*]`` into ``(root, relative)``.

    ``"$.skills[*].name"`` -> ``("$.skills[*]", "name")``. Returns None when
    the path has no wildcard.
    """
    if not json_path:
        return None
    index = json_path.find(WILDCARD)
    if index < 0:
        return None
    root = json_path[: index + len(WILDCARD)]
    remainder = json_path[index + len(WILDCARD) :]
    relative = remainder[1:] if remainder.startswith(".") else remainder
    return root, relative
