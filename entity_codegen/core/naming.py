"""Identifier conversion for generated TypeScript, C# and Python code.

Derived type names are built by concatenation (``customEntity`` + ``Details``)
so every converter here must be deterministic and free of global state.
"""

from __future__ import annotations

import re
from functools import lru_cache

# Anything that is not an ASCII letter or digit separates identifier words
_TS_WORD_SPLIT = re.compile(r"[^A-Za-z0-9]+")

# C# identifiers only split on underscores, dashes and whitespace
_CS_WORD_SPLIT = re.compile(r"[_\-\s]+")

_INVALID_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_]")
_IDENTIFIER_START = re.compile(r"^[A-Za-z_]")
_PLAIN_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _upper_first(part: str) -> str:
    return part[:1].upper() + part[1:]


@lru_cache(maxsize=512)
def to_ts_identifier(name: str) -> str:
    """Convert an arbitrary name into a PascalCase TypeScript identifier.

    ``"skill proficiency"`` -> ``"SkillProficiency"``; names without any
    letters or digits become ``"Item"``.
    """
    parts = [part for part in _TS_WORD_SPLIT.split(name) if part]
    if not parts:
        return "Item"
    pascal = "".join(_upper_first(part) for part in parts)
    sanitized = _INVALID_IDENTIFIER_CHARS.sub("_", pascal)
    return sanitized if _IDENTIFIER_START.match(sanitized) else f"_{sanitized}"


def to_cs_pascal(name: str) -> str:
    """Upper-case the first character of a name for C# symbols."""
    if not name:
        return "Value"
    return _upper_first(name)


def to_cs_identifier(name: str) -> str:
    """Convert an arbitrary name into a C#-friendly identifier."""
    parts = [part for part in _CS_WORD_SPLIT.split(name) if part]
    pascal = "".join(_upper_first(part) for part in parts)
    return pascal or "Item"


def to_py_identifier(name: str) -> str:
    """Convert a PascalCase or camelCase name to snake_case."""
    identifier = to_ts_identifier(name)
    snake = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", identifier).lower()
    return snake.lstrip("_") or "value"


def is_plain_identifier(name: str) -> bool:
    return bool(_PLAIN_IDENTIFIER.match(name))


def unique_field_var_name(name: str, used: set[str]) -> str:
    """Return a camelCase variable name for *name* that is not in *used*.

    Collisions get a numeric suffix (``firstName``, ``firstName1``, ...).
    The chosen name is added to *used*.
    """
    identifier = to_ts_identifier(name)
    base = identifier[:1].lower() + identifier[1:] if identifier else "value"
    base = base or "value"
    candidate = base
    suffix = 1
    while candidate in used:
        candidate = f"{base}{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate
