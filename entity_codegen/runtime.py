"""Row parser helpers referenced by Python-target expressions.

These are the Python counterparts of the row parser shipped with generated
TypeScript and C# projects. A compiled Python expression is evaluated with
the namespace returned by :func:`expression_namespace`::

    namespace = expression_namespace(row)
    value = eval(expression, namespace)

Multi-valued cells are ``;``-separated. JSON-path sources return a single
value for one match and a list for several.
"""

from __future__ import annotations

import ipaddress
import json
import logging
import re
from collections.abc import Callable, Sequence
from datetime import date, datetime
from typing import Any

from entity_codegen.core.exceptions import MissingMappingError, RowValidationError
from entity_codegen.core.jsonpath import evaluate_json_path, normalize_json_path

logger = logging.getLogger(__name__)

COLLECTION_SEPARATOR = ";"

Source = str | Sequence[str]


# --- Reads ---


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def read_source_value(row: Any, source: Source) -> Any:
    """Read a raw value addressed by a column list or a JSON path.

    Column lists yield the first non-blank column value. JSON paths yield
    None, the single match, or a list of all matches.
    """
    if isinstance(source, str):
        matches = evaluate_json_path(row, normalize_json_path(source))
        if not matches:
            return None
        return matches[0] if len(matches) == 1 else matches

    if not isinstance(row, dict):
        return None
    for header in source:
        value = row.get(header)
        if not _is_blank(value):
            return value
    return None


def read_entry_value(entry: Any, relative: str) -> Any:
    """Read a value relative to an array entry; an empty path is the entry itself."""
    if not relative:
        return entry
    path = relative if relative.startswith("[") else f"$.{relative}"
    return read_source_value(entry, path)


def read_array_entries(row: Any, root: str) -> list[Any]:
    """All entries matched by a ``[*]`` root path."""
    return evaluate_json_path(row, normalize_json_path(root))


# --- Parsing ---


def parse_string(value: Any) -> str:
    if isinstance(value, list):
        value = next((item for item in value if not _is_blank(item)), None)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value).strip()


def parse_string_collection(value: Any) -> list[str]:
    """Split a raw value into trimmed, non-empty strings."""
    if value is None:
        return []
    if isinstance(value, list):
        items = [parse_string(item) for item in value]
    else:
        items = [part.strip() for part in parse_string(value).split(COLLECTION_SEPARATOR)]
    return [item for item in items if item]


def parse_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return parse_string(value).lower() in ("true", "1", "yes", "y")


def parse_int(value: Any) -> int | None:
    text = parse_string(value)
    if not text:
        return None
    return int(float(text)) if any(c in text for c in ".eE") else int(text)


def parse_float(value: Any) -> float | None:
    text = parse_string(value)
    return float(text) if text else None


def parse_date_time(value: Any) -> str | None:
    """Return the trimmed ISO-8601 text after checking it parses."""
    text = parse_string(value)
    if not text:
        return None
    _parse_iso_datetime(text)
    return text


def parse_int_collection(value: Any) -> list[int]:
    return [int(float(item)) for item in parse_string_collection(value)]


def parse_float_collection(value: Any) -> list[float]:
    return [float(item) for item in parse_string_collection(value)]


def parse_date_time_collection(value: Any) -> list[str]:
    items = parse_string_collection(value)
    for item in items:
        _parse_iso_datetime(item)
    return items


def _parse_iso_datetime(text: str) -> datetime:
    return datetime.fromisoformat(text.replace("Z", "+00:00"))


# --- Defaults ---


def apply_default_string(value: str, default: str) -> str:
    return value if value else default


def apply_default_collection(values: list[str], default: str) -> list[str]:
    return values if values else parse_string_collection(default)


# --- Broadcast ---


def get_value(values: Sequence[str], index: int) -> str:
    """Element *index* of a correlated array; length-1 arrays broadcast."""
    if not values:
        return ""
    if len(values) == 1:
        return values[0] or ""
    return (values[index] or "") if index < len(values) else ""


def get_collection_value(values: Sequence[str], index: int) -> list[str]:
    if not values:
        return []
    if len(values) == 1:
        return [values[0] or ""]
    return [values[index] or ""] if index < len(values) else []


def broadcast_length(*arrays: Sequence[Any]) -> int:
    return max((len(array) for array in arrays), default=0)


# --- Validation ---


_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_URI = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://\S+$")
_UUID = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")
_HOSTNAME = re.compile(r"^(?=.{1,253}$)[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?)*$")


def _check_ip(version: int) -> Callable[[str], bool]:
    def check(text: str) -> bool:
        try:
            return ipaddress.ip_address(text).version == version
        except ValueError:
            return False

    return check


def _check_parser(parser: Callable[[str], Any]) -> Callable[[str], bool]:
    def check(text: str) -> bool:
        try:
            parser(text)
        except ValueError:
            return False
        return True

    return check


_FORMAT_CHECKS: dict[str, Callable[[str], bool]] = {
    "email": lambda text: bool(_EMAIL.match(text)),
    "uri": lambda text: bool(_URI.match(text)),
    "url": lambda text: bool(_URI.match(text)),
    "uuid": lambda text: bool(_UUID.match(text)),
    "hostname": lambda text: bool(_HOSTNAME.match(text)),
    "ipv4": _check_ip(4),
    "ipv6": _check_ip(6),
    "date": _check_parser(date.fromisoformat),
    "date-time": _check_parser(_parse_iso_datetime),
}


def validate_string(
    name: str,
    value: str,
    *,
    min_length: int | None = None,
    max_length: int | None = None,
    pattern: str | None = None,
    format: str | None = None,
) -> str:
    """Return *value* unchanged or raise RowValidationError.

    Empty values are treated as absent and are not checked.
    """
    if not value:
        return value
    if min_length is not None and len(value) < min_length:
        raise RowValidationError(name, f"length {len(value)} is below minimum {min_length}")
    if max_length is not None and len(value) > max_length:
        raise RowValidationError(name, f"length {len(value)} exceeds maximum {max_length}")
    if pattern is not None and re.search(pattern, value) is None:
        raise RowValidationError(name, f"'{value}' does not match pattern {pattern}")
    if format is not None:
        check = _FORMAT_CHECKS.get(format.lower())
        if check is None:
            logger.debug("No check registered for format '%s'", format)
        elif not check(value):
            raise RowValidationError(name, f"'{value}' is not a valid {format}")
    return value


def validate_string_collection(name: str, values: list[str], **constraints: Any) -> list[str]:
    for value in values:
        validate_string(name, value, **constraints)
    return values


def validate_number(
    name: str,
    value: float | None,
    *,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float | None:
    if value is None:
        return value
    if min_value is not None and value < min_value:
        raise RowValidationError(name, f"{value} is below minimum {min_value}")
    if max_value is not None and value > max_value:
        raise RowValidationError(name, f"{value} exceeds maximum {max_value}")
    return value


def validate_number_collection(name: str, values: list[float], **constraints: Any) -> list[float]:
    for value in values:
        validate_number(name, value, **constraints)
    return values


# --- Construction ---


def is_record(value: Any) -> bool:
    return isinstance(value, dict)


def _drop_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _drop_none(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [_drop_none(item) for item in value]
    return value


def to_json(value: Any) -> str:
    """Compact JSON text with absent (None) members omitted."""
    return json.dumps(_drop_none(value), separators=(",", ":"))


def raise_missing_mapping(property_name: str) -> Any:
    raise MissingMappingError(property_name)


_HELPERS: dict[str, Any] = {
    "read_source_value": read_source_value,
    "read_entry_value": read_entry_value,
    "read_array_entries": read_array_entries,
    "parse_string": parse_string,
    "parse_string_collection": parse_string_collection,
    "parse_boolean": parse_boolean,
    "parse_int": parse_int,
    "parse_float": parse_float,
    "parse_date_time": parse_date_time,
    "parse_int_collection": parse_int_collection,
    "parse_float_collection": parse_float_collection,
    "parse_date_time_collection": parse_date_time_collection,
    "apply_default_string": apply_default_string,
    "apply_default_collection": apply_default_collection,
    "get_value": get_value,
    "get_collection_value": get_collection_value,
    "broadcast_length": broadcast_length,
    "validate_string": validate_string,
    "validate_string_collection": validate_string_collection,
    "validate_number": validate_number,
    "validate_number_collection": validate_number_collection,
    "is_record": is_record,
    "to_json": to_json,
    "raise_missing_mapping": raise_missing_mapping,
}


def expression_namespace(row: Any) -> dict[str, Any]:
    """Globals for evaluating compiled Python expressions against *row*.

    Typed constructions also need the names of the Python declaration block
    of the same generation run bound into the returned namespace.
    """
    return {"json": json, "row": row, **_HELPERS}
