"""Type alias table: catalog and derived type names to per-target display names."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from entity_codegen.catalog.registry import TypeCatalog
from entity_codegen.core.enums import TargetLanguage
from entity_codegen.core.naming import to_cs_pascal, to_ts_identifier
from entity_codegen.synthesis.derived import DerivedType


@dataclass(frozen=True)
class TypeAlias:
    """Display names of one composite type in every target language."""

    ts_alias: str
    cs_name: str

    @property
    def py_name(self) -> str:
        return self.ts_alias

    def for_target(self, language: TargetLanguage) -> str:
        if language is TargetLanguage.CSHARP:
            return self.cs_name
        if language is TargetLanguage.PYTHON:
            return self.py_name
        return self.ts_alias


def alias_for(name: str) -> TypeAlias:
    return TypeAlias(ts_alias=to_ts_identifier(name), cs_name=to_cs_pascal(name))


class TypeAliasTable:
    """Read-only ``name -> TypeAlias`` mapping built once per run."""

    def __init__(self, aliases: dict[str, TypeAlias]) -> None:
        self._aliases = dict(aliases)

    def get(self, name: str) -> TypeAlias | None:
        return self._aliases.get(name)

    def has(self, name: str) -> bool:
        return name in self._aliases

    @property
    def names(self) -> list[str]:
        return list(self._aliases)

    def __contains__(self, name: object) -> bool:
        return name in self._aliases

    def __len__(self) -> int:
        return len(self._aliases)


def build_alias_table(catalog: TypeCatalog, derived: Iterable[DerivedType]) -> TypeAliasTable:
    """Alias every catalog type and every derived type; derived names win."""
    aliases: dict[str, TypeAlias] = {}
    for catalog_type in catalog:
        aliases[catalog_type.name] = alias_for(catalog_type.name)
    for derived_type in derived:
        aliases[derived_type.name] = alias_for(derived_type.name)
    return TypeAliasTable(aliases)
