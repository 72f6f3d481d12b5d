"""Principal expression compiler.

Principal properties carry a small identity record (upn, tenant id, ...)
rather than a catalog entity. Each mapped field's last path segment becomes
the record key.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from entity_codegen.compiler.entity import BASE_LEVEL
from entity_codegen.compiler.validation import identity_leaf_wrap
from entity_codegen.core.ir import EntityFieldMapping, SourceDescriptor
from entity_codegen.targets.protocol import PrincipalMember, TargetProfile

# Principal keys with a dedicated member on the typed principal record
KNOWN_PRINCIPAL_MEMBERS: dict[str, str] = {
    "upn": "Upn",
    "userPrincipalName": "Upn",
    "tenantId": "TenantId",
    "externalName": "ExternalName",
    "externalId": "ExternalId",
    "entraDisplayName": "EntraDisplayName",
    "entraId": "EntraId",
    "email": "Email",
}


@dataclass(frozen=True)
class PrincipalEntry:
    key: str
    source: SourceDescriptor


def principal_field_entries(
    fields: Sequence[EntityFieldMapping] | None,
    fallback_source: SourceDescriptor,
) -> list[PrincipalEntry]:
    """Key/source pairs of a principal mapping.

    Without explicit fields the property's own source becomes a single
    ``upn`` entry, provided it references any input at all.
    """
    if fields:
        entries = []
        for mapping in fields:
            key = mapping.path.split(".")[-1]
            if key == "userPrincipalName":
                key = "upn"
            if key:
                entries.append(PrincipalEntry(key, mapping.source))
        return entries

    if not fallback_source.is_empty:
        return [PrincipalEntry("upn", fallback_source)]
    return []


class PrincipalCompiler:
    """Compiles principal and principal-collection properties."""

    def __init__(self, profile: TargetProfile) -> None:
        self._profile = profile
        self._wrap = identity_leaf_wrap(profile)

    def _members(self, entries: Sequence[PrincipalEntry], values: Sequence[str]) -> list[PrincipalMember]:
        return [
            PrincipalMember(entry.key, KNOWN_PRINCIPAL_MEMBERS.get(entry.key), value)
            for entry, value in zip(entries, values)
        ]

    def compile_principal(
        self,
        fields: Sequence[EntityFieldMapping] | None,
        fallback_source: SourceDescriptor,
    ) -> str:
        entries = principal_field_entries(fields, fallback_source)
        values = [self._wrap.read(entry.source) for entry in entries]
        return self._profile.principal_object(self._members(entries, values), BASE_LEVEL - 1)

    def compile_principal_collection(
        self,
        fields: Sequence[EntityFieldMapping] | None,
        fallback_source: SourceDescriptor,
    ) -> str:
        """One principal per position across the mapped multi-valued fields."""
        entries = principal_field_entries(fields, fallback_source)
        if not entries:
            return self._profile.empty_principal_collection

        reads = [
            (f"field{index}", self._wrap.read_many(entry.source))
            for index, entry in enumerate(entries)
        ]
        values = [
            self._profile.broadcast_value(var_name, collection=False) for var_name, _ in reads
        ]
        body = self._profile.principal_object(self._members(entries, values), BASE_LEVEL + 1)
        return self._profile.render_broadcast(
            reads,
            body,
            element_type=self._profile.principal_type,
            empty_as_no_value=False,
            level=BASE_LEVEL - 1,
        )
