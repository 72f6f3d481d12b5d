"""People connector label registry.

Each supported ``person*`` label names the catalog type its payload is built
from. Blocked labels are rejected for custom connectors with a hint on how to
express the same data through a supported label.
"""

from __future__ import annotations

from dataclasses import dataclass

from entity_codegen.core.enums import PropertyType
from entity_codegen.core.exceptions import CatalogError


@dataclass(frozen=True)
class PeopleLabelInfo:
    """A supported people label and the payload it carries."""

    label: str
    payload_type: PropertyType
    catalog_type: str
    collection_limit: int | None = None

    @property
    def is_collection(self) -> bool:
        return self.payload_type.is_collection


@dataclass(frozen=True)
class BlockedPeopleLabel:
    message: str
    hint: str


def _label(
    label: str,
    payload_type: PropertyType,
    catalog_type: str,
    collection_limit: int | None = None,
) -> tuple[str, PeopleLabelInfo]:
    return label, PeopleLabelInfo(label, payload_type, catalog_type, collection_limit)


PEOPLE_LABELS: dict[str, PeopleLabelInfo] = dict(
    [
        _label("personAccount", PropertyType.STRING, "userAccountInformation"),
        _label("personName", PropertyType.STRING, "personName"),
        _label("personCurrentPosition", PropertyType.STRING, "workPosition"),
        _label("personAddresses", PropertyType.STRING_COLLECTION, "itemAddress", 3),
        _label("personEmails", PropertyType.STRING_COLLECTION, "itemEmail", 3),
        _label("personPhones", PropertyType.STRING_COLLECTION, "itemPhone"),
        _label("personAwards", PropertyType.STRING_COLLECTION, "personAward"),
        _label("personCertifications", PropertyType.STRING_COLLECTION, "personCertification"),
        _label("personProjects", PropertyType.STRING_COLLECTION, "projectParticipation"),
        _label("personSkills", PropertyType.STRING_COLLECTION, "skillProficiency"),
        _label("personWebAccounts", PropertyType.STRING_COLLECTION, "webAccount"),
        _label("personWebSite", PropertyType.STRING, "personWebsite"),
        _label("personAnniversaries", PropertyType.STRING_COLLECTION, "personAnnualEvent"),
        _label("personNote", PropertyType.STRING, "personAnnotation"),
    ]
)

BLOCKED_PEOPLE_LABELS: dict[str, BlockedPeopleLabel] = {
    "personManager": BlockedPeopleLabel(
        message="People connector label 'personManager' is blocked for custom connectors.",
        hint=(
            "Remove this label. If you need to describe reporting structure, include "
            "manager details inside personCurrentPosition.detail.manager."
        ),
    ),
    "personAssistants": BlockedPeopleLabel(
        message="People connector label 'personAssistants' is blocked for custom connectors.",
        hint=(
            "Remove the label and surface assistant information inside personPhones "
            "or personEmails metadata instead."
        ),
    ),
    "personColleagues": BlockedPeopleLabel(
        message="People connector label 'personColleagues' is blocked for custom connectors.",
        hint=(
            "Consider using personProjects or personSkills to describe collaboration "
            "context rather than emitting colleagues directly."
        ),
    ),
    "personAlternateContacts": BlockedPeopleLabel(
        message=(
            "People connector label 'personAlternateContacts' is blocked for custom connectors."
        ),
        hint=(
            "Provide alternate contact details by enriching personPhones or personEmails "
            "instead of using this label."
        ),
    ),
    "personEmergencyContacts": BlockedPeopleLabel(
        message=(
            "People connector label 'personEmergencyContacts' is blocked for custom connectors."
        ),
        hint=(
            "Provide emergency contact details inside personPhones or personEmails "
            "instead of using this label."
        ),
    ),
}


def supported_people_labels() -> list[str]:
    """Supported labels in registry order."""
    return list(PEOPLE_LABELS)


def is_supported_people_label(label: str) -> bool:
    return label in PEOPLE_LABELS


def get_people_label_info(label: str) -> PeopleLabelInfo:
    """Look up a supported label.

    Raises:
        CatalogError: If the label is not a supported people label.
    """
    try:
        return PEOPLE_LABELS[label]
    except KeyError:
        raise CatalogError(f"Missing catalog type mapping for people label '{label}'") from None


def get_blocked_people_label(label: str) -> BlockedPeopleLabel | None:
    return BLOCKED_PEOPLE_LABELS.get(label)
