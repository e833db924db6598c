"""Static description of every bulk-editable entity type and its fields.

This registry is the only place a caller-supplied field name is accepted from:
the filter compiler, the mutation executor and the importer all resolve names
through it before touching a model attribute.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from content_ops.bulk.errors import UnknownEntityType
from content_ops.db.enums import (
    EditionStatusEnum,
    LanguageEnum,
    PostCategoryEnum,
    PostStatusEnum,
    PublishStatusEnum,
    RaceTypeEnum,
    RegistrationStatusEnum,
    UtmbIndexEnum,
)


class EntityType(StrEnum):
    EVENT = "event"
    COMPETITION = "competition"
    EDITION = "edition"
    ORGANIZER = "organizer"
    SERIES = "series"
    SERVICE = "service"
    POST = "post"


class FieldKind(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    DATE = "date"
    RELATION = "relation"


class RelationMultiplicity(StrEnum):
    ONE = "one"
    MANY = "many"


@dataclass(frozen=True)
class FieldMetadata:
    name: str
    label: str
    kind: FieldKind
    filterable: bool = True
    editable: bool = True
    enum_values: tuple[str, ...] | None = None
    relation_target: str | None = None
    multiplicity: RelationMultiplicity | None = None

    @property
    def is_many_relation(self) -> bool:
        return self.kind is FieldKind.RELATION and self.multiplicity is RelationMultiplicity.MANY

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "label": self.label,
            "type": self.kind.value,
            "filterable": self.filterable,
            "editable": self.editable,
        }
        if self.enum_values is not None:
            data["enumValues"] = list(self.enum_values)
        if self.relation_target is not None:
            data["relationEntity"] = self.relation_target
            data["multiplicity"] = self.multiplicity.value if self.multiplicity else None
        return data


@dataclass(frozen=True)
class EntityMetadata:
    entity_type: EntityType
    label: str
    fields: tuple[FieldMetadata, ...]

    def field(self, name: str) -> FieldMetadata | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.entity_type.value,
            "label": self.label,
            "fields": [f.to_dict() for f in self.fields],
        }


# -----------------------------
# Field builders
# -----------------------------


def _string(name: str, label: str) -> FieldMetadata:
    return FieldMetadata(name=name, label=label, kind=FieldKind.STRING)


def _number(name: str, label: str) -> FieldMetadata:
    return FieldMetadata(name=name, label=label, kind=FieldKind.NUMBER)


def _boolean(name: str, label: str) -> FieldMetadata:
    return FieldMetadata(name=name, label=label, kind=FieldKind.BOOLEAN)


def _date(name: str, label: str) -> FieldMetadata:
    return FieldMetadata(name=name, label=label, kind=FieldKind.DATE)


def _enum(name: str, label: str, enum_cls: type[StrEnum]) -> FieldMetadata:
    return FieldMetadata(
        name=name,
        label=label,
        kind=FieldKind.ENUM,
        enum_values=tuple(e.value for e in enum_cls),
    )


def _relation(
    name: str,
    label: str,
    target: str,
    *,
    many: bool = False,
    editable: bool = True,
) -> FieldMetadata:
    return FieldMetadata(
        name=name,
        label=label,
        kind=FieldKind.RELATION,
        editable=editable,
        relation_target=target,
        multiplicity=RelationMultiplicity.MANY if many else RelationMultiplicity.ONE,
    )


_REGISTRY: Mapping[EntityType, EntityMetadata] = MappingProxyType(
    {
        EntityType.COMPETITION: EntityMetadata(
            entity_type=EntityType.COMPETITION,
            label="Competitions",
            fields=(
                _string("name", "Name"),
                _enum("status", "Status", PublishStatusEnum),
                _boolean("featured", "Featured"),
                _number("base_distance", "Distance (km)"),
                _number("base_elevation", "Elevation gain (m+)"),
                _number("itra_points", "ITRA points"),
                _enum("utmb_index", "UTMB index", UtmbIndexEnum),
                _enum("race_type", "Race type", RaceTypeEnum),
                _enum("language", "Language", LanguageEnum),
                _relation("special_series", "Special series", "series", many=True),
                _relation("terrain_type_id", "Terrain type", "terrain_type"),
                _relation("event_id", "Event", "event", editable=False),
            ),
        ),
        EntityType.EVENT: EntityMetadata(
            entity_type=EntityType.EVENT,
            label="Events",
            fields=(
                _string("name", "Name"),
                _enum("status", "Status", PublishStatusEnum),
                _boolean("featured", "Featured"),
                _string("country", "Country"),
                _string("city", "City"),
                _enum("language", "Language", LanguageEnum),
                _number("typical_month", "Typical month"),
                _relation("organizer_id", "Organizer", "organizer"),
            ),
        ),
        EntityType.EDITION: EntityMetadata(
            entity_type=EntityType.EDITION,
            label="Editions",
            fields=(
                _number("year", "Year"),
                _enum("status", "Status", EditionStatusEnum),
                _number("distance", "Distance (km)"),
                _number("elevation", "Elevation gain (m+)"),
                _number("max_participants", "Max participants"),
                _enum("registration_status", "Registration status", RegistrationStatusEnum),
                _date("start_date", "Start date"),
                _relation("competition_id", "Competition", "competition", editable=False),
            ),
        ),
        EntityType.ORGANIZER: EntityMetadata(
            entity_type=EntityType.ORGANIZER,
            label="Organizers",
            fields=(
                _string("name", "Name"),
                _enum("status", "Status", PublishStatusEnum),
                _string("country", "Country"),
                _string("website", "Website"),
            ),
        ),
        EntityType.SERIES: EntityMetadata(
            entity_type=EntityType.SERIES,
            label="Special series",
            fields=(
                _string("name", "Name"),
                _enum("status", "Status", PublishStatusEnum),
                _string("country", "Country"),
                _enum("language", "Language", LanguageEnum),
            ),
        ),
        EntityType.SERVICE: EntityMetadata(
            entity_type=EntityType.SERVICE,
            label="Services",
            fields=(
                _string("name", "Name"),
                _enum("status", "Status", PublishStatusEnum),
                _boolean("featured", "Featured"),
                _string("country", "Country"),
                _string("city", "City"),
                _enum("language", "Language", LanguageEnum),
                _relation("category_id", "Category", "service_category"),
            ),
        ),
        EntityType.POST: EntityMetadata(
            entity_type=EntityType.POST,
            label="Posts",
            fields=(
                _string("title", "Title"),
                _enum("status", "Status", PostStatusEnum),
                _enum("category", "Category", PostCategoryEnum),
                _enum("language", "Language", LanguageEnum),
                _date("published_at", "Published at"),
            ),
        ),
    }
)


def resolve_entity_type(entity_type: EntityType | str) -> EntityType:
    try:
        return EntityType(entity_type)
    except ValueError:
        raise UnknownEntityType(entity_type) from None


def describe(entity_type: EntityType | str) -> EntityMetadata:
    return _REGISTRY[resolve_entity_type(entity_type)]


def describe_all() -> list[EntityMetadata]:
    return list(_REGISTRY.values())


def get_field(entity_type: EntityType | str, field: str) -> FieldMetadata | None:
    return describe(entity_type).field(field)


def is_filterable(entity_type: EntityType | str, field: str) -> bool:
    f = get_field(entity_type, field)
    return f is not None and f.filterable


def is_editable(entity_type: EntityType | str, field: str) -> bool:
    f = get_field(entity_type, field)
    return f is not None and f.editable
