"""Which columns and references an import item may carry, per entity type."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from types import MappingProxyType

from content_ops.bulk.bindings import EntityBinding
from content_ops.bulk.filters import column_python_type
from content_ops.bulk.metadata import EntityType, FieldKind, FieldMetadata, get_field


@dataclass(frozen=True)
class ReferenceSpec:
    """A single-valued link written as `<column>` or as a nested `<key>: {id|slug}` object."""

    column: str
    key: str
    target: str
    required: bool = False


IMPORTABLE_FIELDS: Mapping[EntityType, tuple[str, ...]] = MappingProxyType(
    {
        EntityType.EVENT: (
            "name",
            "description",
            "status",
            "featured",
            "language",
            "country",
            "city",
            "typical_month",
            "first_edition_year",
            "website",
        ),
        EntityType.COMPETITION: (
            "name",
            "description",
            "status",
            "featured",
            "language",
            "race_type",
            "utmb_index",
            "base_distance",
            "base_elevation",
            "itra_points",
        ),
        EntityType.EDITION: (
            "year",
            "name",
            "status",
            "registration_status",
            "start_date",
            "end_date",
            "distance",
            "elevation",
            "max_participants",
        ),
        EntityType.ORGANIZER: ("name", "status", "country", "city", "website", "description"),
        EntityType.SERIES: ("name", "status", "language", "country", "website", "description"),
        EntityType.SERVICE: (
            "name",
            "description",
            "status",
            "featured",
            "language",
            "country",
            "city",
            "website",
        ),
        EntityType.POST: (
            "title",
            "excerpt",
            "content",
            "status",
            "category",
            "language",
            "published_at",
        ),
    }
)

REFERENCES: Mapping[EntityType, tuple[ReferenceSpec, ...]] = MappingProxyType(
    {
        EntityType.EVENT: (ReferenceSpec("organizer_id", "organizer", "organizer"),),
        EntityType.COMPETITION: (
            ReferenceSpec("event_id", "event", "event", required=True),
            ReferenceSpec("terrain_type_id", "terrain_type", "terrain_type"),
        ),
        EntityType.EDITION: (
            ReferenceSpec("competition_id", "competition", "competition", required=True),
        ),
        EntityType.SERVICE: (ReferenceSpec("category_id", "category", "service_category"),),
        EntityType.POST: (
            ReferenceSpec("event_id", "event", "event"),
            ReferenceSpec("competition_id", "competition", "competition"),
        ),
    }
)

# Column stamped with the acting user on create.
OWNER_FIELDS: Mapping[EntityType, str] = MappingProxyType(
    {
        EntityType.EVENT: "created_by_id",
        EntityType.COMPETITION: "created_by_id",
        EntityType.ORGANIZER: "created_by_id",
        EntityType.SERIES: "created_by_id",
        EntityType.SERVICE: "created_by_id",
        EntityType.POST: "author_id",
    }
)

SERIES_KEY = "special_series"


def importable_field(binding: EntityBinding, name: str) -> FieldMetadata:
    """Registry metadata for *name*, or metadata derived from the column type."""

    meta = get_field(binding.entity_type, name)
    if meta is not None:
        return meta

    py_type = column_python_type(binding, name)
    if isinstance(py_type, type) and issubclass(py_type, Enum):
        return FieldMetadata(
            name=name,
            label=name,
            kind=FieldKind.ENUM,
            enum_values=tuple(e.value for e in py_type),
        )
    if py_type is bool:
        kind = FieldKind.BOOLEAN
    elif py_type in (int, float):
        kind = FieldKind.NUMBER
    elif isinstance(py_type, type) and issubclass(py_type, date):
        kind = FieldKind.DATE
    else:
        kind = FieldKind.STRING
    return FieldMetadata(name=name, label=name, kind=kind)
