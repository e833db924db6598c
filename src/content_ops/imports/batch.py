from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from content_ops.bulk.metadata import EntityType

EXPORT_SCHEMA_VERSION = "1.0.0"

# Entity names written by older exports.
_ENTITY_ALIASES: dict[str, EntityType] = {
    "events": EntityType.EVENT,
    "competitions": EntityType.COMPETITION,
    "editions": EntityType.EDITION,
    "organizers": EntityType.ORGANIZER,
    "specialSeries": EntityType.SERIES,
    "special_series": EntityType.SERIES,
    "services": EntityType.SERVICE,
    "posts": EntityType.POST,
}


class ConflictResolution(StrEnum):
    SKIP = "skip"
    UPDATE = "update"
    CREATE_NEW = "create_new"


class ConflictType(StrEnum):
    ID_EXISTS = "id_exists"
    SLUG_EXISTS = "slug_exists"
    BOTH_EXIST = "both_exist"
    # id matches one record, slug matches another
    ID_SLUG_MISMATCH = "id_slug_mismatch"


class ItemOutcome(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


class ImportBatch(BaseModel):
    """A previously exported set of records for one entity type."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    exported_at: datetime | None = Field(default=None, alias="exportedAt")
    entity_type: EntityType | None = Field(default=None, alias="entity")
    schema_version: str | None = Field(default=None, alias="version")
    item_count: int | None = Field(default=None, alias="count")
    items: list[Any] = Field(default_factory=list, alias="data")

    @field_validator("entity_type", mode="before")
    @classmethod
    def _normalize_entity(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _ENTITY_ALIASES.get(v, v)
        return v

    def to_export_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class ImportConflict:
    index: int
    identifier: str
    conflict_type: ConflictType
    existing_id: str
    existing_slug: str | None = None

    @property
    def reason(self) -> str:
        if self.conflict_type is ConflictType.ID_SLUG_MISMATCH:
            return (
                f"id matches record {self.existing_id} but slug belongs to a different record"
            )
        return f"Conflict: {self.conflict_type.value}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "item": self.index,
            "identifier": self.identifier,
            "existingId": self.existing_id,
            "existingSlug": self.existing_slug,
            "conflictType": self.conflict_type.value,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class ImportItemError:
    index: int
    identifier: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"item": self.index, "identifier": self.identifier, "reason": self.reason}


@dataclass(frozen=True)
class ImportValidationReport:
    is_valid: bool
    entity_type: EntityType
    total_items: int
    valid_item_count: int
    conflicts: list[ImportConflict]
    errors: list[ImportItemError]
    warnings: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "entityType": self.entity_type.value,
            "totalItems": self.total_items,
            "validItemCount": self.valid_item_count,
            "conflicts": [c.to_dict() for c in self.conflicts],
            "errors": [e.to_dict() for e in self.errors],
            "warnings": list(self.warnings),
        }


@dataclass
class ImportSummary:
    processed: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0

    def count(self, outcome: ItemOutcome) -> None:
        self.processed += 1
        if outcome is ItemOutcome.CREATED:
            self.created += 1
        elif outcome is ItemOutcome.UPDATED:
            self.updated += 1
        elif outcome is ItemOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1

    def to_dict(self) -> dict[str, int]:
        return {
            "processed": self.processed,
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": self.errors,
        }


@dataclass(frozen=True)
class ImportItemResult:
    index: int
    identifier: str
    outcome: ItemOutcome
    record_id: str | None = None
    slug: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "item": self.index,
            "identifier": self.identifier,
            "outcome": self.outcome.value,
            "recordId": self.record_id,
            "slug": self.slug,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class ImportExecutionResult:
    success: bool
    dry_run: bool
    entity_type: EntityType
    summary: ImportSummary
    per_item: list[ImportItemResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "dryRun": self.dry_run,
            "entityType": self.entity_type.value,
            "summary": self.summary.to_dict(),
            "perItem": [r.to_dict() for r in self.per_item],
        }
