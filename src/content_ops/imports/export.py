from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from content_ops.bulk.bindings import EntityBinding, binding_for
from content_ops.bulk.metadata import EntityType, resolve_entity_type
from content_ops.bulk.query import load_matching, plain_value
from content_ops.imports.batch import EXPORT_SCHEMA_VERSION, ImportBatch
from content_ops.imports.shapes import IMPORTABLE_FIELDS, REFERENCES, SERIES_KEY

logger = logging.getLogger(__name__)


def export_item(obj: Any, binding: EntityBinding) -> dict[str, Any]:
    item: dict[str, Any] = {"id": obj.id, "slug": obj.slug}
    for name in IMPORTABLE_FIELDS[binding.entity_type]:
        item[name] = plain_value(getattr(obj, name))
    for spec in REFERENCES.get(binding.entity_type, ()):
        item[spec.column] = getattr(obj, spec.column)
    if binding.entity_type is EntityType.COMPETITION:
        item[SERIES_KEY] = [
            {"id": s.id, "slug": s.slug, "name": s.name} for s in obj.special_series
        ]
    return item


def export_batch(session: Session, entity_type: EntityType | str) -> ImportBatch:
    """Snapshot every record of *entity_type* in the format `reconcile_import` reads."""

    entity_type = resolve_entity_type(entity_type)
    binding = binding_for(entity_type)
    items = [export_item(obj, binding) for obj in load_matching(session, entity_type, None, limit=None)]

    logger.info("exported %d %s record(s)", len(items), entity_type)
    return ImportBatch(
        exported_at=datetime.now(UTC),
        entity_type=entity_type,
        schema_version=EXPORT_SCHEMA_VERSION,
        item_count=len(items),
        items=items,
    )
