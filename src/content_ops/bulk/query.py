from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from content_ops.bulk.bindings import EntityBinding, binding_for, relation_repository
from content_ops.bulk.filters import FilterExpression, compile_filter
from content_ops.bulk.metadata import EntityType, describe, resolve_entity_type
from content_ops.db.enums import PublishStatusEnum
from content_ops.db.models import Organizer, SpecialSeries, TerrainType

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100


def plain_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _ref(obj: Any) -> dict[str, Any] | None:
    if obj is None:
        return None
    return {"id": obj.id, "name": getattr(obj, "name", None) or getattr(obj, "title", None)}


def field_value(obj: Any, binding: EntityBinding, field: str) -> Any:
    """Current value of a registry field on a loaded record.

    Many-valued relations are reported as the list of related ids.
    """
    meta = describe(binding.entity_type).field(field)
    raw = getattr(obj, field)
    if meta is not None and meta.is_many_relation:
        return sorted(item.id for item in raw)
    return plain_value(raw)


def serialize_record(obj: Any, binding: EntityBinding) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": obj.id,
        "name": binding.display(obj),
        "slug": obj.slug,
    }
    for meta in describe(binding.entity_type).fields:
        if meta.is_many_relation:
            continue
        record[meta.name] = plain_value(getattr(obj, meta.name))

    for link in binding.parents:
        related = getattr(obj, link.relationship)
        if link.many:
            record[link.key] = [_ref(r) for r in related]
        else:
            record[link.key] = _ref(related)
    return record


def load_matching(
    session: Session,
    entity_type: EntityType | str,
    expression: FilterExpression | None,
    *,
    limit: int | None,
) -> list[Any]:
    binding = binding_for(entity_type)
    stmt = (
        select(binding.model)
        .where(compile_filter(binding.entity_type, expression))
        .options(*binding.loader_options())
        .order_by(*binding.default_order())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(session.execute(stmt).scalars().all())


def query_records(
    session: Session,
    entity_type: EntityType | str,
    expression: FilterExpression | None = None,
    limit: int = DEFAULT_LIMIT,
) -> list[dict[str, Any]]:
    """Read-only filtered listing, bounded by *limit* and in the entity's default order."""
    entity_type = resolve_entity_type(entity_type)
    binding = binding_for(entity_type)
    rows = load_matching(session, entity_type, expression, limit=max(limit, 0))
    logger.debug("query %s matched %d record(s) (limit=%d)", entity_type, len(rows), limit)
    return [serialize_record(obj, binding) for obj in rows]


def relation_options(session: Session, target: str) -> list[dict[str, Any]]:
    """Selectable `{id, name}` choices for a relation target."""
    repo = relation_repository(session, target)
    model = repo.model

    predicates = []
    order_by: list[Any] = [model.name.asc()]
    if model in (SpecialSeries, Organizer):
        predicates.append(model.status == PublishStatusEnum.PUBLISHED)
    elif model is TerrainType:
        predicates.append(TerrainType.is_active.is_(True))
        order_by = [TerrainType.sort_order.asc(), TerrainType.name.asc()]

    return [{"id": obj.id, "name": obj.name} for obj in repo.list_where(*predicates, order_by=order_by)]
