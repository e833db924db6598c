"""Preview and apply a single field/value change to every record matching a filter.

Scalar fields are changed with one UPDATE scoped by the compiled predicate.
Many-valued relation fields are edited record by record inside one SAVEPOINT,
so a failure on any record leaves every record untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from content_ops.bulk.bindings import EntityBinding, binding_for, relation_repository
from content_ops.bulk.errors import (
    EmptyFilterRejected,
    NonEditableField,
    TransactionFailed,
    TypeMismatch,
)
from content_ops.bulk.filters import (
    BulkMutationOperation,
    FilterExpression,
    column_python_type,
    compile_filter,
)
from content_ops.bulk.metadata import (
    EntityType,
    FieldKind,
    FieldMetadata,
    describe,
    get_field,
    resolve_entity_type,
)
from content_ops.bulk.query import field_value, load_matching, plain_value
from content_ops.bulk.values import coerce_value
from content_ops.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchingRecord:
    id: str
    display_name: str
    current_value: Any
    new_value: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "currentValue": self.current_value,
            "newValue": self.new_value,
        }


@dataclass(frozen=True)
class BulkMutationPreview:
    entity_type: EntityType
    field: str
    matching_count: int
    matching_records: list[MatchingRecord]

    def to_dict(self) -> dict[str, Any]:
        return {
            "entityType": self.entity_type.value,
            "field": self.field,
            "matchingCount": self.matching_count,
            "matchingRecords": [r.to_dict() for r in self.matching_records],
        }


@dataclass(frozen=True)
class BulkMutationResult:
    success: bool
    entity_type: EntityType
    updated_count: int
    updated_ids: list[str]
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "entityType": self.entity_type.value,
            "updatedCount": self.updated_count,
            "updatedIds": list(self.updated_ids),
        }
        if self.errors:
            data["errors"] = list(self.errors)
        return data


def _is_empty(expression: FilterExpression | None) -> bool:
    return expression is None or expression.is_empty


def _editable_field(entity_type: EntityType, name: str) -> FieldMetadata:
    meta = get_field(entity_type, name)
    if meta is None:
        raise NonEditableField(entity_type.value, name, "unknown field")
    if not meta.editable:
        raise NonEditableField(entity_type.value, name)
    return meta


def _mutation_value(binding: EntityBinding, meta: FieldMetadata, raw: Any) -> Any:
    if meta.is_many_relation:
        return coerce_value(meta, raw, allow_none=False)

    value = coerce_value(meta, raw, python_type=column_python_type(binding, meta.name))
    if value is None:
        column = binding.column(meta.name).property.columns[0]
        if not column.nullable:
            raise TypeMismatch(f"Field {meta.name!r} cannot be cleared")
    return value


def _many_relation_field(entity_type: EntityType, name: str | None) -> FieldMetadata:
    if name is None:
        candidates = [f for f in describe(entity_type).fields if f.is_many_relation]
        if len(candidates) != 1:
            raise NonEditableField(
                entity_type.value, "<relation>", "no single many-valued relation field"
            )
        return candidates[0]

    meta = _editable_field(entity_type, name)
    if not meta.is_many_relation:
        raise TypeMismatch(f"Field {name!r} is not a many-valued relation")
    return meta


# -----------------------------
# Per-record relation edits
# -----------------------------


def _connect_related(obj: Any, field_name: str, related: Any) -> None:
    collection = getattr(obj, field_name)
    if related not in collection:
        collection.append(related)


def _disconnect_related(obj: Any, field_name: str, related: Any) -> None:
    collection = getattr(obj, field_name)
    if related in collection:
        collection.remove(related)


def _require_related(session: Session, meta: FieldMetadata, related_id: str) -> Any:
    related = relation_repository(session, meta.relation_target or "").get(related_id)
    if related is None:
        raise TransactionFailed(f"Related {meta.relation_target} {related_id!r} does not exist")
    return related


def _apply_relation_edit(
    session: Session,
    binding: EntityBinding,
    meta: FieldMetadata,
    ids: list[str],
    related_id: str,
    edit: Callable[[Any, str, Any], None],
) -> None:
    related = _require_related(session, meta, related_id)

    repo = binding.repository(session)
    model = binding.model
    for obj in repo.list_where(model.id.in_(ids), order_by=[model.id.asc()]):
        edit(obj, meta.name, related)
        session.flush()


def _run_in_savepoint(
    session: Session,
    entity_type: EntityType,
    ids: list[str],
    work: Callable[[], None],
) -> BulkMutationResult:
    try:
        with session.begin_nested():
            work()
    except Exception as exc:
        failure = exc if isinstance(exc, TransactionFailed) else TransactionFailed(str(exc))
        logger.exception("bulk %s rolled back: %s", entity_type, failure)
        return BulkMutationResult(
            success=False,
            entity_type=entity_type,
            updated_count=0,
            updated_ids=[],
            errors=[str(failure)],
        )

    return BulkMutationResult(
        success=True,
        entity_type=entity_type,
        updated_count=len(ids),
        updated_ids=list(ids),
    )


# -----------------------------
# Public operations
# -----------------------------


def preview_bulk_mutation(
    session: Session,
    entity_type: EntityType | str,
    expression: FilterExpression | None,
    operation: BulkMutationOperation,
    *,
    limit: int | None = None,
) -> BulkMutationPreview:
    entity_type = resolve_entity_type(entity_type)
    binding = binding_for(entity_type)
    meta = _editable_field(entity_type, operation.field)
    value = _mutation_value(binding, meta, operation.value)
    predicate = compile_filter(entity_type, expression)

    bound = settings.preview_limit if limit is None else limit
    matching_count = binding.repository(session).count_where(predicate)
    rows = load_matching(session, entity_type, expression, limit=bound)

    records = []
    for obj in rows:
        current = field_value(obj, binding, meta.name)
        if meta.is_many_relation:
            proposed = sorted(set(current) | {value})
        else:
            proposed = plain_value(value)
        records.append(
            MatchingRecord(
                id=obj.id,
                display_name=binding.display(obj),
                current_value=current,
                new_value=proposed,
            )
        )

    return BulkMutationPreview(
        entity_type=entity_type,
        field=meta.name,
        matching_count=matching_count,
        matching_records=records,
    )


def execute_bulk_mutation(
    session: Session,
    entity_type: EntityType | str,
    expression: FilterExpression | None,
    operation: BulkMutationOperation,
) -> BulkMutationResult:
    """Apply *operation* to every record matching *expression*.

    Raises `EmptyFilterRejected`, `NonEditableField` or `TypeMismatch` before
    touching storage. Storage failures are rolled back and reported in the
    returned result with ``success=False``.
    """

    entity_type = resolve_entity_type(entity_type)
    if _is_empty(expression):
        raise EmptyFilterRejected(entity_type.value)

    binding = binding_for(entity_type)
    meta = _editable_field(entity_type, operation.field)
    value = _mutation_value(binding, meta, operation.value)
    predicate = compile_filter(entity_type, expression)

    ids = binding.repository(session).ids_where(predicate)
    if not ids:
        return BulkMutationResult(success=True, entity_type=entity_type, updated_count=0, updated_ids=[])

    if meta.is_many_relation:

        def work() -> None:
            _apply_relation_edit(session, binding, meta, ids, value, _connect_related)

    else:

        def work() -> None:
            if meta.kind is FieldKind.RELATION and value is not None:
                _require_related(session, meta, value)
            stmt = (
                update(binding.model)
                .where(predicate)
                .values({meta.name: value})
                .execution_options(synchronize_session="fetch")
            )
            session.execute(stmt)

    result = _run_in_savepoint(session, entity_type, ids, work)
    if result.success:
        logger.info(
            "bulk %s: set %s on %d record(s)", entity_type, meta.name, result.updated_count
        )
    return result


def disconnect_relation(
    session: Session,
    entity_type: EntityType | str,
    expression: FilterExpression | None,
    related_id: str,
    field: str | None = None,
) -> BulkMutationResult:
    """Detach *related_id* from every matching record, all or nothing."""

    entity_type = resolve_entity_type(entity_type)
    if _is_empty(expression):
        raise EmptyFilterRejected(entity_type.value)

    binding = binding_for(entity_type)
    meta = _many_relation_field(entity_type, field)
    related_id = coerce_value(meta, related_id, allow_none=False)
    predicate = compile_filter(entity_type, expression)

    ids = binding.repository(session).ids_where(predicate)
    if not ids:
        return BulkMutationResult(success=True, entity_type=entity_type, updated_count=0, updated_ids=[])

    def work() -> None:
        _apply_relation_edit(session, binding, meta, ids, related_id, _disconnect_related)

    result = _run_in_savepoint(session, entity_type, ids, work)
    if result.success:
        logger.info(
            "bulk %s: detached %s %s from %d record(s)",
            entity_type,
            meta.relation_target,
            related_id,
            result.updated_count,
        )
    return result
