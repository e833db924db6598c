from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from content_ops.bulk.bindings import EntityBinding, binding_for
from content_ops.bulk.errors import BulkOpsError, ImportBatchMismatch, ItemValidationFailed
from content_ops.bulk.metadata import EntityType, resolve_entity_type
from content_ops.core.config import settings
from content_ops.db.base import new_id
from content_ops.db.models import SpecialSeries
from content_ops.imports.batch import (
    ConflictResolution,
    ConflictType,
    ImportBatch,
    ImportExecutionResult,
    ImportItemError,
    ImportItemResult,
    ImportSummary,
    ImportValidationReport,
    ItemOutcome,
)
from content_ops.imports.planning import (
    BatchState,
    ItemPlan,
    check_scope_move,
    describe_item,
    plan_item,
    unique_slug,
)
from content_ops.imports.shapes import OWNER_FIELDS

logger = logging.getLogger(__name__)


def _target_entity(batch: ImportBatch, entity_type: EntityType | str | None) -> EntityType:
    if entity_type is None:
        if batch.entity_type is None:
            raise ImportBatchMismatch("Batch does not declare an entity type and none was given")
        return batch.entity_type

    requested = resolve_entity_type(entity_type)
    if batch.entity_type is not None and batch.entity_type is not requested:
        raise ImportBatchMismatch(
            f"Batch contains {batch.entity_type.value} records, not {requested.value}"
        )
    return requested


def _batch_warnings(batch: ImportBatch) -> list[str]:
    if batch.item_count is not None and batch.item_count != len(batch.items):
        return [f"Batch declares {batch.item_count} item(s) but contains {len(batch.items)}"]
    return []


def _log_mismatch(entity_type: EntityType, plan: ItemPlan) -> None:
    if plan.conflict is not None and plan.conflict.conflict_type is ConflictType.ID_SLUG_MISMATCH:
        logger.warning(
            "import %s item %d (%s): id matches %s but slug %r belongs to another record",
            entity_type,
            plan.index,
            plan.identifier,
            plan.conflict.existing_id,
            plan.slug,
        )


# -----------------------------
# Validate
# -----------------------------


def validate_import(
    session: Session,
    batch: ImportBatch,
    entity_type: EntityType | str | None = None,
) -> ImportValidationReport:
    """Check every item and report conflicts without writing anything."""

    entity_type = _target_entity(batch, entity_type)
    binding = binding_for(entity_type)
    state = BatchState()

    conflicts = []
    errors = []
    warnings = _batch_warnings(batch)
    new_items = 0

    for index, raw in enumerate(batch.items):
        try:
            plan = plan_item(session, binding, index, raw, state)
        except BulkOpsError as exc:
            errors.append(ImportItemError(index, describe_item(index, raw), str(exc)))
            continue

        warnings.extend(f"Item {index} ({plan.identifier}): {w}" for w in plan.warnings)
        if plan.conflict is not None:
            _log_mismatch(entity_type, plan)
            conflicts.append(plan.conflict)
        else:
            new_items += 1
            state.claim(plan.item_id or f"new:{index}", plan.slug, plan.scope)

    return ImportValidationReport(
        is_valid=not errors,
        entity_type=entity_type,
        total_items=len(batch.items),
        valid_item_count=new_items,
        conflicts=conflicts,
        errors=errors,
        warnings=warnings,
    )


# -----------------------------
# Writes
# -----------------------------


def _attach_series(session: Session, obj: Any, series_ids: list[str]) -> None:
    obj.special_series = [s for s in (session.get(SpecialSeries, i) for i in series_ids) if s]


def _create_record(
    session: Session,
    binding: EntityBinding,
    plan: ItemPlan,
    *,
    record_id: str,
    slug: str,
    acting_user_id: str | None,
) -> Any:
    obj = binding.model(id=record_id, slug=slug, **plan.changes())
    owner_field = OWNER_FIELDS.get(binding.entity_type)
    if owner_field is not None and acting_user_id is not None:
        setattr(obj, owner_field, acting_user_id)
    if plan.series_ids is not None:
        _attach_series(session, obj, plan.series_ids)
    return binding.repository(session).add(obj)


def _update_record(session: Session, binding: EntityBinding, plan: ItemPlan, record_id: str) -> Any:
    repo = binding.repository(session)
    obj = repo.get(record_id)
    if obj is None:
        raise ItemValidationFailed(f"Record {record_id} disappeared before update")
    repo.patch(obj, plan.changes(), flush=False, include_none=True)
    if plan.series_ids is not None:
        _attach_series(session, obj, plan.series_ids)
    session.flush()
    return obj


# -----------------------------
# Reconcile
# -----------------------------


def _reconcile_item(
    session: Session,
    binding: EntityBinding,
    plan: ItemPlan,
    state: BatchState,
    *,
    policy: ConflictResolution,
    dry_run: bool,
    acting_user_id: str | None,
) -> ImportItemResult:
    conflict = plan.conflict

    if conflict is not None and policy is ConflictResolution.SKIP:
        return ImportItemResult(
            plan.index,
            plan.identifier,
            ItemOutcome.SKIPPED,
            record_id=conflict.existing_id,
            slug=conflict.existing_slug,
        )

    if conflict is not None and policy is ConflictResolution.UPDATE:
        check_scope_move(
            session, binding, plan, state, conflict.existing_id, conflict.existing_slug
        )
        if not dry_run:
            with session.begin_nested():
                _update_record(session, binding, plan, conflict.existing_id)
            logger.info("Updated %s %s", binding.entity_type, conflict.existing_id)
        if binding.slug_scope is not None and conflict.existing_slug is not None:
            state.claim(conflict.existing_id, conflict.existing_slug, plan.scope)
        return ImportItemResult(
            plan.index,
            plan.identifier,
            ItemOutcome.UPDATED,
            record_id=conflict.existing_id,
            slug=conflict.existing_slug,
        )

    if conflict is not None:
        # create_new: fresh id, suffixed natural key
        record_id = new_id()
        slug = unique_slug(
            session,
            binding,
            plan.slug,
            plan.scope,
            state,
            suffix=settings.import_slug_suffix,
        )
    else:
        record_id = plan.item_id or new_id()
        slug = plan.slug

    if not dry_run:
        with session.begin_nested():
            _create_record(
                session,
                binding,
                plan,
                record_id=record_id,
                slug=slug,
                acting_user_id=acting_user_id,
            )
        logger.info("Imported %s %s (%s)", binding.entity_type, slug, record_id)
    state.claim(record_id, slug, plan.scope)

    reported_id = record_id if (not dry_run or record_id == plan.item_id) else None
    return ImportItemResult(
        plan.index, plan.identifier, ItemOutcome.CREATED, record_id=reported_id, slug=slug
    )


def reconcile_import(
    session: Session,
    batch: ImportBatch,
    entity_type: EntityType | str | None = None,
    *,
    conflict_resolution: ConflictResolution | str = ConflictResolution.SKIP,
    dry_run: bool = False,
    acting_user_id: str | None = None,
) -> ImportExecutionResult:
    """Apply (or simulate) every item of *batch* independently.

    Each written item is its own SAVEPOINT; a failing item is recorded and
    the batch carries on. A dry run plans exactly like a real run, tracking
    would-be records in memory, and writes nothing.
    """

    entity_type = _target_entity(batch, entity_type)
    policy = ConflictResolution(conflict_resolution)
    binding = binding_for(entity_type)
    state = BatchState()

    for warning in _batch_warnings(batch):
        logger.warning("import %s: %s", entity_type, warning)

    summary = ImportSummary()
    per_item: list[ImportItemResult] = []

    for index, raw in enumerate(batch.items):
        try:
            plan = plan_item(session, binding, index, raw, state)
            _log_mismatch(entity_type, plan)
            result = _reconcile_item(
                session,
                binding,
                plan,
                state,
                policy=policy,
                dry_run=dry_run,
                acting_user_id=acting_user_id,
            )
        except BulkOpsError as exc:
            logger.error("Import error for %s item %d: %s", entity_type, index, exc)
            result = ImportItemResult(
                index, describe_item(index, raw), ItemOutcome.FAILED, error=str(exc)
            )
        except SQLAlchemyError as exc:
            logger.exception("Import error for %s item %d", entity_type, index)
            result = ImportItemResult(
                index, describe_item(index, raw), ItemOutcome.FAILED, error=str(exc)
            )

        summary.count(result.outcome)
        per_item.append(result)

    logger.info(
        "import %s%s: %d created, %d updated, %d skipped, %d failed",
        entity_type,
        " (dry run)" if dry_run else "",
        summary.created,
        summary.updated,
        summary.skipped,
        summary.errors,
    )
    return ImportExecutionResult(
        success=summary.errors == 0,
        dry_run=dry_run,
        entity_type=entity_type,
        summary=summary,
        per_item=per_item,
    )
