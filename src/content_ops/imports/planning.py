"""Turn one raw import item into a checked write plan.

Planning never writes. It normalizes keys, validates values against the
registry, resolves parent references and detects collisions with stored
records and with records claimed earlier in the same batch.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from content_ops.bulk.bindings import EntityBinding, relation_repository
from content_ops.bulk.errors import (
    ItemValidationFailed,
    ReferencedEntityMissing,
    TypeMismatch,
)
from content_ops.bulk.filters import column_python_type
from content_ops.bulk.metadata import EntityType
from content_ops.bulk.values import coerce_value
from content_ops.core.text import camel_to_snake, slugify
from content_ops.db.models import SpecialSeries
from content_ops.imports.batch import ConflictType, ImportConflict
from content_ops.imports.shapes import (
    IMPORTABLE_FIELDS,
    REFERENCES,
    SERIES_KEY,
    ReferenceSpec,
    importable_field,
)


@dataclass(frozen=True)
class ExistingRecord:
    id: str
    slug: str | None


@dataclass
class BatchState:
    """Records created earlier in the batch, stored or simulated."""

    claimed_ids: dict[str, tuple[str, str | None]] = field(default_factory=dict)
    claimed_slugs: dict[tuple[str | None, str], str] = field(default_factory=dict)

    def claim(self, record_id: str, slug: str, scope: str | None) -> None:
        self.claimed_ids[record_id] = (slug, scope)
        self.claimed_slugs[(scope, slug)] = record_id

    def by_id(self, record_id: str) -> ExistingRecord | None:
        if record_id in self.claimed_ids:
            return ExistingRecord(record_id, self.claimed_ids[record_id][0])
        return None

    def scope_of(self, record_id: str) -> str | None:
        return self.claimed_ids[record_id][1] if record_id in self.claimed_ids else None

    def by_slug(self, slug: str, scope: str | None) -> ExistingRecord | None:
        record_id = self.claimed_slugs.get((scope, slug))
        if record_id is None:
            return None
        return ExistingRecord(record_id, slug)


@dataclass
class ItemPlan:
    index: int
    identifier: str
    item_id: str | None
    slug: str
    values: dict[str, Any]
    references: dict[str, str | None]
    series_ids: list[str] | None
    scope: str | None
    conflict: ImportConflict | None = None
    warnings: list[str] = field(default_factory=list)

    def changes(self) -> dict[str, Any]:
        return {**self.values, **self.references}


def normalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, Mapping):
            value = normalize_keys(value)
        out[camel_to_snake(str(key))] = value
    return out


def describe_item(index: int, raw: Any) -> str:
    if isinstance(raw, Mapping):
        for key in ("slug", "id", "name", "title"):
            value = raw.get(key)
            if value:
                return str(value)
    return f"#{index}"


def _non_empty_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


# -----------------------------
# Values and references
# -----------------------------


def _coerce_values(binding: EntityBinding, item: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name in IMPORTABLE_FIELDS[binding.entity_type]:
        if name not in item:
            continue
        meta = importable_field(binding, name)
        try:
            value = coerce_value(meta, item[name], python_type=column_python_type(binding, name))
        except TypeMismatch as exc:
            raise ItemValidationFailed(str(exc)) from exc
        if value is None and not binding.column(name).property.columns[0].nullable:
            continue
        values[name] = value
    return values


def _reference_lookup(spec: ReferenceSpec, item: Mapping[str, Any]) -> tuple[str | None, str | None]:
    ref_id = _non_empty_str(item.get(spec.column))
    ref_slug = None
    nested = item.get(spec.key)
    if isinstance(nested, Mapping):
        ref_id = ref_id or _non_empty_str(nested.get("id"))
        ref_slug = _non_empty_str(nested.get("slug"))
    return ref_id, ref_slug


def _resolve_reference(
    session: Session,
    spec: ReferenceSpec,
    ref_id: str | None,
    ref_slug: str | None,
) -> str | None:
    repo = relation_repository(session, spec.target)
    if ref_id is not None:
        found = repo.get(ref_id)
        if found is not None:
            return found.id
    if ref_slug is not None:
        found = repo.first_where(repo.model.slug == ref_slug)
        if found is not None:
            return found.id
    return None


def _resolve_references(
    session: Session,
    binding: EntityBinding,
    item: Mapping[str, Any],
    warnings: list[str],
) -> dict[str, str | None]:
    resolved: dict[str, str | None] = {}
    for spec in REFERENCES.get(binding.entity_type, ()):
        ref_id, ref_slug = _reference_lookup(spec, item)

        if ref_id is None and ref_slug is None:
            if spec.required:
                raise ItemValidationFailed(
                    f"Missing parent {spec.target} ({spec.column} or {spec.key} object)"
                )
            if spec.column in item and item[spec.column] is None:
                resolved[spec.column] = None
            continue

        target_id = _resolve_reference(session, spec, ref_id, ref_slug)
        if target_id is not None:
            resolved[spec.column] = target_id
        elif spec.required:
            raise ReferencedEntityMissing(
                f"Parent {spec.target} ({ref_id or ref_slug}) not found. Import it first."
            )
        else:
            warnings.append(f"{spec.target} ({ref_id or ref_slug}) not found; link dropped")
    return resolved


def _find_series(session: Session, ref: Any) -> SpecialSeries | None:
    repo = relation_repository(session, "series")
    if isinstance(ref, str) and ref.strip():
        text = ref.strip()
        return repo.first_where(
            or_(
                SpecialSeries.id == text,
                SpecialSeries.slug == text,
                SpecialSeries.slug == slugify(text),
                func.lower(SpecialSeries.name) == text.lower(),
            )
        )
    if isinstance(ref, Mapping):
        conditions = []
        if _non_empty_str(ref.get("id")):
            conditions.append(SpecialSeries.id == ref["id"])
        if _non_empty_str(ref.get("slug")):
            conditions.append(SpecialSeries.slug == ref["slug"])
        if _non_empty_str(ref.get("name")):
            conditions.append(SpecialSeries.name == ref["name"])
        if conditions:
            return repo.first_where(or_(*conditions))
    return None


def _resolve_series(
    session: Session,
    item: Mapping[str, Any],
    warnings: list[str],
) -> list[str] | None:
    refs = item.get(SERIES_KEY)
    if refs is None:
        return None
    if not isinstance(refs, list):
        raise ItemValidationFailed(f"{SERIES_KEY} must be a list")

    ids: list[str] = []
    for ref in refs:
        found = _find_series(session, ref)
        if found is None:
            name = ref if isinstance(ref, str) else describe_item(0, ref)
            warnings.append(f"special series {name!r} not found; link dropped")
        elif found.id not in ids:
            ids.append(found.id)
    return ids


# -----------------------------
# Conflicts
# -----------------------------


def _stored(obj: Any) -> ExistingRecord | None:
    if obj is None:
        return None
    return ExistingRecord(obj.id, obj.slug)


def _scope_predicates(binding: EntityBinding, scope: str | None) -> list[Any]:
    if binding.slug_scope is None:
        return []
    return [binding.column(binding.slug_scope) == scope]


def detect_conflict(
    session: Session,
    binding: EntityBinding,
    plan: ItemPlan,
    state: BatchState,
) -> ImportConflict | None:
    repo = binding.repository(session)

    by_id = None
    if plan.item_id is not None:
        by_id = _stored(repo.get(plan.item_id)) or state.by_id(plan.item_id)

    scope_preds = _scope_predicates(binding, plan.scope)
    by_slug = _stored(
        repo.first_where(binding.column("slug") == plan.slug, *scope_preds)
    ) or state.by_slug(plan.slug, plan.scope)

    if by_id is not None and by_slug is not None:
        kind = ConflictType.BOTH_EXIST if by_id.id == by_slug.id else ConflictType.ID_SLUG_MISMATCH
        existing = by_id
    elif by_id is not None:
        kind, existing = ConflictType.ID_EXISTS, by_id
    elif by_slug is not None:
        kind, existing = ConflictType.SLUG_EXISTS, by_slug
    else:
        return None

    return ImportConflict(
        index=plan.index,
        identifier=plan.identifier,
        conflict_type=kind,
        existing_id=existing.id,
        existing_slug=existing.slug,
    )


def check_scope_move(
    session: Session,
    binding: EntityBinding,
    plan: ItemPlan,
    state: BatchState,
    record_id: str,
    slug: str | None,
) -> None:
    """Refuse an update that moves a scoped record onto a slug its new parent already uses.

    The record keeps its slug, so it must be free under the item's parent,
    counting stored records and records claimed earlier in the batch.
    """

    scope_key = binding.slug_scope
    if scope_key is None or scope_key not in plan.references or slug is None:
        return

    repo = binding.repository(session)
    stored = repo.get(record_id)
    current = getattr(stored, scope_key) if stored is not None else state.scope_of(record_id)
    if current == plan.scope:
        return

    taken = repo.first_where(
        binding.column("slug") == slug,
        binding.model.id != record_id,
        *_scope_predicates(binding, plan.scope),
    )
    claimed = state.by_slug(slug, plan.scope)
    if taken is not None or (claimed is not None and claimed.id != record_id):
        raise ItemValidationFailed(
            f"Cannot move {record_id} to {scope_key} {plan.scope}: slug {slug!r} is already used there"
        )


def unique_slug(
    session: Session,
    binding: EntityBinding,
    base: str,
    scope: str | None,
    state: BatchState,
    *,
    suffix: str,
) -> str:
    """`<base>-<suffix>`, then `<base>-<suffix>-1`, `-2`, ... until free."""

    repo = binding.repository(session)
    scope_preds = _scope_predicates(binding, scope)
    candidate = f"{base}-{suffix}"
    counter = 1
    while (
        repo.first_where(binding.column("slug") == candidate, *scope_preds) is not None
        or state.by_slug(candidate, scope) is not None
    ):
        candidate = f"{base}-{suffix}-{counter}"
        counter += 1
    return candidate


# -----------------------------
# Entry point
# -----------------------------


def plan_item(
    session: Session,
    binding: EntityBinding,
    index: int,
    raw: Any,
    state: BatchState,
) -> ItemPlan:
    """Validate one item and classify it against storage and the batch so far.

    Raises `ItemValidationFailed` (or `ReferencedEntityMissing`) for items that
    cannot be written.
    """

    identifier = describe_item(index, raw)
    if not isinstance(raw, Mapping):
        raise ItemValidationFailed(f"Item {index} is not an object")

    item = normalize_keys(raw)
    item_id = _non_empty_str(item.get("id"))
    if item.get("id") is not None and item_id is None:
        raise ItemValidationFailed("id must be a non-empty string")

    label = item.get(binding.label_field)
    if label is None or (isinstance(label, str) and not label.strip()):
        raise ItemValidationFailed(f"Missing required field {binding.label_field!r}")

    slug = _non_empty_str(item.get("slug"))
    if item_id is None and slug is None:
        raise ItemValidationFailed("Item needs an id or a slug")

    warnings: list[str] = []
    values = _coerce_values(binding, item)
    references = _resolve_references(session, binding, item, warnings)
    series_ids = None
    if binding.entity_type is EntityType.COMPETITION:
        series_ids = _resolve_series(session, item, warnings)

    if slug is None:
        slug = slugify(str(label)) or item_id
    scope = references.get(binding.slug_scope) if binding.slug_scope else None

    plan = ItemPlan(
        index=index,
        identifier=identifier,
        item_id=item_id,
        slug=slug,
        values=values,
        references=references,
        series_ids=series_ids,
        scope=scope,
        warnings=warnings,
    )
    plan.conflict = detect_conflict(session, binding, plan, state)
    return plan
