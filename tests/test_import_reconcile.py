from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from content_ops.bulk.errors import ImportBatchMismatch
from content_ops.db.models import Competition, Edition, Event
from content_ops.imports.batch import ConflictResolution, ImportBatch, ItemOutcome
from content_ops.imports.reconcile import reconcile_import

if TYPE_CHECKING:
    from conftest import ContentFactory


def _event_batch(items: list[Any]) -> ImportBatch:
    return ImportBatch.model_validate(
        {"entity": "events", "version": "1.0.0", "count": len(items), "data": items}
    )


def _new_items(n: int) -> list[dict[str, Any]]:
    return [{"slug": f"new-trail-{i}", "name": f"New Trail {i}", "country": "ES"} for i in range(n)]


def _snapshot(session: Session) -> list[tuple[str, str, str]]:
    session.expire_all()
    rows = session.execute(select(Event.id, Event.slug, Event.name).order_by(Event.slug)).all()
    return [tuple(r) for r in rows]


def _summary(result: Any) -> tuple[int, int, int, int]:
    s = result.summary
    return (s.created, s.updated, s.skipped, s.errors)


@pytest.fixture()
def colliding(content: ContentFactory) -> tuple[Event, ImportBatch]:
    existing = content.event("Existing Trail")
    items = [{"id": existing.id, "slug": existing.slug, "name": "Renamed Trail"}, *_new_items(9)]
    return existing, _event_batch(items)


def test_skip_policy(session: Session, colliding: tuple[Event, ImportBatch]) -> None:
    existing, batch = colliding

    result = reconcile_import(session, batch, "event", conflict_resolution="skip")

    assert _summary(result) == (9, 0, 1, 0)
    assert result.summary.processed == 10
    assert result.success
    assert result.per_item[0].outcome is ItemOutcome.SKIPPED
    session.refresh(existing)
    assert existing.name == "Existing Trail"


def test_update_policy(session: Session, colliding: tuple[Event, ImportBatch]) -> None:
    existing, batch = colliding

    result = reconcile_import(session, batch, "event", conflict_resolution=ConflictResolution.UPDATE)

    assert _summary(result) == (9, 1, 0, 0)
    session.refresh(existing)
    assert existing.name == "Renamed Trail"
    assert existing.slug == "existing-trail"


def test_create_new_policy(session: Session, colliding: tuple[Event, ImportBatch]) -> None:
    existing, batch = colliding

    result = reconcile_import(session, batch, "event", conflict_resolution="create_new")

    assert _summary(result) == (10, 0, 0, 0)
    copy = result.per_item[0]
    assert copy.outcome is ItemOutcome.CREATED
    assert copy.record_id != existing.id
    assert copy.slug == "existing-trail-imported"
    assert session.execute(select(func.count()).select_from(Event)).scalar_one() == 11


def test_create_new_keeps_suffixing(session: Session, content: ContentFactory) -> None:
    content.event("Existing Trail")
    content.event("Existing Trail imported")  # slug existing-trail-imported

    batch = _event_batch([{"slug": "existing-trail", "name": "Existing Trail"}])
    result = reconcile_import(session, batch, "event", conflict_resolution="create_new")

    assert result.per_item[0].slug == "existing-trail-imported-1"


@pytest.mark.parametrize("bad_index", [0, 4, 9])
def test_one_invalid_item_is_isolated(session: Session, bad_index: int) -> None:
    items: list[Any] = _new_items(9)
    items.insert(bad_index, {"name": "No identifier at all"})

    result = reconcile_import(session, _event_batch(items), "event")

    assert _summary(result) == (9, 0, 0, 1)
    assert not result.success
    failed = result.per_item[bad_index]
    assert failed.outcome is ItemOutcome.FAILED
    assert "id or a slug" in (failed.error or "")
    assert len(_snapshot(session)) == 9


def test_non_object_and_bad_values_are_item_errors(session: Session) -> None:
    items: list[Any] = [
        "not an object",
        {"slug": "bad-month", "name": "Bad month", "typical_month": "June"},
        {"slug": "bad-status", "name": "Bad status", "status": "LIVE"},
        {"slug": "ok", "name": "Fine"},
    ]

    result = reconcile_import(session, _event_batch(items), "event")

    assert _summary(result) == (1, 0, 0, 3)


@pytest.mark.parametrize("policy", list(ConflictResolution))
def test_dry_run_matches_real_run(
    session: Session, colliding: tuple[Event, ImportBatch], policy: ConflictResolution
) -> None:
    _, batch = colliding
    # in-batch duplicate and an invalid item exercise the simulated claims
    batch = _event_batch([*batch.items, {"slug": "new-trail-3", "name": "Dup"}, {"name": "x"}])
    before = _snapshot(session)

    dry = reconcile_import(session, batch, "event", conflict_resolution=policy, dry_run=True)
    assert dry.dry_run
    assert _snapshot(session) == before

    real = reconcile_import(session, batch, "event", conflict_resolution=policy)
    assert _summary(dry) == _summary(real)
    assert [r.outcome for r in dry.per_item] == [r.outcome for r in real.per_item]


def test_id_matches_one_record_and_slug_another(session: Session, content: ContentFactory) -> None:
    first = content.event("First")
    content.event("Second")

    batch = _event_batch([{"id": first.id, "slug": "second", "name": "First renamed"}])
    result = reconcile_import(session, batch, "event", conflict_resolution="update")

    assert _summary(result) == (0, 1, 0, 0)
    session.refresh(first)
    assert first.name == "First renamed"
    assert first.slug == "first"


def test_acting_user_is_stamped_on_created_records(session: Session) -> None:
    batch = _event_batch(_new_items(1))

    reconcile_import(session, batch, "event", acting_user_id="user-42")

    event = session.execute(select(Event)).scalar_one()
    assert event.created_by_id == "user-42"


def test_batch_entity_must_match(session: Session) -> None:
    batch = ImportBatch.model_validate({"entity": "competitions", "data": []})
    with pytest.raises(ImportBatchMismatch):
        reconcile_import(session, batch, "event")


def test_batch_entity_is_used_when_none_requested(session: Session) -> None:
    result = reconcile_import(session, _event_batch(_new_items(2)))
    assert result.entity_type == "event"
    assert result.summary.created == 2


def test_competitions_need_their_event(session: Session, content: ContentFactory) -> None:
    event = content.event("Zegama")
    gts = content.series("Golden Trail Series")

    items = [
        {
            "slug": "zegama-marathon",
            "name": "Zegama Marathon",
            "eventId": event.id,
            "baseDistance": 42.2,
            "specialSeries": [{"slug": gts.slug}, {"slug": "unknown-series"}],
            "terrainTypeId": "missing-terrain",
        },
        {"slug": "orphan", "name": "Orphan", "event": {"slug": "no-such-event"}},
        {"slug": "by-slug", "name": "By slug", "event": {"slug": "zegama"}},
        {"slug": "no-parent", "name": "No parent"},
    ]
    batch = ImportBatch.model_validate({"entity": "competitions", "data": items})

    result = reconcile_import(session, batch, "competition", acting_user_id="u1")

    assert _summary(result) == (2, 0, 0, 2)
    assert "not found" in (result.per_item[1].error or "")
    assert "Missing parent" in (result.per_item[3].error or "")

    comp = session.execute(
        select(Competition).where(Competition.slug == "zegama-marathon")
    ).scalar_one()
    assert comp.base_distance == 42.2
    assert comp.terrain_type_id is None
    assert [s.id for s in comp.special_series] == [gts.id]
    assert comp.created_by_id == "u1"


def test_edition_slug_is_scoped_to_its_competition(
    session: Session, content: ContentFactory
) -> None:
    first = content.competition("First race")
    second = content.competition("Second race")
    content.edition(first, 2025)

    batch = ImportBatch.model_validate(
        {
            "entity": "editions",
            "data": [
                {"slug": "2025", "year": 2025, "competitionId": second.id},
                {"slug": "2025", "year": 2025, "competitionId": first.id},
            ],
        }
    )
    result = reconcile_import(session, batch, "edition")

    assert [r.outcome for r in result.per_item] == [ItemOutcome.CREATED, ItemOutcome.SKIPPED]
    count = session.execute(select(func.count()).select_from(Edition)).scalar_one()
    assert count == 2


@pytest.mark.parametrize("dry_run", [True, False])
def test_out_of_range_number_fails_only_its_item(session: Session, dry_run: bool) -> None:
    items: list[Any] = _new_items(9)
    items.insert(3, {"slug": "big", "name": "Big", "typicalMonth": 10**20})

    result = reconcile_import(session, _event_batch(items), "event", dry_run=dry_run)

    assert _summary(result) == (9, 0, 0, 1)
    assert result.per_item[3].outcome is ItemOutcome.FAILED
    assert "out of range" in (result.per_item[3].error or "")


def test_update_cannot_move_edition_onto_a_taken_slug(
    session: Session, content: ContentFactory
) -> None:
    first = content.competition("First race")
    second = content.competition("Second race")
    moved = content.edition(first, 2024)
    content.edition(second, 2024)

    batch = ImportBatch.model_validate(
        {
            "entity": "editions",
            "data": [
                {"id": moved.id, "slug": "2024", "year": 2024, "competitionId": second.id},
                {"slug": "2025", "year": 2025, "competitionId": second.id},
            ],
        }
    )

    dry = reconcile_import(session, batch, conflict_resolution="update", dry_run=True)
    real = reconcile_import(session, batch, conflict_resolution="update")

    assert _summary(dry) == _summary(real) == (1, 0, 0, 1)
    assert "already used" in (real.per_item[0].error or "")
    session.refresh(moved)
    assert moved.competition_id == first.id


def test_update_may_move_edition_to_a_free_slug(session: Session, content: ContentFactory) -> None:
    first = content.competition("First race")
    second = content.competition("Second race")
    moved = content.edition(first, 2024)

    batch = ImportBatch.model_validate(
        {
            "entity": "editions",
            "data": [{"id": moved.id, "slug": "2024", "year": 2024, "competitionId": second.id}],
        }
    )
    result = reconcile_import(session, batch, conflict_resolution="update")

    assert _summary(result) == (0, 1, 0, 0)
    session.refresh(moved)
    assert moved.competition_id == second.id
