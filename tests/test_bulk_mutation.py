from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from content_ops.bulk import mutation
from content_ops.bulk.errors import EmptyFilterRejected, NonEditableField, TypeMismatch
from content_ops.bulk.filters import (
    BulkMutationOperation,
    FilterCondition,
    FilterExpression,
    FilterOperator,
)
from content_ops.bulk.metadata import EntityType
from content_ops.bulk.mutation import (
    disconnect_relation,
    execute_bulk_mutation,
    preview_bulk_mutation,
)
from content_ops.bulk.query import query_records
from content_ops.db.models import Competition

if TYPE_CHECKING:
    from conftest import ContentFactory


def _where(field: str, op: str, value: Any = None) -> FilterExpression:
    return FilterExpression(
        conditions=[FilterCondition(field=field, operator=FilterOperator(op), value=value)]
    )


def _series_ids(session: Session) -> dict[str, list[str]]:
    session.expire_all()
    comps = session.execute(select(Competition)).scalars().all()
    return {c.name: sorted(s.id for s in c.special_series) for c in comps}


def test_featured_competitions_end_to_end(session: Session, content: ContentFactory) -> None:
    content.competition("Already featured", featured=True)
    for i in range(4):
        content.competition(f"Plain {i}")

    not_featured = _where("featured", "equals", False)
    result = execute_bulk_mutation(
        session, "competition", not_featured, BulkMutationOperation(field="featured", value=True)
    )

    assert result.success
    assert result.updated_count == 4
    assert result.errors == []
    assert query_records(session, "competition", not_featured) == []


def test_preview_matches_execute(session: Session, content: ContentFactory) -> None:
    for i in range(3):
        content.event(f"Spanish {i}", country="ES")
    content.event("French", country="FR")

    expr = _where("country", "equals", "es")
    op = BulkMutationOperation(field="status", value="DRAFT")

    preview = preview_bulk_mutation(session, "event", expr, op)
    assert preview.matching_count == 3
    assert len(preview.matching_records) == 3
    assert {r.current_value for r in preview.matching_records} == {"PUBLISHED"}
    assert {r.new_value for r in preview.matching_records} == {"DRAFT"}

    result = execute_bulk_mutation(session, "event", expr, op)
    assert result.updated_count == 3
    assert set(result.updated_ids) == {r.id for r in preview.matching_records}

    statuses = {r["name"]: r["status"] for r in query_records(session, "event")}
    assert statuses == {
        "French": "PUBLISHED",
        "Spanish 0": "DRAFT",
        "Spanish 1": "DRAFT",
        "Spanish 2": "DRAFT",
    }


def test_preview_is_bounded_but_counts_everything(session: Session, content: ContentFactory) -> None:
    for i in range(5):
        content.organizer(f"Org {i}")

    preview = preview_bulk_mutation(
        session,
        "organizer",
        FilterExpression(),
        BulkMutationOperation(field="country", value="ES"),
        limit=2,
    )
    assert preview.matching_count == 5
    assert [r.display_name for r in preview.matching_records] == ["Org 0", "Org 1"]


@pytest.mark.parametrize("entity_type", list(EntityType))
def test_execute_rejects_empty_filter_before_touching_storage(entity_type: EntityType) -> None:
    op = BulkMutationOperation(field="status", value="DRAFT")
    # No session at all: the guard must fire first.
    with pytest.raises(EmptyFilterRejected):
        execute_bulk_mutation(None, entity_type, FilterExpression(), op)  # type: ignore[arg-type]
    with pytest.raises(EmptyFilterRejected):
        execute_bulk_mutation(None, entity_type, None, op)  # type: ignore[arg-type]


def test_execute_validates_field_and_value_before_storage() -> None:
    expr = _where("name", "contains", "x")
    with pytest.raises(NonEditableField):
        execute_bulk_mutation(
            None, "competition", expr, BulkMutationOperation(field="event_id", value="e1")  # type: ignore[arg-type]
        )
    with pytest.raises(NonEditableField):
        execute_bulk_mutation(
            None, "competition", expr, BulkMutationOperation(field="created_by_id", value="u1")  # type: ignore[arg-type]
        )
    with pytest.raises(TypeMismatch):
        execute_bulk_mutation(
            None, "competition", expr, BulkMutationOperation(field="featured", value="yes")  # type: ignore[arg-type]
        )
    with pytest.raises(TypeMismatch):
        execute_bulk_mutation(
            None, "competition", expr, BulkMutationOperation(field="name", value=None)  # type: ignore[arg-type]
        )


def test_attach_many_relation(session: Session, content: ContentFactory) -> None:
    gts = content.series("Golden Trail Series")
    content.competition("Sky A", race_type="SKYRUNNING")
    content.competition("Sky B", race_type="SKYRUNNING")
    content.competition("Trail C")

    result = execute_bulk_mutation(
        session,
        "competition",
        _where("race_type", "equals", "SKYRUNNING"),
        BulkMutationOperation(field="special_series", value=gts.id),
    )

    assert result.success
    assert result.updated_count == 2
    assert _series_ids(session) == {"Sky A": [gts.id], "Sky B": [gts.id], "Trail C": []}


def test_attach_is_all_or_nothing(
    session: Session, content: ContentFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    gts = content.series("Golden Trail Series")
    for i in range(4):
        content.competition(f"Race {i}")

    calls = {"n": 0}
    real_connect = mutation._connect_related

    def flaky_connect(obj: Any, field_name: str, related: Any) -> None:
        calls["n"] += 1
        if calls["n"] == 4:
            raise RuntimeError("storage went away")
        real_connect(obj, field_name, related)

    monkeypatch.setattr(mutation, "_connect_related", flaky_connect)

    result = execute_bulk_mutation(
        session,
        "competition",
        _where("name", "starts_with", "race"),
        BulkMutationOperation(field="special_series", value=gts.id),
    )

    assert not result.success
    assert result.updated_count == 0
    assert result.updated_ids == []
    assert "storage went away" in result.errors[0]
    assert calls["n"] == 4
    assert all(ids == [] for ids in _series_ids(session).values())


def test_attach_missing_related_record_fails_cleanly(
    session: Session, content: ContentFactory
) -> None:
    content.competition("Race")

    result = execute_bulk_mutation(
        session,
        "competition",
        _where("name", "equals", "race"),
        BulkMutationOperation(field="special_series", value="does-not-exist"),
    )

    assert not result.success
    assert result.updated_count == 0
    assert "does-not-exist" in result.errors[0]


def test_disconnect_relation(session: Session, content: ContentFactory) -> None:
    gts = content.series("Golden Trail Series")
    utmb = content.series("UTMB World Series")
    content.competition("Both", series=[gts, utmb])
    content.competition("Only GTS", series=[gts])

    result = disconnect_relation(
        session, "competition", _where("special_series", "equals", gts.id), gts.id
    )

    assert result.success
    assert result.updated_count == 2
    assert _series_ids(session) == {"Both": [utmb.id], "Only GTS": []}


def test_disconnect_guards(session: Session) -> None:
    with pytest.raises(EmptyFilterRejected):
        disconnect_relation(session, "competition", FilterExpression(), "s1")
    with pytest.raises(NonEditableField):
        disconnect_relation(session, "event", _where("name", "equals", "x"), "o1")
    with pytest.raises(TypeMismatch):
        disconnect_relation(
            session, "competition", _where("name", "equals", "x"), "t1", field="terrain_type_id"
        )


def test_preview_of_many_relation_adds_the_new_id(session: Session, content: ContentFactory) -> None:
    gts = content.series("Golden Trail Series")
    utmb = content.series("UTMB World Series")
    content.competition("Linked", series=[utmb])
    content.competition("Unlinked")

    preview = preview_bulk_mutation(
        session,
        "competition",
        FilterExpression(),
        BulkMutationOperation(field="special_series", value=gts.id),
    )

    by_name = {r.display_name: r for r in preview.matching_records}
    assert by_name["Linked"].current_value == [utmb.id]
    assert by_name["Linked"].new_value == sorted([utmb.id, gts.id])
    assert by_name["Unlinked"].current_value == []
    assert by_name["Unlinked"].new_value == [gts.id]


def test_single_valued_relation_target_must_exist(
    session: Session, content: ContentFactory
) -> None:
    mountain = content.terrain_type("Mountain")
    comp = content.competition("Race")

    result = execute_bulk_mutation(
        session,
        "competition",
        _where("name", "equals", "race"),
        BulkMutationOperation(field="terrain_type_id", value="nope"),
    )
    assert not result.success
    assert result.updated_count == 0
    assert "nope" in result.errors[0]
    session.refresh(comp)
    assert comp.terrain_type_id is None

    result = execute_bulk_mutation(
        session,
        "competition",
        _where("name", "equals", "race"),
        BulkMutationOperation(field="terrain_type_id", value=mountain.id),
    )
    assert result.success
    session.refresh(comp)
    assert comp.terrain_type_id == mountain.id
