from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from content_ops.bulk.errors import InvalidFilterField, TypeMismatch, UnknownEntityType
from content_ops.bulk.filters import (
    FilterCondition,
    FilterExpression,
    FilterLogic,
    FilterOperator,
    compile_filter,
)
from content_ops.bulk.metadata import EntityType
from content_ops.db.models import Competition, Edition, Event

if TYPE_CHECKING:
    from conftest import ContentFactory


def _expr(*conds: tuple[str, str, Any], logic: str = "AND") -> FilterExpression:
    return FilterExpression(
        conditions=[FilterCondition(field=f, operator=FilterOperator(op), value=v) for f, op, v in conds],
        logic=FilterLogic(logic),
    )


def _names(session: Session, model: type, expression: FilterExpression, entity: str) -> set[str]:
    stmt = select(model.name).where(compile_filter(entity, expression))
    return set(session.execute(stmt).scalars().all())


@pytest.mark.parametrize("entity_type", list(EntityType))
def test_unknown_field_is_rejected_for_every_entity(entity_type: EntityType) -> None:
    with pytest.raises(InvalidFilterField):
        compile_filter(entity_type, _expr(("password_hash", "equals", "x")))


def test_unknown_entity_type_is_rejected() -> None:
    with pytest.raises(UnknownEntityType):
        compile_filter("users", FilterExpression())


def test_empty_expression_matches_everything(session: Session, content: ContentFactory) -> None:
    content.event("Alpha")
    content.event("Beta")
    assert str(compile_filter("event", FilterExpression())) == "true"
    assert _names(session, Event, FilterExpression(), "event") == {"Alpha", "Beta"}


@pytest.mark.parametrize(
    ("entity", "cond"),
    [
        ("event", ("name", "greater_than", "m")),
        ("competition", ("status", "contains", "PUB")),
        ("competition", ("featured", "starts_with", "t")),
        ("competition", ("status", "equals", "ARCHIVED")),
        ("competition", ("base_distance", "equals", True)),
        ("competition", ("featured", "equals", "yes")),
        ("competition", ("special_series", "contains", "x")),
        ("competition", ("special_series", "greater_than", "x")),
        ("edition", ("start_date", "less_than", "not-a-date")),
    ],
)
def test_operator_and_value_must_fit_the_field(entity: str, cond: tuple[str, str, Any]) -> None:
    with pytest.raises(TypeMismatch):
        compile_filter(entity, _expr(cond))


def test_string_comparisons_are_case_insensitive(session: Session, content: ContentFactory) -> None:
    content.event("Ultra Pirineu")
    content.event("Transgrancanaria")
    content.event("Zegama")

    assert _names(session, Event, _expr(("name", "equals", "ZEGAMA")), "event") == {"Zegama"}
    assert _names(session, Event, _expr(("name", "contains", "pirin")), "event") == {
        "Ultra Pirineu"
    }
    assert _names(session, Event, _expr(("name", "starts_with", "trans")), "event") == {
        "Transgrancanaria"
    }
    assert _names(session, Event, _expr(("name", "ends_with", "GAMA")), "event") == {"Zegama"}
    assert _names(session, Event, _expr(("name", "not_equals", "zegama")), "event") == {
        "Ultra Pirineu",
        "Transgrancanaria",
    }


def test_like_wildcards_are_literal(session: Session, content: ContentFactory) -> None:
    content.event("100% Trail")
    content.event("1000 Trail")

    assert _names(session, Event, _expr(("name", "contains", "100%")), "event") == {"100% Trail"}


def test_in_accepts_a_scalar(session: Session, content: ContentFactory) -> None:
    content.event("Alpha", country="ES")
    content.event("Beta", country="FR")
    content.event("Gamma", country="IT")

    assert _names(session, Event, _expr(("country", "in", ["es", "IT"])), "event") == {
        "Alpha",
        "Gamma",
    }
    assert _names(session, Event, _expr(("country", "in", "fr")), "event") == {"Beta"}


def test_null_checks_ignore_value(session: Session, content: ContentFactory) -> None:
    content.event("With city", city="Chamonix")
    content.event("Without city")

    assert _names(session, Event, _expr(("city", "is_null", "ignored")), "event") == {
        "Without city"
    }
    assert _names(session, Event, _expr(("city", "is_not_null", None)), "event") == {"With city"}


def test_numeric_and_date_ranges(session: Session, content: ContentFactory) -> None:
    short = content.competition("Short", base_distance=21.0)
    content.competition("Long", base_distance=100.0)
    content.edition(short, 2023)
    content.edition(short, 2025)

    assert _names(
        session, Competition, _expr(("base_distance", "greater_than", 50)), "competition"
    ) == {"Long"}

    stmt = select(Edition.year).where(
        compile_filter("edition", _expr(("start_date", "greater_than", "2024-01-01")))
    )
    assert session.execute(stmt).scalars().all() == [2025]


def test_enum_values_compare_exactly(session: Session, content: ContentFactory) -> None:
    content.competition("Draft race", status="DRAFT")
    content.competition("Live race", status="PUBLISHED")

    assert _names(session, Competition, _expr(("status", "equals", "DRAFT")), "competition") == {
        "Draft race"
    }


def test_logic_or_combines_conditions(session: Session, content: ContentFactory) -> None:
    content.event("Alpha", featured=True)
    content.event("Beta", city="Madrid")
    content.event("Gamma")

    expr = _expr(("featured", "equals", True), ("city", "equals", "madrid"), logic="OR")
    assert _names(session, Event, expr, "event") == {"Alpha", "Beta"}

    expr = _expr(("featured", "equals", True), ("city", "equals", "madrid"))
    assert _names(session, Event, expr, "event") == set()


def test_many_relation_semantics(session: Session, content: ContentFactory) -> None:
    gts = content.series("Golden Trail Series")
    utmb = content.series("UTMB World Series")
    content.competition("Both", series=[gts, utmb])
    content.competition("Only GTS", series=[gts])
    content.competition("None")

    def names(op: str, value: Any) -> set[str]:
        return _names(session, Competition, _expr(("special_series", op, value)), "competition")

    assert names("equals", gts.id) == {"Both", "Only GTS"}
    assert names("in", [utmb.id]) == {"Both"}
    assert names("in", utmb.id) == {"Both"}
    assert names("not_equals", utmb.id) == {"Only GTS", "None"}
    assert names("is_null", None) == {"None"}
    assert names("is_not_null", None) == {"Both", "Only GTS"}


def test_range_bounds_may_be_fractional_on_integer_columns(
    session: Session, content: ContentFactory
) -> None:
    content.competition("Two points", itra_points=2)
    content.competition("Three points", itra_points=3)

    expr = _expr(("itra_points", "greater_than", 2.5))
    assert _names(session, Competition, expr, "competition") == {"Three points"}

    with pytest.raises(TypeMismatch):
        compile_filter("competition", _expr(("itra_points", "equals", 2.5)))


def test_integer_values_must_fit_the_column() -> None:
    with pytest.raises(TypeMismatch):
        compile_filter("competition", _expr(("itra_points", "equals", 10**20)))
    with pytest.raises(TypeMismatch):
        compile_filter("competition", _expr(("base_elevation", "in", [1, 2**31])))


def test_in_ignores_null_entries_for_every_field_kind(
    session: Session, content: ContentFactory
) -> None:
    gts = content.series("Golden Trail Series")
    content.competition("Linked", series=[gts], race_type="SKYRUNNING")
    content.competition("Unlinked")

    def names(field: str, value: Any) -> set[str]:
        return _names(session, Competition, _expr((field, "in", value)), "competition")

    assert names("special_series", [gts.id, None]) == {"Linked"}
    assert names("special_series", [None]) == set()
    assert names("race_type", ["SKYRUNNING", None]) == {"Linked"}
    assert names("race_type", [None]) == set()
