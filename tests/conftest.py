from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from typing import Any

import pytest
from sqlalchemy import Engine
from sqlalchemy.orm import Session

import content_ops.db.models  # noqa: F401
from content_ops.core.text import slugify
from content_ops.db import Base, DatabaseConfig, create_db_engine, create_session_factory
from content_ops.db.models import (
    Competition,
    Edition,
    Event,
    Organizer,
    Post,
    Service,
    ServiceCategory,
    SpecialSeries,
    TerrainType,
)


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_db_engine(DatabaseConfig(database_url="sqlite+pysqlite:///:memory:"))
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine: Engine) -> Iterator[Session]:
    s = create_session_factory(engine)()
    try:
        yield s
    finally:
        s.close()


class ContentFactory:
    """Inserts minimal valid rows; every helper flushes so ids are usable."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def _add(self, obj: Any) -> Any:
        self.session.add(obj)
        self.session.flush()
        return obj

    def organizer(self, name: str | None = None, **kw: Any) -> Organizer:
        name = name or f"Organizer {self._next()}"
        kw.setdefault("slug", slugify(name))
        return self._add(Organizer(name=name, **kw))

    def series(self, name: str | None = None, **kw: Any) -> SpecialSeries:
        name = name or f"Series {self._next()}"
        kw.setdefault("slug", slugify(name))
        return self._add(SpecialSeries(name=name, **kw))

    def terrain_type(self, name: str, **kw: Any) -> TerrainType:
        kw.setdefault("slug", slugify(name))
        return self._add(TerrainType(name=name, **kw))

    def service_category(self, name: str, **kw: Any) -> ServiceCategory:
        kw.setdefault("slug", slugify(name))
        return self._add(ServiceCategory(name=name, **kw))

    def event(self, name: str | None = None, **kw: Any) -> Event:
        name = name or f"Event {self._next()}"
        kw.setdefault("slug", slugify(name))
        return self._add(Event(name=name, **kw))

    def competition(
        self,
        name: str | None = None,
        *,
        event: Event | None = None,
        series: list[SpecialSeries] | None = None,
        **kw: Any,
    ) -> Competition:
        name = name or f"Competition {self._next()}"
        kw.setdefault("slug", slugify(name))
        event = event or self.event()
        obj = Competition(name=name, event_id=event.id, **kw)
        if series:
            obj.special_series = list(series)
        return self._add(obj)

    def edition(self, competition: Competition, year: int, **kw: Any) -> Edition:
        kw.setdefault("slug", str(year))
        kw.setdefault("start_date", date(year, 6, 1))
        return self._add(Edition(competition_id=competition.id, year=year, **kw))

    def service(self, name: str | None = None, **kw: Any) -> Service:
        name = name or f"Service {self._next()}"
        kw.setdefault("slug", slugify(name))
        return self._add(Service(name=name, **kw))

    def post(self, title: str | None = None, **kw: Any) -> Post:
        title = title or f"Post {self._next()}"
        kw.setdefault("slug", slugify(title))
        return self._add(Post(title=title, **kw))


@pytest.fixture()
def content(session: Session) -> ContentFactory:
    return ContentFactory(session)
