from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from sqlalchemy.orm import InstrumentedAttribute, Session, selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from content_ops.bulk.errors import UnknownEntityType
from content_ops.bulk.metadata import EntityType, resolve_entity_type
from content_ops.db.base import Base
from content_ops.db.models import (
    Competition,
    Edition,
    Event,
    Organizer,
    Post,
    Service,
    SpecialSeries,
)
from content_ops.db.repos.base import BaseRepository
from content_ops.db.repos.content import (
    CompetitionRepository,
    EditionRepository,
    EventRepository,
    OrganizerRepository,
    PostRepository,
    ServiceCategoryRepository,
    ServiceRepository,
    SpecialSeriesRepository,
    TerrainTypeRepository,
)


@dataclass(frozen=True)
class ParentLink:
    """A related record denormalized into query results as `{id, name}`."""

    key: str
    relationship: str
    many: bool = False


@dataclass(frozen=True)
class EntityBinding:
    entity_type: EntityType
    model: type[Base]
    repository: Callable[[Session], BaseRepository[Any]]
    label_field: str
    default_order: Callable[[], tuple[Any, ...]]
    display: Callable[[Any], str]
    parents: tuple[ParentLink, ...] = ()
    # Column the natural key (slug) is unique within; None means globally unique.
    slug_scope: str | None = None

    def column(self, name: str) -> InstrumentedAttribute[Any]:
        return getattr(self.model, name)

    def loader_options(self) -> list[LoaderOption]:
        return [selectinload(self.column(link.relationship)) for link in self.parents]


def _named(obj: Any) -> str:
    return obj.name or obj.slug or obj.id


def _post_display(obj: Post) -> str:
    return obj.title or obj.slug or obj.id


def _edition_display(obj: Edition) -> str:
    if obj.name:
        return obj.name
    competition = obj.competition
    if competition is not None:
        return f"{competition.name} {obj.year}"
    return obj.slug or obj.id


_BINDINGS: Mapping[EntityType, EntityBinding] = MappingProxyType(
    {
        EntityType.COMPETITION: EntityBinding(
            entity_type=EntityType.COMPETITION,
            model=Competition,
            repository=CompetitionRepository,
            label_field="name",
            default_order=lambda: (Competition.name.asc(), Competition.id.asc()),
            display=_named,
            parents=(
                ParentLink("event", "event"),
                ParentLink("special_series", "special_series", many=True),
            ),
        ),
        EntityType.EVENT: EntityBinding(
            entity_type=EntityType.EVENT,
            model=Event,
            repository=EventRepository,
            label_field="name",
            default_order=lambda: (Event.name.asc(), Event.id.asc()),
            display=_named,
            parents=(ParentLink("organizer", "organizer"),),
        ),
        EntityType.EDITION: EntityBinding(
            entity_type=EntityType.EDITION,
            model=Edition,
            repository=EditionRepository,
            label_field="year",
            default_order=lambda: (Edition.year.desc(), Edition.id.asc()),
            display=_edition_display,
            parents=(ParentLink("competition", "competition"),),
            slug_scope="competition_id",
        ),
        EntityType.ORGANIZER: EntityBinding(
            entity_type=EntityType.ORGANIZER,
            model=Organizer,
            repository=OrganizerRepository,
            label_field="name",
            default_order=lambda: (Organizer.name.asc(), Organizer.id.asc()),
            display=_named,
        ),
        EntityType.SERIES: EntityBinding(
            entity_type=EntityType.SERIES,
            model=SpecialSeries,
            repository=SpecialSeriesRepository,
            label_field="name",
            default_order=lambda: (SpecialSeries.name.asc(), SpecialSeries.id.asc()),
            display=_named,
        ),
        EntityType.SERVICE: EntityBinding(
            entity_type=EntityType.SERVICE,
            model=Service,
            repository=ServiceRepository,
            label_field="name",
            default_order=lambda: (Service.name.asc(), Service.id.asc()),
            display=_named,
            parents=(ParentLink("category", "category"),),
        ),
        EntityType.POST: EntityBinding(
            entity_type=EntityType.POST,
            model=Post,
            repository=PostRepository,
            label_field="title",
            default_order=lambda: (Post.created_at.desc(), Post.id.asc()),
            display=_post_display,
            parents=(
                ParentLink("event", "event"),
                ParentLink("competition", "competition"),
            ),
        ),
    }
)

# Repositories behind `FieldMetadata.relation_target`.
RELATION_TARGETS: Mapping[str, Callable[[Session], BaseRepository[Any]]] = MappingProxyType(
    {
        "event": EventRepository,
        "competition": CompetitionRepository,
        "organizer": OrganizerRepository,
        "series": SpecialSeriesRepository,
        "terrain_type": TerrainTypeRepository,
        "service_category": ServiceCategoryRepository,
    }
)


def binding_for(entity_type: EntityType | str) -> EntityBinding:
    return _BINDINGS[resolve_entity_type(entity_type)]


def relation_repository(session: Session, target: str) -> BaseRepository[Any]:
    factory = RELATION_TARGETS.get(target)
    if factory is None:
        raise UnknownEntityType(target)
    return factory(session)
