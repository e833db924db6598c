from __future__ import annotations

from content_ops.db.repos.content.competition_repo import CompetitionRepository
from content_ops.db.repos.content.edition_repo import EditionRepository
from content_ops.db.repos.content.event_repo import EventRepository
from content_ops.db.repos.content.organizer_repo import OrganizerRepository
from content_ops.db.repos.content.post_repo import PostRepository
from content_ops.db.repos.content.service_category_repo import ServiceCategoryRepository
from content_ops.db.repos.content.service_repo import ServiceRepository
from content_ops.db.repos.content.special_series_repo import SpecialSeriesRepository
from content_ops.db.repos.content.terrain_type_repo import TerrainTypeRepository

__all__ = [
    "CompetitionRepository",
    "EditionRepository",
    "EventRepository",
    "OrganizerRepository",
    "PostRepository",
    "ServiceCategoryRepository",
    "ServiceRepository",
    "SpecialSeriesRepository",
    "TerrainTypeRepository",
]
