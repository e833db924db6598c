from content_ops.db.models.content.associations import competition_special_series
from content_ops.db.models.content.competition import Competition
from content_ops.db.models.content.edition import Edition
from content_ops.db.models.content.event import Event
from content_ops.db.models.content.lookups import ServiceCategory, TerrainType
from content_ops.db.models.content.organizer import Organizer
from content_ops.db.models.content.post import Post
from content_ops.db.models.content.service import Service
from content_ops.db.models.content.special_series import SpecialSeries

__all__ = [
    "Competition",
    "Edition",
    "Event",
    "Organizer",
    "Post",
    "Service",
    "ServiceCategory",
    "SpecialSeries",
    "TerrainType",
    "competition_special_series",
]
