from __future__ import annotations

from sqlalchemy.orm import Session

from content_ops.db.models.content.lookups import TerrainType
from content_ops.db.repos.base import BaseRepository


class TerrainTypeRepository(BaseRepository[TerrainType]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=TerrainType)
