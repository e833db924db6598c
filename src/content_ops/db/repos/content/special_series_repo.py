from __future__ import annotations

from sqlalchemy.orm import Session

from content_ops.db.models.content.special_series import SpecialSeries
from content_ops.db.repos.base import BaseRepository


class SpecialSeriesRepository(BaseRepository[SpecialSeries]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=SpecialSeries)
