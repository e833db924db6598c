from __future__ import annotations

from sqlalchemy.orm import Session

from content_ops.db.models.content.competition import Competition
from content_ops.db.repos.base import BaseRepository


class CompetitionRepository(BaseRepository[Competition]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=Competition)
