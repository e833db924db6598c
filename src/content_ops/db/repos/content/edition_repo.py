from __future__ import annotations

from sqlalchemy.orm import Session

from content_ops.db.models.content.edition import Edition
from content_ops.db.repos.base import BaseRepository


class EditionRepository(BaseRepository[Edition]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=Edition)
