from __future__ import annotations

from sqlalchemy.orm import Session

from content_ops.db.models.content.organizer import Organizer
from content_ops.db.repos.base import BaseRepository


class OrganizerRepository(BaseRepository[Organizer]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=Organizer)
