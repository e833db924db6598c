from __future__ import annotations

from sqlalchemy.orm import Session

from content_ops.db.models.content.event import Event
from content_ops.db.repos.base import BaseRepository


class EventRepository(BaseRepository[Event]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=Event)
