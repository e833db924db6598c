from __future__ import annotations

from sqlalchemy.orm import Session

from content_ops.db.models.content.service import Service
from content_ops.db.repos.base import BaseRepository


class ServiceRepository(BaseRepository[Service]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=Service)
