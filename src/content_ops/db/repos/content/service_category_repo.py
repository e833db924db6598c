from __future__ import annotations

from sqlalchemy.orm import Session

from content_ops.db.models.content.lookups import ServiceCategory
from content_ops.db.repos.base import BaseRepository


class ServiceCategoryRepository(BaseRepository[ServiceCategory]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=ServiceCategory)
