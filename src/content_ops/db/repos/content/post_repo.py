from __future__ import annotations

from sqlalchemy.orm import Session

from content_ops.db.models.content.post import Post
from content_ops.db.repos.base import BaseRepository


class PostRepository(BaseRepository[Post]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=Post)
