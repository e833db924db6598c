from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from content_ops.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    def __init__(self, session: Session, model: type[ModelT]) -> None:
        self.session = session
        self.model = model

    def add(self, obj: ModelT, *, flush: bool = True) -> ModelT:
        self.session.add(obj)
        if flush:
            self.session.flush()  # assigns PKs, etc.
        return obj

    def get(self, id_: Any) -> ModelT | None:
        return self.session.get(self.model, id_)

    def first_where(self, *predicates: ColumnElement[bool]) -> ModelT | None:
        stmt = select(self.model).where(*predicates).limit(1)
        return self.session.execute(stmt).scalars().first()

    def list_where(
        self,
        *predicates: ColumnElement[bool],
        order_by: Sequence[Any] = (),
        limit: int | None = None,
    ) -> list[ModelT]:
        stmt = select(self.model).where(*predicates).order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def ids_where(self, *predicates: ColumnElement[bool]) -> list[Any]:
        stmt = select(self.model.id).where(*predicates).order_by(self.model.id)
        return list(self.session.execute(stmt).scalars().all())

    def count_where(self, *predicates: ColumnElement[bool]) -> int:
        stmt = select(func.count()).select_from(self.model).where(*predicates)
        return int(self.session.execute(stmt).scalar_one())

    def patch(
        self,
        obj: ModelT,
        changes: Mapping[str, Any],
        *,
        flush: bool = True,
        include_none: bool = False,
    ) -> ModelT:
        for k, v in changes.items():
            if v is None and not include_none:
                continue
            setattr(obj, k, v)
        if flush:
            self.session.flush()
        return obj
