from __future__ import annotations

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from content_ops.db.base import Base, IdMixin, TimestampMixin


class TerrainType(Base, IdMixin, TimestampMixin):
    __tablename__ = "terrain_types"

    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )


class ServiceCategory(Base, IdMixin, TimestampMixin):
    __tablename__ = "service_categories"

    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False)

    services: Mapped[list[Service]] = relationship(back_populates="category")


from content_ops.db.models.content.service import Service  # noqa: E402
