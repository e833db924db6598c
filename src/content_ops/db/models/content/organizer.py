from __future__ import annotations

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from content_ops.db.base import Base, IdMixin, TimestampMixin
from content_ops.db.enums import PublishStatusEnum, enum_type


class Organizer(Base, IdMixin, TimestampMixin):
    __tablename__ = "organizers"

    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False)

    status: Mapped[PublishStatusEnum] = mapped_column(
        enum_type(PublishStatusEnum, "publishstatusenum"),
        nullable=False,
        default=PublishStatusEnum.PUBLISHED,
    )

    country: Mapped[str | None] = mapped_column(String(2), nullable=True)
    city: Mapped[str | None] = mapped_column(String, nullable=True)
    website: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_by_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    events: Mapped[list[Event]] = relationship(back_populates="organizer")

    __table_args__ = (Index("ix_organizers_status_name", "status", "name"),)


from content_ops.db.models.content.event import Event  # noqa: E402
