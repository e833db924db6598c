from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from content_ops.db.base import Base, IdMixin, TimestampMixin
from content_ops.db.enums import LanguageEnum, PublishStatusEnum, enum_type


class Event(Base, IdMixin, TimestampMixin):
    __tablename__ = "events"

    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False)

    status: Mapped[PublishStatusEnum] = mapped_column(
        enum_type(PublishStatusEnum, "publishstatusenum"),
        nullable=False,
        default=PublishStatusEnum.PUBLISHED,
    )
    featured: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    language: Mapped[LanguageEnum] = mapped_column(
        enum_type(LanguageEnum, "languageenum"),
        nullable=False,
        default=LanguageEnum.ES,
    )

    country: Mapped[str | None] = mapped_column(String(2), nullable=True)
    city: Mapped[str | None] = mapped_column(String, nullable=True)
    typical_month: Mapped[int | None] = mapped_column(Integer, nullable=True)
    first_edition_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    website: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    organizer_id: Mapped[str | None] = mapped_column(
        ForeignKey("organizers.id", ondelete="SET NULL"), nullable=True
    )
    created_by_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    organizer: Mapped[Organizer | None] = relationship(back_populates="events")
    competitions: Mapped[list[Competition]] = relationship(
        back_populates="event",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_events_status_featured", "status", "featured"),
        Index("ix_events_organizer", "organizer_id"),
    )


from content_ops.db.models.content.competition import Competition  # noqa: E402
from content_ops.db.models.content.organizer import Organizer  # noqa: E402
