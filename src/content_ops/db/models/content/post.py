from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from content_ops.db.base import Base, IdMixin, TimestampMixin
from content_ops.db.enums import LanguageEnum, PostCategoryEnum, PostStatusEnum, enum_type


class Post(Base, IdMixin, TimestampMixin):
    __tablename__ = "posts"

    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    excerpt: Mapped[str | None] = mapped_column(String, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[PostStatusEnum] = mapped_column(
        enum_type(PostStatusEnum, "poststatusenum"),
        nullable=False,
        default=PostStatusEnum.DRAFT,
    )
    category: Mapped[PostCategoryEnum] = mapped_column(
        enum_type(PostCategoryEnum, "postcategoryenum"),
        nullable=False,
        default=PostCategoryEnum.GENERAL,
    )
    language: Mapped[LanguageEnum] = mapped_column(
        enum_type(LanguageEnum, "languageenum"),
        nullable=False,
        default=LanguageEnum.ES,
    )

    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    event_id: Mapped[str | None] = mapped_column(
        ForeignKey("events.id", ondelete="SET NULL"), nullable=True
    )
    competition_id: Mapped[str | None] = mapped_column(
        ForeignKey("competitions.id", ondelete="SET NULL"), nullable=True
    )
    author_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    event: Mapped[Event | None] = relationship()
    competition: Mapped[Competition | None] = relationship()

    __table_args__ = (Index("ix_posts_status_published_at", "status", "published_at"),)


from content_ops.db.models.content.competition import Competition  # noqa: E402
from content_ops.db.models.content.event import Event  # noqa: E402
