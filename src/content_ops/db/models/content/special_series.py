from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from content_ops.db.base import Base, IdMixin, TimestampMixin
from content_ops.db.enums import LanguageEnum, PublishStatusEnum, enum_type
from content_ops.db.models.content.associations import competition_special_series


class SpecialSeries(Base, IdMixin, TimestampMixin):
    __tablename__ = "special_series"

    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False)

    status: Mapped[PublishStatusEnum] = mapped_column(
        enum_type(PublishStatusEnum, "publishstatusenum"),
        nullable=False,
        default=PublishStatusEnum.PUBLISHED,
    )
    language: Mapped[LanguageEnum] = mapped_column(
        enum_type(LanguageEnum, "languageenum"),
        nullable=False,
        default=LanguageEnum.ES,
    )

    country: Mapped[str | None] = mapped_column(String(2), nullable=True)
    website: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_by_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    competitions: Mapped[list[Competition]] = relationship(
        secondary=competition_special_series,
        back_populates="special_series",
    )


from content_ops.db.models.content.competition import Competition  # noqa: E402
