from __future__ import annotations

from sqlalchemy import Boolean, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from content_ops.db.base import Base, IdMixin, TimestampMixin
from content_ops.db.enums import (
    LanguageEnum,
    PublishStatusEnum,
    RaceTypeEnum,
    UtmbIndexEnum,
    enum_type,
)
from content_ops.db.models.content.associations import competition_special_series


class Competition(Base, IdMixin, TimestampMixin):
    __tablename__ = "competitions"

    event_id: Mapped[str] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )

    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

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
    race_type: Mapped[RaceTypeEnum] = mapped_column(
        enum_type(RaceTypeEnum, "racetypeenum"),
        nullable=False,
        default=RaceTypeEnum.TRAIL,
    )
    utmb_index: Mapped[UtmbIndexEnum | None] = mapped_column(
        enum_type(UtmbIndexEnum, "utmbindexenum"), nullable=True
    )

    base_distance: Mapped[float | None] = mapped_column(Float, nullable=True)  # km
    base_elevation: Mapped[int | None] = mapped_column(Integer, nullable=True)  # m+
    itra_points: Mapped[int | None] = mapped_column(Integer, nullable=True)

    terrain_type_id: Mapped[str | None] = mapped_column(
        ForeignKey("terrain_types.id", ondelete="SET NULL"), nullable=True
    )
    created_by_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    event: Mapped[Event] = relationship(back_populates="competitions")
    terrain_type: Mapped[TerrainType | None] = relationship()
    special_series: Mapped[list[SpecialSeries]] = relationship(
        secondary=competition_special_series,
        back_populates="competitions",
    )
    editions: Mapped[list[Edition]] = relationship(
        back_populates="competition",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_competitions_event", "event_id"),
        Index("ix_competitions_status_featured", "status", "featured"),
    )


from content_ops.db.models.content.edition import Edition  # noqa: E402
from content_ops.db.models.content.event import Event  # noqa: E402
from content_ops.db.models.content.lookups import TerrainType  # noqa: E402
from content_ops.db.models.content.special_series import SpecialSeries  # noqa: E402
