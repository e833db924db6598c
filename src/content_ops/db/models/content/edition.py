from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from content_ops.db.base import Base, IdMixin, TimestampMixin
from content_ops.db.enums import EditionStatusEnum, RegistrationStatusEnum, enum_type


class Edition(Base, IdMixin, TimestampMixin):
    __tablename__ = "editions"

    competition_id: Mapped[str] = mapped_column(
        ForeignKey("competitions.id", ondelete="CASCADE"), nullable=False
    )

    slug: Mapped[str] = mapped_column(String(200), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str | None] = mapped_column(String, nullable=True)

    status: Mapped[EditionStatusEnum] = mapped_column(
        enum_type(EditionStatusEnum, "editionstatusenum"),
        nullable=False,
        default=EditionStatusEnum.UPCOMING,
    )
    registration_status: Mapped[RegistrationStatusEnum] = mapped_column(
        enum_type(RegistrationStatusEnum, "registrationstatusenum"),
        nullable=False,
        default=RegistrationStatusEnum.NOT_OPEN,
    )

    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    distance: Mapped[float | None] = mapped_column(Float, nullable=True)
    elevation: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_participants: Mapped[int | None] = mapped_column(Integer, nullable=True)

    competition: Mapped[Competition] = relationship(back_populates="editions")

    __table_args__ = (
        UniqueConstraint("competition_id", "slug", name="uq_editions_competition_slug"),
        Index("ix_editions_competition_year", "competition_id", "year"),
    )


from content_ops.db.models.content.competition import Competition  # noqa: E402
