from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from content_ops.db.base import Base, IdMixin, TimestampMixin
from content_ops.db.enums import LanguageEnum, PublishStatusEnum, enum_type


class Service(Base, IdMixin, TimestampMixin):
    __tablename__ = "services"

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

    country: Mapped[str | None] = mapped_column(String(2), nullable=True)
    city: Mapped[str | None] = mapped_column(String, nullable=True)
    website: Mapped[str | None] = mapped_column(String, nullable=True)

    category_id: Mapped[str | None] = mapped_column(
        ForeignKey("service_categories.id", ondelete="SET NULL"), nullable=True
    )
    created_by_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    category: Mapped[ServiceCategory | None] = relationship(back_populates="services")

    __table_args__ = (Index("ix_services_category", "category_id"),)


from content_ops.db.models.content.lookups import ServiceCategory  # noqa: E402
