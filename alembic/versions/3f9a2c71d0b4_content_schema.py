"""content schema

Revision ID: 3f9a2c71d0b4
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f9a2c71d0b4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# Shared across tables; created once up front.
publish_status = postgresql.ENUM(
    "DRAFT", "PUBLISHED", "CANCELLED", name="publishstatusenum", create_type=False
)
language = postgresql.ENUM(
    "ES", "EN", "IT", "CA", "FR", "DE", name="languageenum", create_type=False
)
race_type = postgresql.ENUM(
    "TRAIL",
    "ULTRA",
    "VERTICAL",
    "SKYRUNNING",
    "CANICROSS",
    "OTHER",
    name="racetypeenum",
    create_type=False,
)
utmb_index = postgresql.ENUM(
    "INDEX_20K",
    "INDEX_50K",
    "INDEX_100K",
    "INDEX_100M",
    name="utmbindexenum",
    create_type=False,
)
edition_status = postgresql.ENUM(
    "UPCOMING",
    "REGISTRATION_OPEN",
    "REGISTRATION_CLOSED",
    "ONGOING",
    "FINISHED",
    "CANCELLED",
    name="editionstatusenum",
    create_type=False,
)
registration_status = postgresql.ENUM(
    "NOT_OPEN", "OPEN", "FULL", "CLOSED", name="registrationstatusenum", create_type=False
)
post_status = postgresql.ENUM(
    "DRAFT", "PUBLISHED", "ARCHIVED", name="poststatusenum", create_type=False
)
post_category = postgresql.ENUM(
    "GENERAL",
    "TRAINING",
    "NUTRITION",
    "GEAR",
    "DESTINATIONS",
    "INTERVIEWS",
    "RACE_REPORTS",
    "TIPS",
    name="postcategoryenum",
    create_type=False,
)

_ENUMS = (
    publish_status,
    language,
    race_type,
    utmb_index,
    edition_status,
    registration_status,
    post_status,
    post_category,
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""

    bind = op.get_bind()
    for enum in _ENUMS:
        enum.create(bind, checkfirst=True)

    op.create_table(
        "organizers",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("status", publish_status, nullable=False),
        sa.Column("country", sa.String(length=2), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("website", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_organizers_status_name", "organizers", ["status", "name"], unique=False)

    op.create_table(
        "special_series",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("status", publish_status, nullable=False),
        sa.Column("language", language, nullable=False),
        sa.Column("country", sa.String(length=2), nullable=True),
        sa.Column("website", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )

    op.create_table(
        "terrain_types",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default="true", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )

    op.create_table(
        "service_categories",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("status", publish_status, nullable=False),
        sa.Column("featured", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("language", language, nullable=False),
        sa.Column("country", sa.String(length=2), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("typical_month", sa.Integer(), nullable=True),
        sa.Column("first_edition_year", sa.Integer(), nullable=True),
        sa.Column("website", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("organizer_id", sa.String(length=36), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["organizer_id"], ["organizers.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_events_status_featured", "events", ["status", "featured"], unique=False)
    op.create_index("ix_events_organizer", "events", ["organizer_id"], unique=False)

    op.create_table(
        "competitions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("event_id", sa.String(length=36), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", publish_status, nullable=False),
        sa.Column("featured", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("language", language, nullable=False),
        sa.Column("race_type", race_type, nullable=False),
        sa.Column("utmb_index", utmb_index, nullable=True),
        sa.Column("base_distance", sa.Float(), nullable=True),
        sa.Column("base_elevation", sa.Integer(), nullable=True),
        sa.Column("itra_points", sa.Integer(), nullable=True),
        sa.Column("terrain_type_id", sa.String(length=36), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["terrain_type_id"], ["terrain_types.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_competitions_event", "competitions", ["event_id"], unique=False)
    op.create_index(
        "ix_competitions_status_featured", "competitions", ["status", "featured"], unique=False
    )

    op.create_table(
        "competition_special_series",
        sa.Column("competition_id", sa.String(length=36), nullable=False),
        sa.Column("special_series_id", sa.String(length=36), nullable=False),
        sa.ForeignKeyConstraint(["competition_id"], ["competitions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["special_series_id"], ["special_series.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("competition_id", "special_series_id"),
    )

    op.create_table(
        "editions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("competition_id", sa.String(length=36), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("status", edition_status, nullable=False),
        sa.Column("registration_status", registration_status, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("distance", sa.Float(), nullable=True),
        sa.Column("elevation", sa.Integer(), nullable=True),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["competition_id"], ["competitions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("competition_id", "slug", name="uq_editions_competition_slug"),
    )
    op.create_index(
        "ix_editions_competition_year", "editions", ["competition_id", "year"], unique=False
    )

    op.create_table(
        "services",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", publish_status, nullable=False),
        sa.Column("featured", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("language", language, nullable=False),
        sa.Column("country", sa.String(length=2), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("website", sa.String(), nullable=True),
        sa.Column("category_id", sa.String(length=36), nullable=True),
        sa.Column("created_by_id", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["category_id"], ["service_categories.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index("ix_services_category", "services", ["category_id"], unique=False)

    op.create_table(
        "posts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("slug", sa.String(length=200), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("excerpt", sa.String(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("status", post_status, nullable=False),
        sa.Column("category", post_category, nullable=False),
        sa.Column("language", language, nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("event_id", sa.String(length=36), nullable=True),
        sa.Column("competition_id", sa.String(length=36), nullable=True),
        sa.Column("author_id", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["competition_id"], ["competitions.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_index(
        "ix_posts_status_published_at", "posts", ["status", "published_at"], unique=False
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_posts_status_published_at", table_name="posts")
    op.drop_table("posts")
    op.drop_index("ix_services_category", table_name="services")
    op.drop_table("services")
    op.drop_index("ix_editions_competition_year", table_name="editions")
    op.drop_table("editions")
    op.drop_table("competition_special_series")
    op.drop_index("ix_competitions_status_featured", table_name="competitions")
    op.drop_index("ix_competitions_event", table_name="competitions")
    op.drop_table("competitions")
    op.drop_index("ix_events_organizer", table_name="events")
    op.drop_index("ix_events_status_featured", table_name="events")
    op.drop_table("events")
    op.drop_table("service_categories")
    op.drop_table("terrain_types")
    op.drop_table("special_series")
    op.drop_index("ix_organizers_status_name", table_name="organizers")
    op.drop_table("organizers")

    bind = op.get_bind()
    for enum in reversed(_ENUMS):
        enum.drop(bind, checkfirst=True)
