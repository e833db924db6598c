from __future__ import annotations

from sqlalchemy import Column, ForeignKey, String, Table

from content_ops.db.base import Base

competition_special_series = Table(
    "competition_special_series",
    Base.metadata,
    Column(
        "competition_id",
        String(36),
        ForeignKey("competitions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "special_series_id",
        String(36),
        ForeignKey("special_series.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)
