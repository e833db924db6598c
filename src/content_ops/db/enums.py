from __future__ import annotations

from enum import StrEnum

import sqlalchemy as sa


class PublishStatusEnum(StrEnum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"


class LanguageEnum(StrEnum):
    ES = "ES"
    EN = "EN"
    IT = "IT"
    CA = "CA"
    FR = "FR"
    DE = "DE"


class RaceTypeEnum(StrEnum):
    TRAIL = "TRAIL"
    ULTRA = "ULTRA"
    VERTICAL = "VERTICAL"
    SKYRUNNING = "SKYRUNNING"
    CANICROSS = "CANICROSS"
    OTHER = "OTHER"


class UtmbIndexEnum(StrEnum):
    INDEX_20K = "INDEX_20K"
    INDEX_50K = "INDEX_50K"
    INDEX_100K = "INDEX_100K"
    INDEX_100M = "INDEX_100M"


class EditionStatusEnum(StrEnum):
    UPCOMING = "UPCOMING"
    REGISTRATION_OPEN = "REGISTRATION_OPEN"
    REGISTRATION_CLOSED = "REGISTRATION_CLOSED"
    ONGOING = "ONGOING"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"


class RegistrationStatusEnum(StrEnum):
    NOT_OPEN = "NOT_OPEN"
    OPEN = "OPEN"
    FULL = "FULL"
    CLOSED = "CLOSED"


class PostStatusEnum(StrEnum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class PostCategoryEnum(StrEnum):
    GENERAL = "GENERAL"
    TRAINING = "TRAINING"
    NUTRITION = "NUTRITION"
    GEAR = "GEAR"
    DESTINATIONS = "DESTINATIONS"
    INTERVIEWS = "INTERVIEWS"
    RACE_REPORTS = "RACE_REPORTS"
    TIPS = "TIPS"


def enum_type(enum_cls: type[StrEnum], name: str) -> sa.Enum:
    return sa.Enum(
        enum_cls,
        name=name,
        values_callable=lambda cls: [e.value for e in cls],
    )
