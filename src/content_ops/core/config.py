from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # DB
    database_url: str = Field(
        default="sqlite+pysqlite:///./content_ops.db",
        validation_alias="DATABASE_URL",
    )
    db_echo: bool = False

    log_level: str = "INFO"

    # -----------------------------
    # Bulk edit bounds
    # -----------------------------

    query_limit: int = Field(default=100, ge=1)
    preview_limit: int = Field(default=100, ge=1)

    # -----------------------------
    # Import
    # -----------------------------

    import_slug_suffix: str = "imported"


settings = Settings()
