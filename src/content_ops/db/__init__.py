from content_ops.db.base import Base, new_id
from content_ops.db.engine import DatabaseConfig, create_db_engine, create_session_factory

__all__ = [
    "Base",
    "DatabaseConfig",
    "create_db_engine",
    "create_session_factory",
    "new_id",
]
