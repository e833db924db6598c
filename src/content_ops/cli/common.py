from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import typer
from sqlalchemy.orm import Session

from content_ops.bulk.filters import FilterExpression
from content_ops.core.config import settings
from content_ops.db import DatabaseConfig, create_db_engine, create_session_factory


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Context-managed DB session for CLI commands.
    Commits on success, rolls back on exception.
    """
    engine = create_db_engine(
        DatabaseConfig(database_url=settings.database_url, echo=settings.db_echo)
    )
    SessionLocal = create_session_factory(engine)
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def parse_json(raw: str | None, option: str) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"not valid JSON: {exc.msg}", param_hint=option) from exc


def parse_filters(raw: str | None) -> FilterExpression:
    """`--filters` accepts either a bare condition list or `{conditions, logic}`."""

    payload = parse_json(raw, "--filters")
    if payload is None:
        return FilterExpression()
    if isinstance(payload, list):
        payload = {"conditions": payload}
    return FilterExpression.model_validate(payload)


def echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))
