from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from content_ops.db.models import Competition


def test_sqlite_enforces_foreign_keys(session: Session) -> None:
    session.add(Competition(name="Orphan", slug="orphan", event_id="missing-event"))
    with pytest.raises(IntegrityError):
        session.flush()
