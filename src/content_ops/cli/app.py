from __future__ import annotations

import logging

import typer

from content_ops.cli.bulk import app as bulk_app
from content_ops.cli.imports import app as imports_app
from content_ops.core.config import settings

app = typer.Typer(no_args_is_help=True)
app.add_typer(bulk_app, name="bulk")
app.add_typer(imports_app, name="imports")


@app.callback()
def main() -> None:
    """Bulk edit and import tooling for race content."""

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
