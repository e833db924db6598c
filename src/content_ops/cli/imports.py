from __future__ import annotations

import json
from pathlib import Path

import typer

from content_ops.cli.common import echo_json, session_scope
from content_ops.imports.batch import ConflictResolution, ImportBatch
from content_ops.imports.export import export_batch
from content_ops.imports.reconcile import reconcile_import, validate_import

app = typer.Typer(help="Validate, reconcile and export record batches.")


def _load_batch(path: Path) -> ImportBatch:
    with path.open(encoding="utf-8") as f:
        return ImportBatch.model_validate(json.load(f))


@app.command("validate")
def validate_cmd(
    entity_type: str | None = typer.Option(
        None, "--entity-type", help="Entity type (defaults to the batch's `entity`)."
    ),
    file: Path = typer.Option(..., "--file", exists=True, dir_okay=False, help="Export JSON file."),
) -> None:
    """Report conflicts and invalid items without writing."""

    batch = _load_batch(file)
    with session_scope() as session:
        report = validate_import(session, batch, entity_type)
    echo_json(report.to_dict())


@app.command("reconcile")
def reconcile_cmd(
    entity_type: str | None = typer.Option(
        None, "--entity-type", help="Entity type (defaults to the batch's `entity`)."
    ),
    file: Path = typer.Option(..., "--file", exists=True, dir_okay=False, help="Export JSON file."),
    conflict_resolution: ConflictResolution = typer.Option(
        ConflictResolution.SKIP,
        "--conflict-resolution",
        help="What to do with items that collide with existing records.",
    ),
    dry_run: bool = typer.Option(
        True,
        "--dry-run/--no-dry-run",
        help="Compute the outcome without writing (default).",
    ),
    acting_user_id: str | None = typer.Option(
        None, "--acting-user-id", help="User id stamped on created records."
    ),
) -> None:
    """Import a batch under a conflict-resolution policy."""

    batch = _load_batch(file)
    with session_scope() as session:
        result = reconcile_import(
            session,
            batch,
            entity_type,
            conflict_resolution=conflict_resolution,
            dry_run=dry_run,
            acting_user_id=acting_user_id,
        )
    echo_json(result.to_dict())
    if not result.success:
        raise typer.Exit(code=1)


@app.command("export")
def export_cmd(
    entity_type: str = typer.Option(..., "--entity-type", help="Entity type to export."),
    out: Path | None = typer.Option(None, "--out", help="Write to this file instead of stdout."),
) -> None:
    """Export every record of an entity type as an import batch."""

    with session_scope() as session:
        batch = export_batch(session, entity_type)

    payload = batch.to_export_dict()
    if out is None:
        echo_json(payload)
        return
    out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    typer.echo(f"Exported {batch.item_count} {batch.entity_type} record(s) to {out}")
