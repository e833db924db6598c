from __future__ import annotations

import typer

from content_ops.bulk.filters import BulkMutationOperation
from content_ops.bulk.metadata import describe_all
from content_ops.bulk.mutation import (
    disconnect_relation,
    execute_bulk_mutation,
    preview_bulk_mutation,
)
from content_ops.bulk.query import query_records, relation_options
from content_ops.cli.common import echo_json, parse_filters, parse_json, session_scope
from content_ops.core.config import settings

app = typer.Typer(help="Filter, preview and bulk-edit content records.")

ENTITY_HELP = "Entity type (event, competition, edition, organizer, series, service, post)."
FILTERS_HELP = 'JSON filter: [{"field": ..., "operator": ..., "value": ...}] or {"conditions": [...], "logic": "OR"}.'


@app.command("entities")
def entities_cmd() -> None:
    """Print the filterable/editable field registry."""

    echo_json([m.to_dict() for m in describe_all()])


@app.command("relation-options")
def relation_options_cmd(
    target: str = typer.Option(..., "--target", help="Relation target (e.g. series, organizer)."),
) -> None:
    """List `{id, name}` choices for a relation field."""

    with session_scope() as session:
        echo_json(relation_options(session, target))


@app.command("query")
def query_cmd(
    entity_type: str = typer.Option(..., "--entity-type", help=ENTITY_HELP),
    filters: str | None = typer.Option(None, "--filters", help=FILTERS_HELP),
    limit: int = typer.Option(settings.query_limit, "--limit", help="Maximum records returned."),
) -> None:
    """Run a read-only filtered query."""

    expression = parse_filters(filters)
    with session_scope() as session:
        echo_json(query_records(session, entity_type, expression, limit=limit))


@app.command("preview")
def preview_cmd(
    entity_type: str = typer.Option(..., "--entity-type", help=ENTITY_HELP),
    filters: str | None = typer.Option(None, "--filters", help=FILTERS_HELP),
    field: str = typer.Option(..., "--field", help="Field to change."),
    value: str = typer.Option(..., "--value", help="New value as JSON (e.g. true, 42, \"PUBLISHED\")."),
) -> None:
    """Show current vs. new value for the records a bulk edit would touch."""

    expression = parse_filters(filters)
    operation = BulkMutationOperation(field=field, value=parse_json(value, "--value"))
    with session_scope() as session:
        preview = preview_bulk_mutation(session, entity_type, expression, operation)
    echo_json(preview.to_dict())


@app.command("execute")
def execute_cmd(
    entity_type: str = typer.Option(..., "--entity-type", help=ENTITY_HELP),
    filters: str = typer.Option(..., "--filters", help=FILTERS_HELP),
    field: str = typer.Option(..., "--field", help="Field to change."),
    value: str = typer.Option(..., "--value", help="New value as JSON."),
) -> None:
    """Apply one field change to every matching record (a filter is required)."""

    expression = parse_filters(filters)
    operation = BulkMutationOperation(field=field, value=parse_json(value, "--value"))
    with session_scope() as session:
        result = execute_bulk_mutation(session, entity_type, expression, operation)
    echo_json(result.to_dict())
    if not result.success:
        raise typer.Exit(code=1)


@app.command("disconnect")
def disconnect_cmd(
    entity_type: str = typer.Option(..., "--entity-type", help=ENTITY_HELP),
    filters: str = typer.Option(..., "--filters", help=FILTERS_HELP),
    related_id: str = typer.Option(..., "--related-id", help="Id of the related record to detach."),
    field: str | None = typer.Option(
        None, "--field", help="Many-valued relation field (defaults to the entity's only one)."
    ),
) -> None:
    """Detach a related record from every matching record."""

    expression = parse_filters(filters)
    with session_scope() as session:
        result = disconnect_relation(session, entity_type, expression, related_id, field=field)
    echo_json(result.to_dict())
    if not result.success:
        raise typer.Exit(code=1)
