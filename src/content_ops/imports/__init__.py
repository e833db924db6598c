from content_ops.imports.batch import (
    ConflictResolution,
    ConflictType,
    ImportBatch,
    ImportExecutionResult,
    ImportValidationReport,
    ItemOutcome,
)
from content_ops.imports.export import export_batch
from content_ops.imports.reconcile import reconcile_import, validate_import

__all__ = [
    "ConflictResolution",
    "ConflictType",
    "ImportBatch",
    "ImportExecutionResult",
    "ImportValidationReport",
    "ItemOutcome",
    "export_batch",
    "reconcile_import",
    "validate_import",
]
