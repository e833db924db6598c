from __future__ import annotations


class BulkOpsError(RuntimeError):
    """Base exception for bulk edit / import failures."""


class UnknownEntityType(BulkOpsError):
    """Entity type is not present in the metadata registry."""

    def __init__(self, entity_type: object) -> None:
        super().__init__(f"Unknown entity type: {entity_type!r}")
        self.entity_type = entity_type


class InvalidFilterField(BulkOpsError):
    """Filter references a field that is unknown or not filterable."""

    def __init__(self, entity_type: str, field: str) -> None:
        super().__init__(f"Field {field!r} is not filterable for {entity_type}")
        self.entity_type = entity_type
        self.field = field


class NonEditableField(BulkOpsError):
    """Mutation targets a field that is unknown or not editable."""

    def __init__(self, entity_type: str, field: str, reason: str | None = None) -> None:
        message = f"Field {field!r} is not editable for {entity_type}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.entity_type = entity_type
        self.field = field


class TypeMismatch(BulkOpsError):
    """Operator or value is incompatible with the field's declared kind."""


class EmptyFilterRejected(BulkOpsError):
    """At least one filter condition is required to prevent accidental mass updates."""

    def __init__(self, entity_type: str) -> None:
        super().__init__(
            f"Refusing to mutate every {entity_type}: at least one filter condition is required"
        )
        self.entity_type = entity_type


class TransactionFailed(BulkOpsError):
    """Storage failed during an all-or-nothing write; nothing was applied."""


class ItemValidationFailed(BulkOpsError):
    """An import item is structurally invalid."""


class ReferencedEntityMissing(ItemValidationFailed):
    """An import item points to a parent record that does not exist."""


class ImportBatchMismatch(BulkOpsError):
    """Batch declares a different entity type than the one requested."""
