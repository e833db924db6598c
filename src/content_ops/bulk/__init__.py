from content_ops.bulk.filters import (
    BulkMutationOperation,
    FilterCondition,
    FilterExpression,
    FilterLogic,
    FilterOperator,
    compile_filter,
)
from content_ops.bulk.metadata import (
    EntityType,
    describe,
    describe_all,
    get_field,
    is_editable,
    is_filterable,
)
from content_ops.bulk.mutation import (
    BulkMutationPreview,
    BulkMutationResult,
    disconnect_relation,
    execute_bulk_mutation,
    preview_bulk_mutation,
)
from content_ops.bulk.query import query_records, relation_options

describe_entities = describe_all

__all__ = [
    "BulkMutationOperation",
    "BulkMutationPreview",
    "BulkMutationResult",
    "EntityType",
    "FilterCondition",
    "FilterExpression",
    "FilterLogic",
    "FilterOperator",
    "compile_filter",
    "describe",
    "describe_all",
    "describe_entities",
    "disconnect_relation",
    "execute_bulk_mutation",
    "get_field",
    "is_editable",
    "is_filterable",
    "preview_bulk_mutation",
    "query_records",
    "relation_options",
]
