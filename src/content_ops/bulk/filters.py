"""Declarative filter expressions and their compilation into SQL predicates."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import and_, false, func, or_, true
from sqlalchemy.sql.elements import ColumnElement

from content_ops.bulk.bindings import EntityBinding, binding_for
from content_ops.bulk.errors import InvalidFilterField, TypeMismatch
from content_ops.bulk.metadata import (
    EntityType,
    FieldKind,
    FieldMetadata,
    get_field,
    resolve_entity_type,
)
from content_ops.bulk.values import FilterValue, as_list, coerce_value


class FilterOperator(StrEnum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IN = "in"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"


class FilterLogic(StrEnum):
    AND = "AND"
    OR = "OR"


class FilterCondition(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str = Field(min_length=1)
    operator: FilterOperator
    value: FilterValue = None


class FilterExpression(BaseModel):
    model_config = ConfigDict(frozen=True)

    conditions: list[FilterCondition] = Field(default_factory=list)
    logic: FilterLogic = FilterLogic.AND

    @property
    def is_empty(self) -> bool:
        return not self.conditions


class BulkMutationOperation(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str = Field(min_length=1)
    value: FilterValue = None


_TEXT_OPERATORS = (FilterOperator.CONTAINS, FilterOperator.STARTS_WITH, FilterOperator.ENDS_WITH)
_ORDERED_KINDS = (FieldKind.NUMBER, FieldKind.DATE)


def column_python_type(binding: EntityBinding, name: str) -> type | None:
    try:
        return binding.column(name).type.python_type
    except NotImplementedError:
        return None


def compile_filter(
    entity_type: EntityType | str,
    expression: FilterExpression | None,
) -> ColumnElement[bool]:
    """Compile *expression* into a WHERE clause for *entity_type*.

    Every condition is checked against the metadata registry before a model
    attribute is touched. An empty expression matches every record.
    """

    entity_type = resolve_entity_type(entity_type)
    binding = binding_for(entity_type)

    if expression is None or expression.is_empty:
        return true()

    fragments = [_compile_condition(binding, c) for c in expression.conditions]
    if expression.logic is FilterLogic.OR:
        return or_(*fragments)
    return and_(*fragments)


def _present(value: FilterValue) -> list[Any]:
    # `in` ignores null entries; a list of only nulls matches nothing
    return [v for v in as_list(value) if v is not None]


def _resolve_filter_field(binding: EntityBinding, name: str) -> FieldMetadata:
    meta = get_field(binding.entity_type, name)
    if meta is None or not meta.filterable:
        raise InvalidFilterField(binding.entity_type.value, name)
    return meta


def _compile_condition(binding: EntityBinding, cond: FilterCondition) -> ColumnElement[bool]:
    meta = _resolve_filter_field(binding, cond.field)
    if meta.is_many_relation:
        return _compile_many_relation(binding, meta, cond)

    col = binding.column(meta.name)
    op = cond.operator

    if op is FilterOperator.IS_NULL:
        return col.is_(None)
    if op is FilterOperator.IS_NOT_NULL:
        return col.is_not(None)

    py_type = column_python_type(binding, meta.name)

    if op in _TEXT_OPERATORS:
        if meta.kind is not FieldKind.STRING:
            raise TypeMismatch(f"Operator {op.value!r} only applies to text fields, not {meta.name!r}")
        value = coerce_value(meta, cond.value, allow_none=False)
        if op is FilterOperator.CONTAINS:
            return col.icontains(value, autoescape=True)
        if op is FilterOperator.STARTS_WITH:
            return col.istartswith(value, autoescape=True)
        return col.iendswith(value, autoescape=True)

    if op in (FilterOperator.GREATER_THAN, FilterOperator.LESS_THAN):
        if meta.kind not in _ORDERED_KINDS:
            raise TypeMismatch(
                f"Operator {op.value!r} requires a number or date field, not {meta.name!r}"
            )
        value = coerce_value(
            meta, cond.value, python_type=py_type, allow_none=False, whole=False
        )
        return col > value if op is FilterOperator.GREATER_THAN else col < value

    if op is FilterOperator.IN:
        values = [
            coerce_value(meta, v, python_type=py_type, allow_none=False)
            for v in _present(cond.value)
        ]
        if not values:
            return false()
        if meta.kind is FieldKind.STRING:
            return func.lower(col).in_([v.lower() for v in values])
        return col.in_(values)

    # equals / not_equals
    value = coerce_value(meta, cond.value, python_type=py_type)
    if value is None:
        return col.is_(None) if op is FilterOperator.EQUALS else col.is_not(None)

    lhs: Any = col
    if meta.kind is FieldKind.STRING:
        lhs = func.lower(col)
        value = value.lower()
    if op is FilterOperator.EQUALS:
        return lhs == value
    return lhs != value


def _compile_many_relation(
    binding: EntityBinding,
    meta: FieldMetadata,
    cond: FilterCondition,
) -> ColumnElement[bool]:
    rel = binding.column(meta.name)
    target_id = rel.property.mapper.class_.id
    op = cond.operator

    if op is FilterOperator.IS_NULL:
        return ~rel.any()
    if op is FilterOperator.IS_NOT_NULL:
        return rel.any()
    if op is FilterOperator.EQUALS:
        return rel.any(target_id == coerce_value(meta, cond.value, allow_none=False))
    if op is FilterOperator.NOT_EQUALS:
        return ~rel.any(target_id == coerce_value(meta, cond.value, allow_none=False))
    if op is FilterOperator.IN:
        ids = [coerce_value(meta, v, allow_none=False) for v in _present(cond.value)]
        if not ids:
            return false()
        return rel.any(target_id.in_(ids))

    raise TypeMismatch(
        f"Operator {op.value!r} is not supported on the many-valued relation {meta.name!r}"
    )
