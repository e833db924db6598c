from __future__ import annotations

from datetime import UTC, date, datetime, time
from typing import Any

from content_ops.bulk.errors import TypeMismatch
from content_ops.bulk.metadata import FieldKind, FieldMetadata

Primitive = str | bool | int | float | datetime | date
FilterValue = Primitive | list[Primitive] | None

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _fit_number(
    field: FieldMetadata,
    value: int | float,
    python_type: type | None,
    *,
    whole: bool,
) -> int | float:
    if python_type is int:
        if isinstance(value, float):
            if not value.is_integer():
                if whole:
                    raise TypeMismatch(f"Field {field.name!r} expects a whole number, got {value!r}")
                return value
            value = int(value)
        if not INT32_MIN <= value <= INT32_MAX:
            raise TypeMismatch(f"Field {field.name!r} is out of range: {value!r}")
        return value
    if python_type is float and isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            raise TypeMismatch(f"Field {field.name!r} is out of range: {value!r}") from None
    return value


def _parse_temporal(field: FieldMetadata, value: Any) -> date | datetime:
    if isinstance(value, (date, datetime)):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            if len(raw) == 10:
                return date.fromisoformat(raw)
            return datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            pass
    raise TypeMismatch(f"Field {field.name!r} expects an ISO-8601 date, got {value!r}")


def _fit_temporal(value: date | datetime, python_type: type | None) -> date | datetime:
    # Date columns want a date; DateTime columns want an aware datetime.
    if python_type is date and isinstance(value, datetime):
        return value.date()
    if python_type is datetime and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=UTC)
    return value


def coerce_value(
    field: FieldMetadata,
    value: Any,
    *,
    python_type: type | None = None,
    allow_none: bool = True,
    whole: bool = True,
) -> Any:
    """Validate a scalar against the field's declared kind and normalize it.

    Integer columns take whole numbers inside the signed 32-bit range; pass
    ``whole=False`` for range bounds, which may fall between integers.
    Raises `TypeMismatch` when the value's variant does not fit the field.
    """

    if value is None:
        if allow_none:
            return None
        raise TypeMismatch(f"Field {field.name!r} requires a value")

    kind = field.kind

    if kind is FieldKind.STRING:
        if not isinstance(value, str):
            raise TypeMismatch(f"Field {field.name!r} expects text, got {value!r}")
        return value

    if kind is FieldKind.NUMBER:
        if not _is_number(value):
            raise TypeMismatch(f"Field {field.name!r} expects a number, got {value!r}")
        return _fit_number(field, value, python_type, whole=whole)

    if kind is FieldKind.BOOLEAN:
        if not isinstance(value, bool):
            raise TypeMismatch(f"Field {field.name!r} expects true/false, got {value!r}")
        return value

    if kind is FieldKind.ENUM:
        allowed = field.enum_values or ()
        if isinstance(value, str) and value.upper() in allowed:
            return value.upper()
        raise TypeMismatch(
            f"Field {field.name!r} expects one of {', '.join(allowed)}, got {value!r}"
        )

    if kind is FieldKind.DATE:
        return _fit_temporal(_parse_temporal(field, value), python_type)

    if kind is FieldKind.RELATION:
        if not isinstance(value, str) or not value:
            raise TypeMismatch(f"Field {field.name!r} expects a related record id, got {value!r}")
        return value

    raise TypeMismatch(f"Unsupported field kind {kind!r}")  # pragma: no cover


def as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]
