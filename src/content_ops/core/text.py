from __future__ import annotations

import re

_whitespace_re = re.compile(r"\s+")
_non_word_re = re.compile(r"[^\w-]+")
_dashes_re = re.compile(r"-{2,}")
_camel_boundary_re = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def slugify(value: str) -> str:
    """Turn a display name into a URL-friendly slug."""

    v = str(value).strip().lower()
    v = _whitespace_re.sub("-", v)
    v = _non_word_re.sub("", v)
    v = _dashes_re.sub("-", v)
    return v.strip("-")


def camel_to_snake(key: str) -> str:
    """`baseDistance` -> `base_distance`; snake_case keys pass through."""

    return _camel_boundary_re.sub("_", key).lower()
