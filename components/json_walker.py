"""Small helpers for probing untyped JSON trees."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from typing import Any

ISO_DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")

MAX_SCAN_DEPTH = 32

Predicate = Callable[[Any], bool]


def is_present(value: Any) -> bool:
    return value is not None


def is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def is_iso_date_string(value: Any) -> bool:
    return isinstance(value, str) and ISO_DATE_PREFIX_RE.match(value) is not None


def get_path(data: Any, path: str) -> Any:
    """Follow a dotted path of mapping keys and list indexes; ``None`` on any miss."""

    cursor = data
    for part in path.split("."):
        if isinstance(cursor, dict):
            cursor = cursor.get(part)
        elif isinstance(cursor, list) and part.lstrip("-").isdigit():
            index = int(part)
            if -len(cursor) <= index < len(cursor):
                cursor = cursor[index]
            else:
                return None
        else:
            return None
        if cursor is None:
            return None
    return cursor


def first_named(data: Any, names: Iterable[str], predicate: Predicate = is_present) -> Any:
    """Return the first ``data[name]`` satisfying predicate, top level only."""

    if not isinstance(data, dict):
        return None
    for name in names:
        value = data.get(name)
        if value is not None and predicate(value):
            return value
    return None


def first_named_nested(data: Any, names: Iterable[str], predicate: Predicate = is_present) -> Any:
    """Like :func:`first_named`, one level deeper inside object-valued properties."""

    if not isinstance(data, dict):
        return None
    names = tuple(names)
    for child in data.values():
        found = first_named(child, names, predicate)
        if found is not None:
            return found
    return None


def first_value(data: Any, predicate: Predicate) -> Any:
    """Return the first top-level value of a mapping satisfying predicate."""

    if not isinstance(data, dict):
        return None
    for value in data.values():
        if predicate(value):
            return value
    return None


def first_value_nested(data: Any, predicate: Predicate) -> Any:
    """Return the first value satisfying predicate one level inside object-valued properties."""

    if not isinstance(data, dict):
        return None
    for child in data.values():
        found = first_value(child, predicate)
        if found is not None:
            return found
    return None


def iter_strings(value: Any, *, max_depth: int = MAX_SCAN_DEPTH) -> Iterator[str]:
    """Yield every string in a JSON tree, depth-first, in document order."""

    if isinstance(value, str):
        yield value
        return
    if max_depth <= 0:
        return
    if isinstance(value, dict):
        children: Iterable[Any] = value.values()
    elif isinstance(value, list | tuple):
        children = value
    else:
        return
    for child in children:
        yield from iter_strings(child, max_depth=max_depth - 1)
