"""Shape rules for filter values: emptiness, default comparison, coercion."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any

from filtering.filter_models import MULTI_SELECT_TYPES, FilterDefinition, FilterType


def is_empty_value(value: Any) -> bool:
    """Return True for values that leave a filter without effect."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list | tuple):
        return len(value) == 0 or all(is_empty_value(item) for item in value)
    return False


def equals_default(definition: FilterDefinition, value: Any) -> bool:
    """Compare a value with the definition's default.

    The default goes through :func:`normalize_value` first, so a YAML date or an
    integral float default equals its own text or number form. Multi-select
    lists compare as sets; date and number pairs compare in order.
    """

    default = normalize_value(definition, definition.default_value)
    if isinstance(value, list | tuple) and isinstance(default, list | tuple):
        if definition.filter_type in MULTI_SELECT_TYPES:
            return len(value) == len(default) and all(item in default for item in value)
        return list(value) == list(default)
    if isinstance(value, list | tuple) and len(value) == 1 and definition.filter_type in MULTI_SELECT_TYPES:
        return value[0] == default
    return value == default


def is_active_value(definition: FilterDefinition, value: Any) -> bool:
    return not is_empty_value(value) and not equals_default(definition, value)


def normalize_value(definition: FilterDefinition, value: Any) -> Any:
    """Coerce a JSON-ish value into the shape the definition's type expects."""

    filter_type = definition.filter_type
    if value is None:
        return None

    if filter_type in MULTI_SELECT_TYPES:
        if definition.is_multi_select:
            return as_string_list(value)
        # single-select dropdowns and radios keep one option
        if isinstance(value, list | tuple):
            selected = as_string_list(value)
            return selected[0] if selected else ""
        return str(value)

    if filter_type == FilterType.DATE_RANGE:
        if isinstance(value, list | tuple):
            bounds = [_date_text(item) for item in list(value)[:2]]
            return bounds + [""] * (2 - len(bounds))
        return [_date_text(value), ""]

    if filter_type == FilterType.RANGE_SLIDER:
        if isinstance(value, list | tuple):
            bounds = [_number_or(item, fallback) for item, fallback in zip(value, (definition.min, definition.max))]
            while len(bounds) < 2:
                bounds.append(definition.max if bounds else definition.min)
            return bounds
        return _number_or(value, definition.max)

    if filter_type == FilterType.TOGGLE:
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return bool(value)

    if filter_type == FilterType.SEARCH:
        return str(value)

    return value


def as_string_list(value: Any) -> list[str]:
    if isinstance(value, list | tuple):
        return [str(item) for item in value if item is not None and str(item) != ""]
    if value is None or value == "":
        return []
    return [str(value)]


def _date_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime | date):
        return value.isoformat()
    return str(value).strip()


def _number_or(value: Any, fallback: float | None) -> float | None:
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int | float):
        return fallback if isinstance(value, float) and math.isnan(value) else value
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return fallback
    if math.isnan(parsed):
        return fallback
    return int(parsed) if parsed.is_integer() else parsed
