"""Per-type string encoding of filter values for query strings and storage."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from filtering.filter_models import ActiveFilterState, FilterDefinition, FilterType
from filtering.filter_values import is_active_value, normalize_value

SEPARATOR = ","


def encode_value(definition: FilterDefinition, value: Any) -> str:
    """Encode one value: lists and pairs comma-joined, booleans ``true``/``false``."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list | tuple):
        return SEPARATOR.join(_format_item(item) for item in value)
    if value is None:
        return ""
    return _format_item(value)


def decode_value(definition: FilterDefinition, raw: str) -> Any:
    """Decode one query-string value into the definition's value shape. Never raises."""

    filter_type = definition.filter_type
    text = raw.strip()

    if filter_type == FilterType.CHECKBOX or (filter_type == FilterType.DROPDOWN and definition.is_multi_select):
        return [item.strip() for item in text.split(SEPARATOR) if item.strip()]

    if filter_type == FilterType.RANGE_SLIDER:
        if SEPARATOR in text or definition.range:
            parts = text.split(SEPARATOR)
            return normalize_value(definition, parts[:2])
        return normalize_value(definition, text)

    if filter_type == FilterType.TOGGLE:
        return text.lower() == "true"

    if filter_type == FilterType.DATE_RANGE:
        parts = [item.strip() for item in text.split(SEPARATOR)] if text else []
        parts = parts[:2] + [""] * (2 - len(parts[:2]))
        return parts

    return raw


def encode_state(definitions: Iterable[FilterDefinition], state: Mapping[str, Any]) -> dict[str, str]:
    """Encode every active filter as one query parameter."""

    params: dict[str, str] = {}
    for definition in definitions:
        if definition.id not in state:
            continue
        value = normalize_value(definition, state[definition.id])
        if not is_active_value(definition, value):
            continue
        params[definition.id] = encode_value(definition, value)
    return params


def decode_params(definitions: Iterable[FilterDefinition], params: Mapping[str, str]) -> ActiveFilterState:
    """Decode query parameters for known filters; absent parameters mean default."""

    state: ActiveFilterState = {}
    for definition in definitions:
        raw = params.get(definition.id)
        if raw is None:
            continue
        value = decode_value(definition, raw)
        if is_active_value(definition, value):
            state[definition.id] = value
    return state


def decode_stored_value(definition: FilterDefinition, stored: Any) -> Any:
    """Coerce a value read from persisted storage, which may be native JSON or encoded text."""

    encoded_types = (FilterType.RANGE_SLIDER, FilterType.TOGGLE, FilterType.DATE_RANGE)
    if isinstance(stored, str) and (definition.filter_type in encoded_types or definition.is_multi_select):
        return decode_value(definition, stored)
    return normalize_value(definition, stored)


def _format_item(item: Any) -> str:
    if isinstance(item, float) and item.is_integer():
        return str(int(item))
    if item is None:
        return ""
    return str(item)
