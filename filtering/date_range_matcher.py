"""Inclusive date range matching."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from components.component_models import ComponentDescriptor, ComponentRoles
from components.json_walker import ISO_DATE_PREFIX_RE
from filtering.base_matcher import ComponentMatcher
from filtering.filter_models import FilterDefinition, FilterResult

EPOCH = date(1970, 1, 1)
FAR_FUTURE = date(9999, 12, 31)


class DateRangeMatcher(ComponentMatcher):
    """Keep components whose resolved date falls inside ``[start, end]``."""

    matcher_id = "date_range"

    def apply(
        self,
        component: ComponentDescriptor,
        roles: ComponentRoles,
        definition: FilterDefinition,
        value: Any,
    ) -> FilterResult:
        start_raw, end_raw = _bounds(value)
        if _blank(start_raw) and _blank(end_raw):
            return FilterResult(passed=True)

        resolved = self._resolver.resolve_date(component, roles)
        if resolved is None:
            return FilterResult(passed=True, reason="date_unresolved")

        component_date = to_date(resolved)
        if component_date is None:
            return FilterResult(passed=True, reason="date_unparseable")

        start = to_date(start_raw) or EPOCH
        end = to_date(end_raw) or FAR_FUTURE
        if start <= component_date <= end:
            return FilterResult(passed=True)
        return FilterResult(passed=False, reason="date_out_of_range")


def to_date(value: Any) -> date | None:
    """Coerce an ISO string, ``date`` or ``datetime`` into a calendar date."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    match = ISO_DATE_PREFIX_RE.match(value.strip())
    if match is None:
        return None
    try:
        return date.fromisoformat(match.group(0))
    except ValueError:
        return None


def _bounds(value: Any) -> tuple[Any, Any]:
    if isinstance(value, list | tuple):
        items = list(value) + [None, None]
        return items[0], items[1]
    return value, None


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
