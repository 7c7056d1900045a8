"""Inclusive numeric range matching for range sliders."""

from __future__ import annotations

import math
from typing import Any

from components.component_models import ComponentDescriptor, ComponentRoles
from filtering.base_matcher import ComponentMatcher
from filtering.filter_models import FilterDefinition, FilterResult


class NumericRangeMatcher(ComponentMatcher):
    """Keep components whose resolved number lies in ``[min, max]``."""

    matcher_id = "numeric_range"

    def apply(
        self,
        component: ComponentDescriptor,
        roles: ComponentRoles,
        definition: FilterDefinition,
        value: Any,
    ) -> FilterResult:
        resolved = self._resolver.resolve_numeric(component, roles)
        if resolved is None:
            return FilterResult(passed=True, reason="number_unresolved")

        low, high = self.bounds(definition, value)
        if low <= resolved <= high:
            return FilterResult(passed=True)
        return FilterResult(passed=False, reason="number_out_of_range")

    @staticmethod
    def bounds(definition: FilterDefinition, value: Any) -> tuple[float, float]:
        """Return ``(low, high)``; a scalar value is the upper bound of a single-thumb slider."""

        if isinstance(value, list | tuple):
            items = list(value) + [None, None]
            low, high = items[0], items[1]
        else:
            low, high = None, value

        if not _is_number(low):
            low = definition.min if definition.min is not None else -math.inf
        if not _is_number(high):
            high = definition.max if definition.max is not None else math.inf
        return float(low), float(high)


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)
