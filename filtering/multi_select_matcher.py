"""Dropdown, checkbox and radio matching against a resolved category."""

from __future__ import annotations

from typing import Any

from components.component_models import ComponentDescriptor, ComponentRoles
from filtering.base_matcher import ComponentMatcher
from filtering.filter_models import FilterDefinition, FilterResult
from filtering.filter_values import as_string_list


class MultiSelectMatcher(ComponentMatcher):
    """Keep components whose category matches any selected option.

    Lists match by case-insensitive membership, mappings match through any of
    their values, and scalars match when a selected option is a substring of
    the value so that ``"North America"`` satisfies ``"north"``.
    """

    matcher_id = "multi_select"

    def apply(
        self,
        component: ComponentDescriptor,
        roles: ComponentRoles,
        definition: FilterDefinition,
        value: Any,
    ) -> FilterResult:
        selected = {item.lower() for item in as_string_list(value)}
        if not selected:
            return FilterResult(passed=True)

        resolved = self._resolver.resolve_category(component, roles, definition.id)
        if resolved is None:
            return FilterResult(passed=True, reason="category_unresolved")

        if self._value_matches(resolved, selected):
            return FilterResult(passed=True)
        return FilterResult(passed=False, reason="category_not_selected")

    def _value_matches(self, resolved: Any, selected: set[str]) -> bool:
        if isinstance(resolved, list | tuple):
            return any(str(item).lower() in selected for item in resolved)
        if isinstance(resolved, dict):
            return any(self._value_matches(item, selected) for item in resolved.values())
        text = str(resolved).lower()
        return any(option in text for option in selected)
