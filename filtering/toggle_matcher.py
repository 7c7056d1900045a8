"""Must-be-true toggle matching."""

from __future__ import annotations

from typing import Any

from components.component_models import ComponentDescriptor, ComponentRoles
from filtering.base_matcher import ComponentMatcher
from filtering.filter_models import FilterDefinition, FilterResult


class ToggleMatcher(ComponentMatcher):
    """Exclude only components whose flag is explicitly false while the toggle is on."""

    matcher_id = "toggle"

    def apply(
        self,
        component: ComponentDescriptor,
        roles: ComponentRoles,
        definition: FilterDefinition,
        value: Any,
    ) -> FilterResult:
        resolved = self._resolver.resolve_boolean(component, roles, definition.id)
        if resolved is None:
            return FilterResult(passed=True, reason="flag_unresolved")

        if value is True and resolved is False:
            return FilterResult(passed=False, reason="flag_false")
        return FilterResult(passed=True)
