"""Free-text search over titles and string content."""

from __future__ import annotations

from typing import Any

from components.component_models import ComponentDescriptor, ComponentRoles
from components.json_walker import iter_strings
from filtering.base_matcher import ComponentMatcher
from filtering.filter_models import FilterDefinition, FilterResult


class SearchMatcher(ComponentMatcher):
    """Case-insensitive substring search; any single hit keeps the component."""

    matcher_id = "search"

    def apply(
        self,
        component: ComponentDescriptor,
        roles: ComponentRoles,
        definition: FilterDefinition,
        value: Any,
    ) -> FilterResult:
        query = str(value).strip().lower() if value is not None else ""
        if not query:
            return FilterResult(passed=True)
        if len(query) < definition.min_length:
            return FilterResult(passed=True, reason="query_too_short")

        if component.title and query in component.title.lower():
            return FilterResult(passed=True, reason="title")

        content = component.data_dict.get("content")
        if roles.is_card and isinstance(content, str) and query in content.lower():
            return FilterResult(passed=True, reason="content")

        for field in definition.search_fields:
            if any(query in text.lower() for text in iter_strings(component.get(field))):
                return FilterResult(passed=True, reason=field)

        if any(query in text.lower() for text in iter_strings(component.data)):
            return FilterResult(passed=True, reason="data")

        return FilterResult(passed=False, reason="no_text_match")
