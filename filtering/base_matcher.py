"""Base contract for component filter matchers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from components.component_models import ComponentDescriptor, ComponentRoles
from components.field_resolver import FieldResolver
from filtering.filter_models import FilterDefinition, FilterResult


class ComponentMatcher(ABC):
    """Pure predicate deciding whether a component survives one active filter.

    A matcher passes whenever the field it needs cannot be located.
    """

    matcher_id: str = "component_matcher"

    def __init__(self, resolver: FieldResolver | None = None) -> None:
        self._resolver = resolver or FieldResolver()

    @abstractmethod
    def apply(
        self,
        component: ComponentDescriptor,
        roles: ComponentRoles,
        definition: FilterDefinition,
        value: Any,
    ) -> FilterResult:
        """Evaluate the active value against the component."""

    def matches(
        self,
        component: ComponentDescriptor,
        roles: ComponentRoles,
        definition: FilterDefinition,
        value: Any,
    ) -> bool:
        return self.apply(component, roles, definition, value).passed
