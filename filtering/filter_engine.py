"""Filter engine: applies active dashboard filters to component descriptors."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from structlog.stdlib import BoundLogger

from components.component_classifier import ComponentClassifier
from components.component_models import ComponentDescriptor
from components.field_resolver import FieldResolver
from core.logger import get_logger
from filtering.base_matcher import ComponentMatcher
from filtering.date_range_matcher import DateRangeMatcher
from filtering.filter_models import FilterDecision, FilterDefinition, FilterType
from filtering.filter_values import is_active_value, normalize_value
from filtering.multi_select_matcher import MultiSelectMatcher
from filtering.numeric_range_matcher import NumericRangeMatcher
from filtering.search_matcher import SearchMatcher
from filtering.toggle_matcher import ToggleMatcher


@dataclass(slots=True)
class FilterOutcome:
    """Filtered components plus the per-filter decision trace."""

    components: list[ComponentDescriptor]
    decisions: list[FilterDecision] = field(default_factory=list)

    @property
    def excluded_ids(self) -> list[str]:
        seen: list[str] = []
        for decision in self.decisions:
            if not decision.passed and decision.component_id not in seen:
                seen.append(decision.component_id)
        return seen

    def exclusions_for(self, component_id: str) -> list[FilterDecision]:
        return [item for item in self.decisions if item.component_id == component_id and not item.passed]


class FilterEngine:
    """Stateless AND-combination of type-specific matchers.

    The output is a pure function of ``(components, definitions, state)``: input
    order is preserved and descriptors are returned as-is.
    """

    def __init__(
        self,
        *,
        resolver: FieldResolver | None = None,
        classifier: ComponentClassifier | None = None,
        logger: BoundLogger | None = None,
        category_type_fallback: bool = True,
    ) -> None:
        self._resolver = resolver or FieldResolver(category_type_fallback=category_type_fallback)
        self._classifier = classifier or ComponentClassifier()
        self._logger = logger or get_logger("filtering.filter_engine")

        multi_select = MultiSelectMatcher(self._resolver)
        self._matchers: dict[str, ComponentMatcher] = {
            FilterType.DATE_RANGE: DateRangeMatcher(self._resolver),
            FilterType.DROPDOWN: multi_select,
            FilterType.CHECKBOX: multi_select,
            FilterType.RADIO: multi_select,
            FilterType.SEARCH: SearchMatcher(self._resolver),
            FilterType.RANGE_SLIDER: NumericRangeMatcher(self._resolver),
            FilterType.TOGGLE: ToggleMatcher(self._resolver),
        }

    def register_matcher(self, filter_type: str, matcher: ComponentMatcher) -> None:
        """Register or replace the matcher used for a filter type."""

        self._matchers[filter_type] = matcher

    def matcher_for(self, filter_type: str) -> ComponentMatcher | None:
        return self._matchers.get(filter_type)

    def apply(
        self,
        components: Sequence[ComponentDescriptor],
        definitions: Iterable[FilterDefinition],
        state: Mapping[str, Any],
    ) -> list[ComponentDescriptor]:
        """Return the components that pass every active filter, in input order."""

        return self.evaluate(components, definitions, state).components

    def evaluate(
        self,
        components: Sequence[ComponentDescriptor],
        definitions: Iterable[FilterDefinition],
        state: Mapping[str, Any],
    ) -> FilterOutcome:
        """Filter components and record which filter excluded which component."""

        if not state:
            return FilterOutcome(components=list(components))

        active = self._active_filters({item.id: item for item in definitions}, state)
        if not active:
            return FilterOutcome(components=list(components))

        kept: list[ComponentDescriptor] = []
        decisions: list[FilterDecision] = []
        for component in components:
            roles = self._classifier.classify(component)
            excluded = False
            for definition, value, matcher in active:
                if not definition.affects(component.id):
                    continue
                result = matcher.apply(component, roles, definition, value)
                decisions.append(
                    FilterDecision(
                        component_id=component.id,
                        filter_id=definition.id,
                        filter_type=definition.type,
                        passed=result.passed,
                        reason=result.reason,
                    )
                )
                if not result.passed:
                    self._logger.debug(
                        "component_excluded",
                        component_id=component.id,
                        filter_id=definition.id,
                        reason=result.reason,
                        role=roles.primary.value,
                    )
                    excluded = True
                    break
            if not excluded:
                kept.append(component)

        return FilterOutcome(components=kept, decisions=decisions)

    def _active_filters(
        self,
        definitions: Mapping[str, FilterDefinition],
        state: Mapping[str, Any],
    ) -> list[tuple[FilterDefinition, Any, ComponentMatcher]]:
        active: list[tuple[FilterDefinition, Any, ComponentMatcher]] = []
        unknown_types: set[str] = set()
        for filter_id, raw_value in state.items():
            definition = definitions.get(filter_id)
            if definition is None:
                continue

            value = normalize_value(definition, raw_value)
            if not is_active_value(definition, value):
                continue

            matcher = self._matchers.get(definition.type)
            if matcher is None:
                unknown_types.add(definition.type)
                continue
            active.append((definition, value, matcher))

        for filter_type in sorted(unknown_types):
            self._logger.warning("unknown_filter_type_skipped", filter_type=filter_type)
        return active
