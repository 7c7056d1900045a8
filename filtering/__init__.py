"""Dashboard filter definitions, matchers and engine."""

from filtering.base_matcher import ComponentMatcher
from filtering.date_range_matcher import DateRangeMatcher
from filtering.filter_engine import FilterEngine, FilterOutcome
from filtering.filter_models import (
    DashboardFiltersConfig,
    FilterBar,
    FilterDecision,
    FilterDefinition,
    FilterResult,
    FilterSettings,
    FilterType,
)
from filtering.multi_select_matcher import MultiSelectMatcher
from filtering.numeric_range_matcher import NumericRangeMatcher
from filtering.search_matcher import SearchMatcher
from filtering.toggle_matcher import ToggleMatcher

__all__ = [
    "ComponentMatcher",
    "DashboardFiltersConfig",
    "DateRangeMatcher",
    "FilterBar",
    "FilterDecision",
    "FilterDefinition",
    "FilterEngine",
    "FilterOutcome",
    "FilterResult",
    "FilterSettings",
    "FilterType",
    "MultiSelectMatcher",
    "NumericRangeMatcher",
    "SearchMatcher",
    "ToggleMatcher",
]
