from __future__ import annotations

import math
from datetime import date, datetime

from components.component_classifier import classify_component
from components.field_resolver import FieldResolver
from filtering.date_range_matcher import DateRangeMatcher, to_date
from filtering.multi_select_matcher import MultiSelectMatcher
from filtering.numeric_range_matcher import NumericRangeMatcher
from filtering.search_matcher import SearchMatcher
from filtering.toggle_matcher import ToggleMatcher
from tests.unit._component_fixtures import (
    checkbox_filter,
    date_range_filter,
    dropdown_filter,
    make_component,
    range_filter,
    search_filter,
    toggle_filter,
)


def _apply(matcher, component, definition, value):
    return matcher.apply(component, classify_component(component), definition, value)


def test_to_date_accepts_strings_dates_and_datetimes() -> None:
    assert to_date("2025-03-04T23:59:00Z") == date(2025, 3, 4)
    assert to_date(datetime(2025, 3, 4, 12)) == date(2025, 3, 4)
    assert to_date(date(2025, 3, 4)) == date(2025, 3, 4)
    assert to_date("March 4") is None
    assert to_date("2025-13-40") is None
    assert to_date(20250304) is None


def test_date_range_keeps_component_inside_range() -> None:
    component = make_component("c", "Card", data={"date": "2025-06-15"})
    result = _apply(DateRangeMatcher(), component, date_range_filter(), ["2025-06-01", "2025-06-30"])
    assert result.passed


def test_date_range_is_inclusive_at_day_granularity() -> None:
    component = make_component("c", "Card", data={"date": "2025-06-30T18:45:00Z"})
    result = _apply(DateRangeMatcher(), component, date_range_filter(), ["2025-06-01", "2025-06-30"])
    assert result.passed


def test_date_range_excludes_component_outside_range() -> None:
    component = make_component("c", "Card", data={"date": "2025-07-01"})
    result = _apply(DateRangeMatcher(), component, date_range_filter(), ["2025-06-01", "2025-06-30"])
    assert not result.passed
    assert result.reason == "date_out_of_range"


def test_date_range_open_bounds() -> None:
    component = make_component("c", "Card", data={"date": "1999-01-01"})
    matcher = DateRangeMatcher()
    assert _apply(matcher, component, date_range_filter(), ["", "2000-01-01"]).passed
    assert not _apply(matcher, component, date_range_filter(), ["2000-01-01", ""]).passed
    assert _apply(matcher, component, date_range_filter(), ["", ""]).passed


def test_date_range_passes_without_resolvable_date() -> None:
    component = make_component("c3", title="Q1 Summary")
    result = _apply(DateRangeMatcher(), component, date_range_filter(), ["2025-01-01", "2025-01-01"])
    assert result.passed
    assert result.reason == "date_unresolved"


def test_date_range_passes_on_unparseable_date() -> None:
    component = make_component("c", "Card", data={"date": "yesterday"})
    result = _apply(DateRangeMatcher(), component, date_range_filter(), ["2025-01-01", "2025-01-31"])
    assert result.passed
    assert result.reason == "date_unparseable"


def test_multi_select_scalar_substring_match() -> None:
    component = make_component("c", "Card", data={"category": "North America"})
    assert _apply(MultiSelectMatcher(), component, dropdown_filter(), ["north"]).passed


def test_multi_select_list_membership() -> None:
    component = make_component("c", "Card", data={"tags": ["South", "retail"]})
    matcher = MultiSelectMatcher()
    assert _apply(matcher, component, dropdown_filter(), ["south"]).passed
    assert not _apply(matcher, component, dropdown_filter(), ["sou"]).passed


def test_multi_select_mapping_values() -> None:
    component = make_component("g", "Table", category={"primary": "finance", "secondary": ["east"]})
    matcher = MultiSelectMatcher()
    assert _apply(matcher, component, dropdown_filter(), ["east"]).passed
    assert not _apply(matcher, component, dropdown_filter(), ["west"]).passed


def test_multi_select_scalar_selection_is_one_element_selection() -> None:
    component = make_component("c", "Card", data={"category": "sales"})
    definition = dropdown_filter("category", multiple=False, defaultValue="all")
    assert _apply(MultiSelectMatcher(), component, definition, "sales").passed
    assert not _apply(MultiSelectMatcher(), component, definition, "marketing").passed


def test_multi_select_type_name_fallback_excludes() -> None:
    component = make_component("c2", "BarChart", data={"category": "marketing"})
    result = _apply(MultiSelectMatcher(), component, dropdown_filter(), ["north", "south"])
    assert not result.passed
    assert result.reason == "category_not_selected"


def test_multi_select_unresolved_category_passes() -> None:
    component = make_component("g", data={"count": 3})
    result = _apply(MultiSelectMatcher(), component, checkbox_filter(), ["cost"])
    assert result.passed
    assert result.reason == "category_unresolved"


def test_multi_select_empty_selection_passes() -> None:
    component = make_component("c", "Card", data={"category": "sales"})
    assert _apply(MultiSelectMatcher(), component, dropdown_filter(), []).passed


def test_multi_select_without_type_fallback_reads_filter_field() -> None:
    component = make_component("c2", "BarChart", data={"region": "south"})
    matcher = MultiSelectMatcher(FieldResolver(category_type_fallback=False))
    assert _apply(matcher, component, dropdown_filter(), ["south"]).passed


def test_search_matches_title_case_insensitively() -> None:
    component = make_component("c3", title="Q1 Summary")
    result = _apply(SearchMatcher(), component, search_filter(), "q1")
    assert result.passed
    assert result.reason == "title"


def test_search_matches_card_content() -> None:
    component = make_component("notes", "TextCard", data={"content": "Saved filters are here"})
    result = _apply(SearchMatcher(), component, search_filter(), "SAVED")
    assert result.passed
    assert result.reason == "content"


def test_search_scans_nested_data_strings() -> None:
    component = make_component("t", "Table", data={"rows": [{"cells": ["alpha", {"name": "Gamma Ray"}]}]})
    assert _apply(SearchMatcher(), component, search_filter(), "gamma").passed


def test_search_uses_configured_search_fields() -> None:
    component = make_component("t", "Table", description="Weekly churn")
    definition = search_filter(searchFields=["description"])
    result = _apply(SearchMatcher(), component, definition, "churn")
    assert result.passed
    assert result.reason == "description"


def test_search_excludes_on_no_match() -> None:
    component = make_component("t", "Table", title="Orders", data={"rows": ["a", "b"]})
    result = _apply(SearchMatcher(), component, search_filter(), "zebra")
    assert not result.passed
    assert result.reason == "no_text_match"


def test_search_blank_and_short_queries_pass() -> None:
    component = make_component("t", "Table", title="Orders")
    definition = search_filter(minLength=3)
    assert _apply(SearchMatcher(), component, definition, "   ").passed
    result = _apply(SearchMatcher(), component, definition, "zz")
    assert result.passed
    assert result.reason == "query_too_short"


def test_numeric_range_inclusive() -> None:
    component = make_component("c1", "Card", data={"value": 120, "label": "Revenue"})
    matcher = NumericRangeMatcher()
    assert _apply(matcher, component, range_filter(), [100, 150]).passed
    assert _apply(matcher, component, range_filter(), [120, 120]).passed
    result = _apply(matcher, component, range_filter(), [200, 300])
    assert not result.passed
    assert result.reason == "number_out_of_range"


def test_numeric_range_unresolved_passes() -> None:
    component = make_component("c3", title="Q1 Summary")
    assert _apply(NumericRangeMatcher(), component, range_filter(), [200, 300]).passed


def test_numeric_bounds_fall_back_to_definition_then_unbounded() -> None:
    definition = range_filter()
    assert NumericRangeMatcher.bounds(definition, [None, 50]) == (0.0, 50.0)
    assert NumericRangeMatcher.bounds(definition, 300) == (0.0, 300.0)
    unbounded = range_filter(min=None, max=None)
    low, high = NumericRangeMatcher.bounds(unbounded, [None, None])
    assert low == -math.inf
    assert high == math.inf


def test_toggle_excludes_only_explicit_false() -> None:
    matcher = ToggleMatcher()
    inactive = make_component("k", "KPI", data={"isActive": False})
    active = make_component("k", "KPI", data={"isActive": True})
    unknown = make_component("k", "KPI", data={"value": 1})

    result = _apply(matcher, inactive, toggle_filter(), True)
    assert not result.passed
    assert result.reason == "flag_false"
    assert _apply(matcher, active, toggle_filter(), True).passed
    assert _apply(matcher, unknown, toggle_filter(), True).passed
    assert _apply(matcher, inactive, toggle_filter(), False).passed


def test_matches_mirrors_apply() -> None:
    component = make_component("c", "Card", data={"date": "2025-07-01"})
    matcher = DateRangeMatcher()
    roles = classify_component(component)
    assert matcher.matches(component, roles, date_range_filter(), ["2025-06-01", "2025-06-30"]) is False
