"""Layered field lookup over untyped component data.

Every semantic intent (date, category, numeric, boolean) is described by a
search plan: an ordered tuple of :class:`SearchStep`. A step only runs when
its roles intersect the roles of the component (an empty role set means
"any component"), and the first step returning something other than
``None`` wins. Probes read the descriptor and never raise.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from components.component_models import ComponentDescriptor, ComponentRole, ComponentRoles
from components.json_walker import (
    first_named,
    first_named_nested,
    first_value,
    first_value_nested,
    get_path,
    is_iso_date_string,
    is_number,
)

CARD = ComponentRole.CARD
TIME_SERIES = ComponentRole.TIME_SERIES
AGGREGATION = ComponentRole.AGGREGATION

COMMON_DATE_FIELDS = (
    "date",
    "dateField",
    "timestamp",
    "created",
    "updated",
    "time",
    "datetime",
    "period",
    "reportDate",
    "orderDate",
    "createdAt",
    "updatedAt",
    "startDate",
    "endDate",
)
TOP_LEVEL_CATEGORY_FIELDS = ("category", "type", "tags", "group")
COMMON_CATEGORY_FIELDS = (
    "category",
    "type",
    "tags",
    "group",
    "classification",
    "segment",
    "region",
    "product",
    "department",
)
COMMON_BOOLEAN_FIELDS = (
    "isActive",
    "isEnabled",
    "isVisible",
    "active",
    "enabled",
    "visible",
    "status",
    "completed",
    "success",
)


@dataclass(frozen=True, slots=True)
class ProbeContext:
    """Inputs available to a probe."""

    component: ComponentDescriptor
    filter_id: str = ""

    @property
    def data(self) -> dict[str, Any]:
        return self.component.data_dict


Probe = Callable[[ProbeContext], Any]


@dataclass(frozen=True, slots=True)
class SearchStep:
    """One entry of a search plan."""

    name: str
    probe: Probe
    roles: frozenset[ComponentRole] = frozenset()

    def applies_to(self, roles: ComponentRoles) -> bool:
        return not self.roles or bool(self.roles & roles.roles)


def _path(path: str, predicate: Callable[[Any], bool] | None = None) -> Probe:
    def probe(ctx: ProbeContext) -> Any:
        value = get_path(ctx.data, path)
        if value is None or (predicate is not None and not predicate(value)):
            return None
        return value

    return probe


def _first_series_date(ctx: ProbeContext) -> Any:
    series = ctx.data.get("series")
    if not isinstance(series, list):
        return None
    for entry in series:
        value = get_path(entry, "data.0.x")
        if value is not None:
            return value
    return None


def _last_series_point(ctx: ProbeContext) -> Any:
    value = get_path(ctx.data, "series.0.data.-1.y")
    return value if is_number(value) else None


def _dimension_matching_filter(ctx: ProbeContext) -> Any:
    dimensions = ctx.data.get("dimensions")
    if not isinstance(dimensions, dict) or not ctx.filter_id:
        return None
    wanted = ctx.filter_id.lower()
    for key, value in dimensions.items():
        if str(key).lower() == wanted and value is not None:
            return value
    return None


def _top_level_property(name: str) -> Probe:
    def probe(ctx: ProbeContext) -> Any:
        value = ctx.component.get(name)
        return value if value not in (None, "", []) else None

    return probe


def _data_field_for_filter(predicate: Callable[[Any], bool] | None = None) -> Probe:
    def probe(ctx: ProbeContext) -> Any:
        if not ctx.filter_id:
            return None
        value = ctx.data.get(ctx.filter_id)
        if value is None or (predicate is not None and not predicate(value)):
            return None
        return value

    return probe


def _component_type(ctx: ProbeContext) -> Any:
    return ctx.component.type or None


def _common_boolean(ctx: ProbeContext) -> Any:
    for name in COMMON_BOOLEAN_FIELDS:
        value = ctx.data.get(name)
        if isinstance(value, bool):
            return value
        if name == "status" and isinstance(value, str):
            return value.strip().lower() == "active"
    return None


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


DATE_PLAN: tuple[SearchStep, ...] = (
    SearchStep("series_first_x", _first_series_date, frozenset({TIME_SERIES})),
    SearchStep("period", _path("period"), frozenset({CARD, AGGREGATION})),
    SearchStep("timestamp", _path("timestamp"), frozenset({CARD, AGGREGATION})),
    SearchStep("date", _path("date"), frozenset({CARD, AGGREGATION})),
    SearchStep("timeframe_start", _path("timeframe.start"), frozenset({CARD, AGGREGATION})),
    SearchStep("timeframe_end", _path("timeframe.end"), frozenset({CARD, AGGREGATION})),
    SearchStep("calculation_period_start", _path("calculationPeriod.start"), frozenset({AGGREGATION})),
    SearchStep("calculation_period_end", _path("calculationPeriod.end"), frozenset({AGGREGATION})),
    SearchStep("common_names", lambda ctx: first_named(ctx.data, COMMON_DATE_FIELDS)),
    SearchStep("common_names_nested", lambda ctx: first_named_nested(ctx.data, COMMON_DATE_FIELDS)),
    SearchStep("iso_string", lambda ctx: first_value(ctx.data, is_iso_date_string)),
    SearchStep("iso_string_nested", lambda ctx: first_value_nested(ctx.data, is_iso_date_string)),
)

CATEGORY_PLAN: tuple[SearchStep, ...] = (
    SearchStep("card_category", _path("category"), frozenset({CARD})),
    SearchStep("card_tags", _path("tags"), frozenset({CARD})),
    SearchStep("card_type", _path("cardType"), frozenset({CARD})),
    SearchStep("series_category", _path("series.0.category"), frozenset({TIME_SERIES})),
    SearchStep("series_tags", _path("series.0.tags"), frozenset({TIME_SERIES})),
    SearchStep("metadata_category", _path("metadata.category"), frozenset({TIME_SERIES, AGGREGATION})),
    SearchStep("metadata_tags", _path("metadata.tags"), frozenset({TIME_SERIES})),
    SearchStep("dimension", _dimension_matching_filter, frozenset({AGGREGATION})),
    *(SearchStep(f"component_{name}", _top_level_property(name)) for name in TOP_LEVEL_CATEGORY_FIELDS),
    SearchStep("data_filter_id", _data_field_for_filter()),
    SearchStep("common_names", lambda ctx: first_named(ctx.data, COMMON_CATEGORY_FIELDS)),
    SearchStep("component_type_fallback", _component_type),
)

NUMERIC_PLAN: tuple[SearchStep, ...] = (
    SearchStep("value", _path("value", is_number), frozenset({CARD, AGGREGATION})),
    SearchStep("total", _path("total", is_number), frozenset({CARD, AGGREGATION})),
    SearchStep("count", _path("count", is_number), frozenset({CARD, AGGREGATION})),
    SearchStep("summary_average", _path("summary.average", is_number), frozenset({TIME_SERIES})),
    SearchStep("summary_latest", _path("summary.latest", is_number), frozenset({TIME_SERIES})),
    SearchStep("series_last_point", _last_series_point, frozenset({TIME_SERIES})),
    SearchStep("first_number", lambda ctx: first_value(ctx.data, is_number)),
    SearchStep("first_number_nested", lambda ctx: first_value_nested(ctx.data, is_number)),
)

BOOLEAN_PLAN: tuple[SearchStep, ...] = (
    SearchStep("data_filter_id", _data_field_for_filter(_is_bool)),
    SearchStep("common_names", _common_boolean),
)

TYPE_FALLBACK_STEPS = frozenset({"component_type", "component_type_fallback"})


class FieldResolver:
    """Resolve date, category, numeric and boolean fields of a component."""

    def __init__(self, *, category_type_fallback: bool = True) -> None:
        self._category_plan = CATEGORY_PLAN
        if not category_type_fallback:
            self._category_plan = tuple(step for step in CATEGORY_PLAN if step.name not in TYPE_FALLBACK_STEPS)

    @property
    def category_plan(self) -> tuple[SearchStep, ...]:
        return self._category_plan

    def resolve_date(self, component: ComponentDescriptor, roles: ComponentRoles) -> Any:
        return self.run(DATE_PLAN, component, roles)

    def resolve_category(self, component: ComponentDescriptor, roles: ComponentRoles, filter_id: str = "") -> Any:
        return self.run(self._category_plan, component, roles, filter_id=filter_id)

    def resolve_numeric(self, component: ComponentDescriptor, roles: ComponentRoles) -> float | None:
        return self.run(NUMERIC_PLAN, component, roles)

    def resolve_boolean(self, component: ComponentDescriptor, roles: ComponentRoles, filter_id: str = "") -> bool | None:
        return self.run(BOOLEAN_PLAN, component, roles, filter_id=filter_id)

    @staticmethod
    def run(
        plan: tuple[SearchStep, ...],
        component: ComponentDescriptor,
        roles: ComponentRoles,
        *,
        filter_id: str = "",
    ) -> Any:
        """Evaluate a search plan and return the first hit, or ``None``."""

        ctx = ProbeContext(component=component, filter_id=filter_id)
        for step in plan:
            if not step.applies_to(roles):
                continue
            value = step.probe(ctx)
            if value is not None:
                return value
        return None
