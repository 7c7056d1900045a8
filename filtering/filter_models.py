"""Filter configuration and evaluation models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

FilterValue = str | list[str] | float | list[float] | bool | None
ActiveFilterState = dict[str, Any]


class FilterType(StrEnum):
    """Supported filter widget types."""

    DATE_RANGE = "dateRange"
    DROPDOWN = "dropdown"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SEARCH = "search"
    RANGE_SLIDER = "rangeSlider"
    TOGGLE = "toggle"


MULTI_SELECT_TYPES = frozenset({FilterType.DROPDOWN, FilterType.CHECKBOX, FilterType.RADIO})
PAIR_TYPES = frozenset({FilterType.DATE_RANGE, FilterType.RANGE_SLIDER})


class FilterPlacement(StrEnum):
    """Where a filter bar is rendered."""

    TOPBAR = "topbar"
    SIDEBAR = "sidebar"
    INLINE = "inline"
    FLOATING = "floating"


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class FilterOption(_ConfigModel):
    """One selectable option of a dropdown, checkbox or radio filter."""

    value: str
    label: str = ""
    icon: str | None = None
    disabled: bool = False
    group: str | None = None


class DatePreset(_ConfigModel):
    """Named date range shortcut."""

    label: str
    value: tuple[str, str]

    @field_validator("value", mode="before")
    @classmethod
    def dates_as_iso_text(cls, value: Any) -> Any:
        # unquoted YAML dates arrive as date objects
        if isinstance(value, list | tuple):
            return tuple(item.isoformat() if isinstance(item, date) else item for item in value)
        return value


class FilterDefinition(_ConfigModel):
    """Static definition of one dashboard filter."""

    id: str
    type: str
    label: str = ""
    placement: FilterPlacement = FilterPlacement.TOPBAR
    default_value: Any = None
    affects_components: Literal["all"] | list[str] = "all"
    placeholder: str | None = None
    description: str | None = None

    # dropdown / checkbox / radio
    options: list[FilterOption] = Field(default_factory=list)
    multiple: bool = False

    # rangeSlider
    min: float | None = None
    max: float | None = None
    step: float | None = None
    range: bool = True
    value_format: str | None = None

    # toggle
    on_label: str = "On"
    off_label: str = "Off"

    # dateRange
    presets: list[DatePreset] = Field(default_factory=list)

    # search
    search_fields: list[str] = Field(default_factory=list)
    min_length: int = Field(default=0, ge=0)

    @property
    def filter_type(self) -> FilterType | None:
        """Return the known filter type, or None for an unsupported type."""

        try:
            return FilterType(self.type)
        except ValueError:
            return None

    @property
    def is_multi_select(self) -> bool:
        filter_type = self.filter_type
        if filter_type == FilterType.CHECKBOX:
            return True
        if filter_type == FilterType.DROPDOWN:
            return self.multiple or isinstance(self.default_value, list)
        return False

    def affects(self, component_id: str) -> bool:
        """Return whether this filter applies to the given component id."""

        if self.affects_components == "all":
            return True
        return component_id in self.affects_components

    def option_label(self, value: str) -> str:
        for option in self.options:
            if option.value == value:
                return option.label or option.value
        return value


class FilterBar(_ConfigModel):
    """Group of filters rendered and cleared together."""

    id: str
    placement: FilterPlacement = FilterPlacement.TOPBAR
    filters: list[str] = Field(default_factory=list)
    title: str | None = None
    show_clear_all: bool = True
    show_filter_count: bool = True


class FilterSettings(_ConfigModel):
    """Dashboard-wide filter behaviour."""

    sync_with_url: bool = False
    persist_filters: bool = False
    storage_key: str = "dashboard_filters"
    show_filter_summary: bool = False
    category_type_fallback: bool = True


class DashboardFiltersConfig(_ConfigModel):
    """Complete filter configuration of one dashboard."""

    filters: list[FilterDefinition] = Field(default_factory=list)
    filter_bars: list[FilterBar] = Field(default_factory=list)
    global_settings: FilterSettings = Field(default_factory=FilterSettings)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> DashboardFiltersConfig:
        seen: set[str] = set()
        for definition in self.filters:
            if definition.id in seen:
                raise ValueError(f"duplicate filter id: {definition.id}")
            seen.add(definition.id)
        return self

    def definition(self, filter_id: str) -> FilterDefinition | None:
        for definition in self.filters:
            if definition.id == filter_id:
                return definition
        return None

    def filter_bar(self, filter_bar_id: str) -> FilterBar | None:
        for filter_bar in self.filter_bars:
            if filter_bar.id == filter_bar_id:
                return filter_bar
        return None


@dataclass(slots=True)
class FilterResult:
    """Result of applying one filter to one component."""

    passed: bool
    reason: str | None = None


class FilterDecision(BaseModel):
    """Trace record: one filter evaluated against one component."""

    component_id: str
    filter_id: str
    filter_type: str
    passed: bool
    reason: str | None = None


class ActiveFilterSummary(BaseModel):
    """Human-readable view of one active filter."""

    filter_id: str
    label: str
    display_value: str


__all__ = [
    "ActiveFilterState",
    "ActiveFilterSummary",
    "DashboardFiltersConfig",
    "DatePreset",
    "FilterBar",
    "FilterDecision",
    "FilterDefinition",
    "FilterOption",
    "FilterPlacement",
    "FilterResult",
    "FilterSettings",
    "FilterType",
    "FilterValue",
    "MULTI_SELECT_TYPES",
    "PAIR_TYPES",
]
