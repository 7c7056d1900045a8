"""Active filter state: hydration, URL/storage sync and re-filtering."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from structlog.stdlib import BoundLogger

from components.component_models import ComponentDescriptor
from core.logger import get_logger
from filtering.filter_engine import FilterEngine, FilterOutcome
from filtering.filter_models import (
    ActiveFilterState,
    ActiveFilterSummary,
    DashboardFiltersConfig,
    FilterDefinition,
    FilterType,
)
from filtering.filter_values import as_string_list, is_active_value, normalize_value
from storage.persistence import PersistenceAdapter
from storage.query_string import QueryStringAdapter
from storage.url_codec import decode_params, decode_stored_value, encode_state, encode_value

StateListener = Callable[[ActiveFilterState, list[ComponentDescriptor]], None]


class FilterStateStore:
    """Single owner of the active filter map of one dashboard.

    Only non-default values are kept. Every change is pushed to the query
    string and to persisted storage (when enabled in the filter settings) and
    the dashboard components are filtered again.
    """

    def __init__(
        self,
        config: DashboardFiltersConfig,
        *,
        components: Iterable[ComponentDescriptor] = (),
        engine: FilterEngine | None = None,
        persistence: PersistenceAdapter | None = None,
        query_string: QueryStringAdapter | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._config = config
        self._settings = config.global_settings
        self._logger = logger or get_logger("storage.filter_state_store")
        self._engine = engine or FilterEngine(
            logger=self._logger,
            category_type_fallback=self._settings.category_type_fallback,
        )
        self._persistence = persistence
        self._query_string = query_string
        self._components = list(components)
        self._state: ActiveFilterState = {}
        self._outcome = FilterOutcome(components=list(self._components))
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> ActiveFilterState:
        return dict(self._state)

    @property
    def components(self) -> list[ComponentDescriptor]:
        return list(self._components)

    @property
    def visible_components(self) -> list[ComponentDescriptor]:
        return list(self._outcome.components)

    @property
    def last_outcome(self) -> FilterOutcome:
        return self._outcome

    @property
    def active_filter_count(self) -> int:
        return len(self._state)

    @property
    def has_active_filters(self) -> bool:
        return bool(self._state)

    def value_of(self, filter_id: str) -> Any:
        """Return the active value, or the definition's default when inactive."""

        if filter_id in self._state:
            return self._state[filter_id]
        definition = self._config.definition(filter_id)
        return normalize_value(definition, definition.default_value) if definition is not None else None

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a change listener; returns a function removing it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_components(self, components: Iterable[ComponentDescriptor]) -> list[ComponentDescriptor]:
        self._components = list(components)
        self._refilter()
        return self.visible_components

    def hydrate(self) -> ActiveFilterState:
        """Load state from storage, then the query string (query string wins)."""

        merged: ActiveFilterState = {}
        if self._settings.persist_filters and self._persistence is not None:
            merged.update(self._load_persisted(self._persistence))
        if self._settings.sync_with_url and self._query_string is not None:
            merged.update(decode_params(self._config.filters, self._query_string.read()))

        self._state = merged
        self._refilter()
        self._logger.info("filters_hydrated", active=sorted(self._state))
        return self.state

    def set(self, filter_id: str, value: Any) -> ActiveFilterState:
        """Set one filter; default or empty values remove it from the active map."""

        definition = self._config.definition(filter_id)
        if definition is None:
            self._logger.warning("unknown_filter_ignored", filter_id=filter_id)
            return self.state

        self._put(definition, value)
        self._commit()
        return self.state

    def clear_bar(self, filter_bar_id: str) -> ActiveFilterState:
        """Reset every filter of one filter bar to its default."""

        filter_bar = self._config.filter_bar(filter_bar_id)
        if filter_bar is None:
            self._logger.warning("unknown_filter_bar_ignored", filter_bar_id=filter_bar_id)
            return self.state

        for filter_id in filter_bar.filters:
            self._state.pop(filter_id, None)
        self._commit()
        return self.state

    def reset(self) -> ActiveFilterState:
        """Reset every filter to its default."""

        self._state.clear()
        self._commit()
        return self.state

    def summary(self) -> list[ActiveFilterSummary]:
        """Describe active filters for display, in definition order."""

        items: list[ActiveFilterSummary] = []
        for definition in self._config.filters:
            if definition.id not in self._state:
                continue
            items.append(
                ActiveFilterSummary(
                    filter_id=definition.id,
                    label=definition.label or definition.id,
                    display_value=display_value(definition, self._state[definition.id]),
                )
            )
        return items

    def _put(self, definition: FilterDefinition, value: Any) -> None:
        normalized = normalize_value(definition, value)
        if is_active_value(definition, normalized):
            self._state[definition.id] = normalized
        else:
            self._state.pop(definition.id, None)

    def _commit(self) -> None:
        self._sync_query_string()
        self._sync_storage()
        self._refilter()
        for listener in list(self._listeners):
            listener(self.state, self.visible_components)

    def _refilter(self) -> None:
        self._outcome = self._engine.evaluate(self._components, self._config.filters, self._state)

    def _load_persisted(self, persistence: PersistenceAdapter) -> ActiveFilterState:
        try:
            payload = persistence.load()
        except (OSError, ValueError) as exc:
            self._logger.warning("persisted_filters_unreadable", error=str(exc))
            return {}

        if payload is None:
            return {}
        if not isinstance(payload, dict):
            self._logger.warning("persisted_filters_ignored", payload_type=type(payload).__name__)
            return {}

        state: ActiveFilterState = {}
        for filter_id, stored in payload.items():
            definition = self._config.definition(filter_id)
            if definition is None:
                self._logger.debug("stale_filter_dropped", filter_id=filter_id)
                continue
            value = decode_stored_value(definition, stored)
            if is_active_value(definition, value):
                state[filter_id] = value
        return state

    def _sync_query_string(self) -> None:
        if not self._settings.sync_with_url or self._query_string is None:
            return
        params = self._query_string.read()
        for definition in self._config.filters:
            params.pop(definition.id, None)
        params.update(encode_state(self._config.filters, self._state))
        self._query_string.write(params)

    def _sync_storage(self) -> None:
        if not self._settings.persist_filters or self._persistence is None:
            return
        try:
            self._persistence.save(dict(self._state))
        except OSError as exc:
            self._logger.warning("persisted_filters_not_saved", error=str(exc))


def display_value(definition: FilterDefinition, value: Any) -> str:
    """Format an active value the way the filter summary shows it."""

    filter_type = definition.filter_type
    if filter_type in (FilterType.DROPDOWN, FilterType.CHECKBOX, FilterType.RADIO):
        return ", ".join(definition.option_label(item) for item in as_string_list(value))
    if filter_type == FilterType.DATE_RANGE and isinstance(value, list | tuple):
        return " - ".join(str(item) for item in value)
    if filter_type == FilterType.RANGE_SLIDER:
        bounds = value if isinstance(value, list | tuple) else [value]
        return " - ".join(_format_number(definition, item) for item in bounds)
    if filter_type == FilterType.TOGGLE:
        return definition.on_label if value else definition.off_label
    if isinstance(value, list | tuple):
        return ", ".join(str(item) for item in value)
    return str(value)


def _format_number(definition: FilterDefinition, number: Any) -> str:
    text = encode_value(definition, number)
    if definition.value_format:
        return definition.value_format.replace("{value}", text)
    return text
