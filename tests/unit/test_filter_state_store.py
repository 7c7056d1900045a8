from __future__ import annotations

import json
from pathlib import Path

import structlog
import yaml
from structlog.testing import LogCapture

from filtering.filter_models import DashboardFiltersConfig
from storage.filter_state_store import FilterStateStore, display_value
from storage.persistence import InMemoryPersistence, JSONFilePersistence
from storage.query_string import InMemoryQueryString
from tests.unit._component_fixtures import (
    checkbox_filter,
    date_range_filter,
    make_filters_config,
    range_filter,
    sample_components,
    toggle_filter,
)


def _store(
    *,
    query: str = "",
    raw: str | None = None,
    sync_with_url: bool = True,
    persist_filters: bool = True,
    log_output: LogCapture | None = None,
) -> tuple[FilterStateStore, InMemoryQueryString, InMemoryPersistence]:
    query_string = InMemoryQueryString(query)
    persistence = InMemoryPersistence(raw)
    logger = structlog.wrap_logger(None, processors=[log_output or LogCapture()])
    store = FilterStateStore(
        make_filters_config(sync_with_url=sync_with_url, persist_filters=persist_filters),
        components=sample_components(),
        persistence=persistence,
        query_string=query_string,
        logger=logger,
    )
    return store, query_string, persistence


def _ids(store: FilterStateStore) -> list[str]:
    return [component.id for component in store.visible_components]


def test_hydrate_from_query_string() -> None:
    store, _, _ = _store(query="region=north,south&valueRange=100,500")
    state = store.hydrate()
    assert state == {"region": ["north", "south"], "valueRange": [100, 500]}
    assert store.active_filter_count == 2
    assert store.has_active_filters


def test_query_string_wins_over_storage() -> None:
    raw = json.dumps({"region": ["east"], "realtime": True})
    store, _, _ = _store(query="region=north", raw=raw)
    assert store.hydrate() == {"region": ["north"], "realtime": True}


def test_hydrate_respects_disabled_sources() -> None:
    raw = json.dumps({"realtime": True})
    store, _, _ = _store(query="region=north", raw=raw, sync_with_url=False, persist_filters=False)
    assert store.hydrate() == {}


def test_malformed_storage_is_treated_as_empty() -> None:
    output = LogCapture()
    store, _, _ = _store(raw="{not json", log_output=output)
    assert store.hydrate() == {}
    assert any(entry["event"] == "persisted_filters_unreadable" for entry in output.entries)


def test_stale_and_default_stored_values_are_dropped() -> None:
    raw = json.dumps({"legacy": ["x"], "valueRange": [0, 1000], "metrics": "cost"})
    store, _, _ = _store(raw=raw)
    assert store.hydrate() == {"metrics": ["cost"]}


def test_set_filters_components_and_syncs() -> None:
    store, query_string, persistence = _store(query="utm_source=mail")
    store.hydrate()

    store.set("valueRange", [200, 300])

    assert "c1" not in _ids(store)
    assert query_string.read() == {"utm_source": "mail", "valueRange": "200,300"}
    assert json.loads(persistence.raw or "{}") == {"valueRange": [200, 300]}


def test_set_default_value_removes_filter() -> None:
    store, query_string, _ = _store()
    store.set("realtime", True)
    assert store.state == {"realtime": True}

    store.set("realtime", False)
    assert store.state == {}
    assert query_string.read() == {}


def test_set_then_clear_restores_original_components() -> None:
    store, _, _ = _store()
    store.hydrate()
    original = _ids(store)

    store.set("search", "zebra")
    assert _ids(store) == []

    store.set("search", "")
    assert _ids(store) == original


def test_unknown_filter_is_ignored_with_warning() -> None:
    output = LogCapture()
    store, _, persistence = _store(log_output=output)
    assert store.set("legacy", "x") == {}
    assert persistence.writes == 0
    assert any(entry["event"] == "unknown_filter_ignored" for entry in output.entries)


def test_clear_bar_resets_only_its_filters() -> None:
    store, _, _ = _store()
    store.set("region", ["north"])
    store.set("valueRange", [0, 500])

    store.clear_bar("top")
    assert store.state == {"valueRange": [0, 500]}

    store.clear_bar("missing")
    assert store.state == {"valueRange": [0, 500]}


def test_reset_clears_url_and_storage() -> None:
    store, query_string, persistence = _store(query="page=2")
    store.set("region", ["north"])
    store.set("realtime", True)

    store.reset()

    assert store.state == {}
    assert query_string.read() == {"page": "2"}
    assert json.loads(persistence.raw or "null") == {}
    assert store.visible_components == store.components


def test_value_of_falls_back_to_default() -> None:
    store, _, _ = _store()
    assert store.value_of("metrics") == ["revenue", "profit"]
    store.set("metrics", ["cost"])
    assert store.value_of("metrics") == ["cost"]
    assert store.value_of("legacy") is None


def test_subscribers_receive_state_and_visible_components() -> None:
    store, _, _ = _store()
    received: list[tuple[dict, list[str]]] = []
    unsubscribe = store.subscribe(lambda state, visible: received.append((state, [item.id for item in visible])))

    store.set("valueRange", [200, 300])
    unsubscribe()
    store.set("valueRange", [0, 1000])

    assert len(received) == 1
    state, visible = received[0]
    assert state == {"valueRange": [200, 300]}
    assert "c1" not in visible


def test_set_components_refilters() -> None:
    store, _, _ = _store()
    store.set("search", "churn")
    assert _ids(store) == ["kpi"]
    visible = store.set_components(sample_components()[:2])
    assert visible == []


def test_summary_uses_display_labels() -> None:
    store, _, _ = _store()
    store.set("metrics", ["cost", "revenue"])
    store.set("valueRange", [100, 250])
    store.set("realtime", True)

    summary = {item.filter_id: (item.label, item.display_value) for item in store.summary()}
    assert summary == {
        "metrics": ("Metrics", "Cost, Revenue"),
        "valueRange": ("Value Range", "$100 - $250"),
        "realtime": ("Real-time", "On"),
    }


def test_display_value_formats() -> None:
    assert display_value(date_range_filter(), ["2025-01-01", "2025-01-31"]) == "2025-01-01 - 2025-01-31"
    assert display_value(range_filter(), 300) == "$300"
    assert display_value(toggle_filter(), False) == "Off"
    assert display_value(checkbox_filter(), ["unknown"]) == "unknown"


def test_json_file_persistence_round_trip(tmp_path: Path) -> None:
    persistence = JSONFilePersistence(tmp_path / "state", "dash")
    assert persistence.load() is None

    persistence.save({"region": ["north"]})

    assert persistence.path == tmp_path / "state" / "dash.json"
    assert persistence.load() == {"region": ["north"]}
    assert not (tmp_path / "state" / "dash.json.tmp").exists()


def test_store_with_file_persistence_survives_restart(tmp_path: Path) -> None:
    config = make_filters_config(sync_with_url=False)
    first = FilterStateStore(config, components=sample_components(), persistence=JSONFilePersistence(tmp_path))
    first.set("valueRange", [200, 300])

    second = FilterStateStore(config, components=sample_components(), persistence=JSONFilePersistence(tmp_path))
    assert second.hydrate() == {"valueRange": [200, 300]}
    assert "c1" not in [component.id for component in second.visible_components]


UNQUOTED_DATES_YAML = """
filters:
  - id: dateRange
    type: dateRange
    label: Date Range
    defaultValue: [2025-01-01, 2025-12-31]
    presets:
      - {label: First quarter, value: [2025-01-01, 2025-03-31]}
globalSettings:
  syncWithUrl: true
  persistFilters: true
"""


def test_unquoted_yaml_date_default_is_inactive() -> None:
    config = DashboardFiltersConfig.model_validate(yaml.safe_load(UNQUOTED_DATES_YAML))
    query_string = InMemoryQueryString()
    persistence = InMemoryPersistence()
    store = FilterStateStore(config, components=sample_components(), persistence=persistence, query_string=query_string)

    assert config.definition("dateRange").presets[0].value == ("2025-01-01", "2025-03-31")
    assert store.value_of("dateRange") == ["2025-01-01", "2025-12-31"]

    store.set("dateRange", ["2025-01-01", "2025-12-31"])
    assert store.state == {}

    store.set("dateRange", ["2025-01-01", "2025-03-31"])
    store.set("dateRange", ["2025-01-01", "2025-12-31"])
    assert store.state == {}
    assert query_string.read() == {}
    assert json.loads(persistence.raw or "null") == {}


def test_hydrate_without_storage_adapter_reads_only_query_string() -> None:
    store = FilterStateStore(
        make_filters_config(),
        components=sample_components(),
        query_string=InMemoryQueryString("realtime=true"),
    )
    assert store.hydrate() == {"realtime": True}
