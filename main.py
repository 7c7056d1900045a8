"""Entry point: filter a configured dashboard from the command line."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.table import Table

from components.component_classifier import ComponentClassifier
from core.config_loader import load_config
from core.logger import configure_logging, get_logger
from storage.filter_state_store import FilterStateStore
from storage.persistence import JSONFilePersistence
from storage.query_string import InMemoryQueryString
from storage.url_codec import decode_value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(description="Dashboard filter runtime")
    parser.add_argument("--config", type=Path, default=Path("config"), help="Config file or directory.")
    parser.add_argument("--query", type=str, default="", help="Query string to hydrate filters from.")
    parser.add_argument("--state-dir", type=Path, default=None, help="Directory holding persisted filter state.")
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="ID=VALUE",
        help="Set a filter using its query-string encoding; repeatable.",
    )
    parser.add_argument("--clear-bar", action="append", default=[], metavar="BAR_ID")
    parser.add_argument("--trace", action="store_true", help="Show which filter excluded which component.")
    return parser.parse_args(argv)


def run(args: argparse.Namespace, console: Console | None = None) -> int:
    """Load the dashboard, apply the requested filter changes and print the visible components."""

    console = console or Console()
    config = load_config(args.config)
    run_id = config.system.run_id or "unknown"
    configure_logging(
        run_id=run_id,
        environment=config.system.environment.value,
        log_level=config.system.log_level.value,
        log_dir=Path(config.system.log_dir),
    )
    dashboard = config.dashboard
    log = get_logger("main", dashboard=dashboard.title)

    state_dir = args.state_dir or Path(config.system.state_dir)
    query_string = InMemoryQueryString(args.query)
    store = FilterStateStore(
        dashboard.filters,
        components=dashboard.components,
        persistence=JSONFilePersistence(state_dir, dashboard.filters.global_settings.storage_key),
        query_string=query_string,
        logger=log,
    )
    store.hydrate()

    for assignment in args.assignments:
        filter_id, _, raw_value = assignment.partition("=")
        definition = dashboard.filters.definition(filter_id)
        if definition is None:
            log.warning("unknown_filter_ignored", filter_id=filter_id)
            continue
        store.set(filter_id, decode_value(definition, raw_value))

    for filter_bar_id in args.clear_bar:
        store.clear_bar(filter_bar_id)

    _print_components(console, store, args.trace)
    for item in store.summary():
        console.print(f"{item.label}: {item.display_value}")
    console.print(f"URL: {query_string.url}")
    log.info(
        "dashboard_filtered",
        visible=len(store.visible_components),
        total=len(dashboard.components),
        active_filters=store.active_filter_count,
    )
    return 0


def _print_components(console: Console, store: FilterStateStore, trace: bool) -> None:
    classifier = ComponentClassifier()
    visible = {component.id for component in store.visible_components}
    outcome = store.last_outcome

    table = Table(title="Dashboard Components")
    table.add_column("Component")
    table.add_column("Type")
    table.add_column("Role")
    table.add_column("Visible", justify="center")
    if trace:
        table.add_column("Excluded by")

    for component in store.components:
        row = [
            component.id,
            component.type,
            classifier.classify(component).primary.value,
            "yes" if component.id in visible else "no",
        ]
        if trace:
            row.append(", ".join(f"{item.filter_id} ({item.reason})" for item in outcome.exclusions_for(component.id)))
        table.add_row(*row)
    console.print(table)


def cli() -> int:
    return run(parse_args())


if __name__ == "__main__":
    raise SystemExit(cli())
