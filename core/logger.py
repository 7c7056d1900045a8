"""structlog setup for the dashboard filter runtime."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, cast

import structlog
from rich.logging import RichHandler
from structlog.stdlib import BoundLogger

LOG_FILE_NAME = "dashboard_filters.jsonl"

_RUN_ID = "unknown"


def configure_logging(
    *,
    run_id: str,
    environment: str,
    log_level: str,
    log_dir: Path = Path("logs"),
) -> Path | None:
    """Route structlog events through the stdlib root logger.

    ``development`` renders events on a rich console. Any other environment
    appends one JSON object per event to ``<log_dir>/dashboard_filters.jsonl``,
    whose path is returned.
    """

    global _RUN_ID
    _RUN_ID = run_id

    pre_chain = _pre_chain()
    handler, log_file = _make_handler(environment, log_dir, pre_chain)

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
        existing.close()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    structlog.configure(
        processors=cast(Any, [*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter]),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(run_id=run_id, environment=environment)
    return log_file


def get_logger(module_name: str, *, dashboard: str | None = None) -> BoundLogger:
    """Return a logger carrying the module name, the run id and optionally the dashboard title."""

    context: dict[str, Any] = {"module": module_name, "run_id": _RUN_ID}
    if dashboard is not None:
        context["dashboard"] = dashboard
    return cast(BoundLogger, structlog.get_logger(module_name).bind(**context))


def _pre_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _make_handler(environment: str, log_dir: Path, pre_chain: list[Any]) -> tuple[logging.Handler, Path | None]:
    if environment == "development":
        renderer: Any = structlog.dev.ConsoleRenderer()
        handler: logging.Handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
        log_file = None
    else:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME
        renderer = structlog.processors.JSONRenderer()
        handler = logging.FileHandler(log_file, encoding="utf-8")

    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))
    return handler, log_file
