"""Load and save dashboard configuration from YAML or JSON."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from core.config_models import RootConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "DASH_"
SYSTEM_FILE = "system.yaml"
DASHBOARD_FILE = "dashboard.yaml"
FILTERS_FILE = "filters.yaml"
CONFIG_FILES = (SYSTEM_FILE, DASHBOARD_FILE, FILTERS_FILE)
JSON_SUFFIXES = {".json"}


def load_config(path: Path) -> RootConfig:
    """Load, merge and validate configuration.

    ``path`` is either a single ``.yaml``/``.yml``/``.json`` file or a directory
    holding ``system.yaml``, ``dashboard.yaml`` and ``filters.yaml``; directory
    files are deep-merged in that order. ``DASH_*`` environment variables are
    applied last. Validation errors are logged per field and re-raised.
    """

    if _is_config_dir(path):
        raw_data: dict[str, Any] = {}
        for file_name in CONFIG_FILES:
            _deep_merge(raw_data, _read_mapping(path / file_name))
    else:
        raw_data = _read_mapping(path)

    for keys, value in _env_overrides(os.environ):
        _set_path(raw_data, keys, value)

    try:
        return RootConfig.model_validate(raw_data)
    except ValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(part) for part in error.get("loc", ()))
            logger.error("Config validation error", extra={"field": field, "error": error.get("msg", "invalid")})
        raise


def save_config(config: RootConfig, path: Path) -> None:
    """Write a config back in the layout :func:`load_config` reads."""

    payload = config.model_dump(mode="json", by_alias=True, exclude_none=True)
    if not _is_config_dir(path):
        _write_mapping(path, payload)
        return

    path.mkdir(parents=True, exist_ok=True)
    dashboard = dict(payload["dashboard"])
    filters = dashboard.pop("filters")
    _write_mapping(path / SYSTEM_FILE, {"system": payload["system"]})
    _write_mapping(path / DASHBOARD_FILE, {"dashboard": dashboard})
    _write_mapping(path / FILTERS_FILE, {"dashboard": {"filters": filters}})


def _is_config_dir(path: Path) -> bool:
    return path.is_dir() or path.suffix == ""


def _read_mapping(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    loaded = json.loads(text) if path.suffix in JSON_SUFFIXES else yaml.safe_load(text)
    return loaded if isinstance(loaded, dict) else {}


def _write_mapping(path: Path, payload: dict[str, Any]) -> None:
    if path.suffix in JSON_SUFFIXES:
        text = json.dumps(payload, indent=2)
    else:
        text = yaml.safe_dump(payload, sort_keys=False)
    path.write_text(text, encoding="utf-8")


def _deep_merge(base: dict[str, Any], updates: dict[str, Any]) -> None:
    for key, value in updates.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _deep_merge(current, value)
        else:
            base[key] = value


def _env_overrides(environ: Mapping[str, str]) -> list[tuple[list[str], Any]]:
    """``DASH_DASHBOARD__FILTERS__GLOBAL_SETTINGS__SYNC_WITH_URL=true`` -> (path, parsed YAML value)."""

    overrides: list[tuple[list[str], Any]] = []
    for env_key in sorted(environ):
        if not env_key.startswith(ENV_PREFIX):
            continue
        raw_value = environ[env_key]
        keys = env_key[len(ENV_PREFIX) :].lower().split("__")
        overrides.append((keys, yaml.safe_load(raw_value) if raw_value else raw_value))
    return overrides


def _set_path(data: dict[str, Any], keys: list[str], value: Any) -> None:
    cursor = data
    for part in keys[:-1]:
        key = _match_key(cursor, part)
        child = cursor.get(key)
        if not isinstance(child, dict):
            child = {}
            cursor[key] = child
        cursor = child
    cursor[_match_key(cursor, keys[-1])] = value


def _match_key(mapping: dict[str, Any], part: str) -> str:
    # env keys are snake_case; files may use camelCase
    wanted = part.replace("_", "")
    for key in mapping:
        if key.lower().replace("_", "") == wanted:
            return key
    return part
