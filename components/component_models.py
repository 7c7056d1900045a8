"""Dashboard component descriptors and derived roles."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ComponentDescriptor(BaseModel):
    """One renderable dashboard tile as written in the dashboard configuration.

    Only ``id`` is required. Unknown keys (``position``, ``options``, ``category``,
    ...) are kept verbatim and reachable through :meth:`get`.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str
    type: str = ""
    title: str | None = None
    data: Any = None

    def get(self, key: str, default: Any = None) -> Any:
        """Return a declared or extra top-level property."""

        if key in type(self).model_fields:
            value = getattr(self, key)
            return default if value is None else value
        extra = self.model_extra or {}
        return extra.get(key, default)

    @property
    def data_dict(self) -> dict[str, Any]:
        return self.data if isinstance(self.data, dict) else {}


class ComponentRole(StrEnum):
    """Semantic role inferred from a component descriptor."""

    CARD = "card"
    TIME_SERIES = "time_series"
    AGGREGATION = "aggregation"
    GENERIC = "generic"


@dataclass(frozen=True, slots=True)
class ComponentRoles:
    """Non-exclusive role flags for one component."""

    is_card: bool = False
    is_time_series: bool = False
    is_aggregation: bool = False

    @property
    def roles(self) -> frozenset[ComponentRole]:
        matched = set()
        if self.is_card:
            matched.add(ComponentRole.CARD)
        if self.is_time_series:
            matched.add(ComponentRole.TIME_SERIES)
        if self.is_aggregation:
            matched.add(ComponentRole.AGGREGATION)
        return frozenset(matched or {ComponentRole.GENERIC})

    @property
    def primary(self) -> ComponentRole:
        if self.is_time_series:
            return ComponentRole.TIME_SERIES
        if self.is_aggregation:
            return ComponentRole.AGGREGATION
        if self.is_card:
            return ComponentRole.CARD
        return ComponentRole.GENERIC

    @property
    def is_generic(self) -> bool:
        return not (self.is_card or self.is_time_series or self.is_aggregation)


__all__ = ["ComponentDescriptor", "ComponentRole", "ComponentRoles"]
