"""Component role classification heuristics."""

from __future__ import annotations

from typing import Any

from components.component_models import ComponentDescriptor, ComponentRoles
from components.json_walker import get_path, is_iso_date_string, is_number

TIME_SERIES_TYPES = {"timeserieschart", "linechart", "areachart"}
TIME_SERIES_TYPE_HINTS = ("timeseries", "linechart")
AGGREGATION_TYPES = {"aggregation", "kpi", "stat", "value", "countercard", "metriccard"}
AGGREGATION_TYPE_HINTS = ("aggregation", "kpi")
STYLE_HINT_KEYS = ("layout", "style", "variant", "appearance")
LABEL_KEYS = ("label", "title", "description")


class ComponentClassifier:
    """Infer card / time-series / aggregation roles from a loosely typed descriptor."""

    def classify(self, component: ComponentDescriptor) -> ComponentRoles:
        """Return the role flags of a component. Never raises."""

        return ComponentRoles(
            is_card=self.is_card(component),
            is_time_series=self.is_time_series(component),
            is_aggregation=self.is_aggregation(component),
        )

    def is_card(self, component: ComponentDescriptor) -> bool:
        type_name = component.type.lower()
        data = component.data_dict

        if "card" in type_name:
            return True

        if any(self._names_card(hint) for hint in self._style_hints(component)):
            return True

        if any("card" in str(text).lower() for text in (component.get("component"), component.title, component.id) if text):
            return True

        if data.get("cardType") is not None or data.get("cardStyle") is not None:
            return True

        return isinstance(data.get("content"), str)

    def is_time_series(self, component: ComponentDescriptor) -> bool:
        type_name = component.type.lower()
        data = component.data_dict

        if type_name in TIME_SERIES_TYPES or any(hint in type_name for hint in TIME_SERIES_TYPE_HINTS):
            return True

        if data.get("timeframe") is not None:
            return True

        series = data.get("series")
        if not isinstance(series, list) or not series:
            return False
        points = get_path(series, "0.data")
        if not isinstance(points, list) or len(points) < 2:
            return False
        return is_iso_date_string(get_path(points, "0.x"))

    def is_aggregation(self, component: ComponentDescriptor) -> bool:
        type_name = component.type.lower()
        data = component.data_dict

        if type_name in AGGREGATION_TYPES or any(hint in type_name for hint in AGGREGATION_TYPE_HINTS):
            return True

        if data.get("metric") is not None:
            return True

        value = data.get("value")
        if value is not None and any(data.get(key) is not None for key in LABEL_KEYS):
            return True

        return bool(component.title) and is_number(value)

    @staticmethod
    def _style_hints(component: ComponentDescriptor) -> list[Any]:
        containers = (component.model_extra or {}, component.get("options"), component.data)
        hints: list[Any] = []
        for container in containers:
            if not isinstance(container, dict):
                continue
            hints.extend(container[key] for key in STYLE_HINT_KEYS if key in container)
        return hints

    @staticmethod
    def _names_card(hint: Any) -> bool:
        if isinstance(hint, str):
            return "card" in hint.lower()
        if isinstance(hint, dict):
            return any(isinstance(value, str) and "card" in value.lower() for value in hint.values())
        return False


def classify_component(component: ComponentDescriptor) -> ComponentRoles:
    """Convenience wrapper for component classification."""

    return ComponentClassifier().classify(component)
