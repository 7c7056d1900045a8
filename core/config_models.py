"""Configuration models for the dashboard filter runtime."""

from __future__ import annotations

from enum import StrEnum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from components.component_models import ComponentDescriptor
from filtering.filter_models import DashboardFiltersConfig


class Environment(StrEnum):
    """Runtime environment modes."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"


class LogLevel(StrEnum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"


class SystemConfig(BaseModel):
    """Global runtime configuration."""

    run_id: str | None = None
    environment: Environment = Environment.DEVELOPMENT
    log_level: LogLevel = LogLevel.INFO
    log_dir: str = "./logs"
    state_dir: str = "./state"

    @model_validator(mode="after")
    def ensure_run_id(self) -> SystemConfig:
        if not self.run_id:
            self.run_id = str(uuid4())
        return self


class DashboardConfig(BaseModel):
    """One dashboard: its components and the filters that narrow them."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = "Dashboard"
    theme: Theme = Theme.LIGHT
    components: list[ComponentDescriptor] = Field(default_factory=list)
    filters: DashboardFiltersConfig = Field(default_factory=DashboardFiltersConfig)

    @model_validator(mode="after")
    def validate_unique_component_ids(self) -> DashboardConfig:
        seen: set[str] = set()
        for component in self.components:
            if component.id in seen:
                raise ValueError(f"duplicate component id: {component.id}")
            seen.add(component.id)
        return self


class RootConfig(BaseModel):
    """Top-level validated configuration."""

    system: SystemConfig = Field(default_factory=SystemConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
