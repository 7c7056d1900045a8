"""Component descriptors, role classification and field resolution."""

from components.component_classifier import ComponentClassifier, classify_component
from components.component_models import ComponentDescriptor, ComponentRole, ComponentRoles
from components.field_resolver import FieldResolver, SearchStep

__all__ = [
    "ComponentClassifier",
    "ComponentDescriptor",
    "ComponentRole",
    "ComponentRoles",
    "FieldResolver",
    "SearchStep",
    "classify_component",
]
