"""Core data models for template composition."""

from composer.models.service_node import (
    AppDetails,
    Builder,
    DatabaseDetails,
    DatabaseEngine,
    DockerDetails,
    DockerPort,
    GitSettings,
    GraphSnapshot,
    Position,
    ProviderType,
    ReferenceEdge,
    Service,
    ServiceDetails,
    ServiceNode,
    ServiceType,
    Variable,
    Volume,
)
from composer.models.template import Template, TemplateKind

__all__ = [
    # Service content
    "AppDetails",
    "Builder",
    "DatabaseDetails",
    "DatabaseEngine",
    "DockerDetails",
    "DockerPort",
    "GitSettings",
    "ProviderType",
    "ServiceDetails",
    "ServiceType",
    "Variable",
    "Volume",
    # Graph shapes
    "GraphSnapshot",
    "Position",
    "ReferenceEdge",
    "Service",
    "ServiceNode",
    # Templates
    "Template",
    "TemplateKind",
]
