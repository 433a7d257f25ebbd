"""Template Composer - derived reference graphs for multi-service templates."""

from composer.errors import (
    ComposerError,
    DuplicateNameError,
    InvalidEnvFileError,
    InvalidOperationError,
    NodeNotFoundError,
    TemplateClientError,
)
from composer.graph import GraphModel, flatten, hydrate, reorder, resolve, synthesize
from composer.importer import apply_file, apply_paste, parse_env
from composer.models import (
    GraphSnapshot,
    ReferenceEdge,
    Service,
    ServiceNode,
    ServiceType,
    Template,
    Variable,
    Volume,
)
from composer.sdk.template_client import TemplateClient
from composer.session import TemplateComposer

__all__ = [
    # Errors
    "ComposerError",
    "DuplicateNameError",
    "InvalidEnvFileError",
    "InvalidOperationError",
    "NodeNotFoundError",
    "TemplateClientError",
    # Models
    "GraphSnapshot",
    "ReferenceEdge",
    "Service",
    "ServiceNode",
    "ServiceType",
    "Template",
    "Variable",
    "Volume",
    # Graph
    "GraphModel",
    "flatten",
    "hydrate",
    "reorder",
    "resolve",
    "synthesize",
    # Import
    "apply_file",
    "apply_paste",
    "parse_env",
    # High-level APIs
    "TemplateClient",
    "TemplateComposer",
]
