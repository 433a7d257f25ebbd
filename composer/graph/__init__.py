"""The template graph: references, edges, layout, ordering and conversion."""

from composer.graph.converter import flatten, hydrate
from composer.graph.edges import REFERENCE_LABEL, synthesize
from composer.graph.layout import position_for
from composer.graph.model import GraphModel, SettingsTab
from composer.graph.ordering import order_by_ids, reorder
from composer.graph.resolver import dangling_references, resolve

__all__ = [
    "GraphModel",
    "REFERENCE_LABEL",
    "SettingsTab",
    "dangling_references",
    "flatten",
    "hydrate",
    "order_by_ids",
    "position_for",
    "reorder",
    "resolve",
    "synthesize",
]
