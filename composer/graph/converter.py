"""Conversion between the live graph and the persisted service list."""

import logging
from collections.abc import Sequence

from composer.graph.edges import synthesize
from composer.graph.layout import position_for
from composer.graph.ordering import order_by_ids, reorder
from composer.models.service_node import GraphSnapshot, Service, ServiceNode
from composer.utils.identifiers import generate_node_id

logger = logging.getLogger(__name__)


def flatten(
    nodes: Sequence[ServiceNode],
    order: Sequence[str] | None = None,
) -> list[Service]:
    """Build the persisted service list.

    Args:
        nodes: nodes of the graph
        order: node ids in deployment order; defaults to the order of ``nodes``

    Returns:
        one Service per node, ids, positions and edges dropped
    """
    ordered = list(nodes)
    if order is not None:
        ordered = reorder(ordered, order_by_ids(ordered, order))
    return [Service.model_validate(node.content()) for node in ordered]


def hydrate(services: Sequence[Service]) -> GraphSnapshot:
    """Build a fresh graph from a persisted service list.

    Every node gets a new id and the grid position of its index, so
    hydrating the same list twice gives the same layout but different ids.
    Edges are computed from the variables; nothing else is trusted.
    """
    nodes = [
        ServiceNode.model_validate({
            **service.content(),
            "id": generate_node_id(),
            "position": position_for(index),
        })
        for index, service in enumerate(services)
    ]
    edges = synthesize(nodes)
    logger.debug("hydrated %d services into %d nodes", len(services), len(nodes))
    return GraphSnapshot(nodes=nodes, edges=edges)
