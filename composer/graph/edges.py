"""Derivation of reference edges from variable values."""

import logging
from collections.abc import Sequence

from composer.graph.resolver import resolve
from composer.models.service_node import ReferenceEdge, ServiceNode
from composer.utils.identifiers import edge_id

logger = logging.getLogger(__name__)

REFERENCE_LABEL = "Ref"


def synthesize(nodes: Sequence[ServiceNode]) -> list[ReferenceEdge]:
    """Compute the full edge set for ``nodes``.

    One edge per distinct (source, target) pair where some variable of the
    source references the target by name. Edges follow node order, then the
    order in which targets are first referenced.
    """
    ids_by_name: dict[str, list[str]] = {}
    for node in nodes:
        ids_by_name.setdefault(node.name, []).append(node.id)

    edges: list[ReferenceEdge] = []
    seen: set[tuple[str, str]] = set()
    for node in nodes:
        for variable in node.variables:
            for target_name in resolve(variable.value, nodes, node.name):
                for target_id in ids_by_name[target_name]:
                    pair = (node.id, target_id)
                    if target_id == node.id or pair in seen:
                        continue
                    seen.add(pair)
                    edges.append(ReferenceEdge(
                        id=edge_id(node.id, target_id),
                        source=node.id,
                        target=target_id,
                        label=REFERENCE_LABEL,
                    ))

    logger.debug("synthesized %d reference edges over %d nodes", len(edges), len(nodes))
    return edges
