"""Manual deployment ordering.

The order chosen here is what gets deployed. It is deliberately not checked
against the reference edges: a service may be placed before a database it
references.
"""

from collections.abc import Sequence
from typing import TypeVar

from composer.errors import InvalidOperationError
from composer.models.service_node import ServiceNode

T = TypeVar("T")


def reorder(current: Sequence[T], new_order: Sequence[int]) -> list[T]:
    """Return the elements of ``current`` in the sequence given by ``new_order``.

    ``new_order[i]`` is the index in ``current`` of the element that should
    end up at position ``i``.
    """
    if sorted(new_order) != list(range(len(current))):
        raise InvalidOperationError(
            f"new order must be a permutation of 0..{len(current) - 1}"
        )
    return [current[index] for index in new_order]


def order_by_ids(nodes: Sequence[ServiceNode], node_ids: Sequence[str]) -> list[int]:
    """Translate a sequence of node ids into an index permutation."""
    index_by_id = {node.id: index for index, node in enumerate(nodes)}
    if len(node_ids) != len(nodes) or set(node_ids) != set(index_by_id):
        raise InvalidOperationError("order must list every node id exactly once")
    return [index_by_id[node_id] for node_id in node_ids]
