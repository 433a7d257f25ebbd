"""Resolution of reference directives to services in the graph."""

from collections.abc import Iterable

from composer.grammar import iter_references
from composer.models.service_node import ServiceContent


def resolve(
    value: str,
    nodes: Iterable[ServiceContent],
    self_name: str,
) -> list[str]:
    """Return the distinct service names referenced by one variable value.

    A reference resolves only when another service in ``nodes`` carries
    exactly that name. References to ``self_name`` and to unknown names are
    dropped without error. Names keep their first-occurrence order.
    """
    known = {node.name for node in nodes}
    targets: list[str] = []
    for reference in iter_references(value):
        name = reference.name
        if name == self_name or name not in known or name in targets:
            continue
        targets.append(name)
    return targets


def dangling_references(
    value: str,
    nodes: Iterable[ServiceContent],
) -> list[str]:
    """Names referenced by ``value`` that match no service in ``nodes``."""
    known = {node.name for node in nodes}
    missing: list[str] = []
    for reference in iter_references(value):
        if reference.name not in known and reference.name not in missing:
            missing.append(reference.name)
    return missing
