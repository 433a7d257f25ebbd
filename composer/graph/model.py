"""The live, editable template graph.

``GraphModel`` owns the node list (its order is the deployment order) and the
edges derived from it. Every edit builds a new node list, validates it, then
commits it and recomputes the edges, so a failed edit never leaves a partial
change behind and edges never go stale.

Services reference each other by *name*. Renaming or deleting a service does
not touch the variable text of the services that referenced it: those
references simply stop resolving and their edges disappear.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from composer.errors import DuplicateNameError, InvalidOperationError, NodeNotFoundError
from composer.grammar import reference_options
from composer.graph.edges import synthesize
from composer.graph.layout import position_for
from composer.graph.ordering import order_by_ids, reorder
from composer.models.service_node import (
    GraphSnapshot,
    ReferenceEdge,
    ServiceDetails,
    ServiceNode,
    ServiceType,
    Variable,
    Volume,
)
from composer.utils.identifiers import generate_node_id

logger = logging.getLogger(__name__)

ChangeListener = Callable[[GraphSnapshot], None]


@dataclass(frozen=True)
class SettingsTab:
    """A tab of the service settings panel."""

    slug: str
    label: str
    disabled: bool = False


class GraphModel:
    """Nodes of a template plus their derived reference edges."""

    def __init__(self, nodes: Iterable[ServiceNode] = ()) -> None:
        self._nodes: list[ServiceNode] = list(nodes)
        self._edges: list[ReferenceEdge] = synthesize(self._nodes)
        self._listeners: list[ChangeListener] = []

    @classmethod
    def from_snapshot(cls, snapshot: GraphSnapshot) -> "GraphModel":
        """Build a model from a snapshot; stored edges are recomputed, not trusted."""
        return cls(snapshot.nodes)

    # --- Queries ---

    @property
    def nodes(self) -> list[ServiceNode]:
        return list(self._nodes)

    @property
    def edges(self) -> list[ReferenceEdge]:
        return list(self._edges)

    def __len__(self) -> int:
        return len(self._nodes)

    def get_node(self, node_id: str) -> ServiceNode:
        return self._nodes[self._index_of(node_id)]

    def find_by_name(self, name: str) -> ServiceNode | None:
        for node in self._nodes:
            if node.name == name:
                return node
        return None

    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(nodes=self.nodes, edges=self.edges)

    def volume_candidates(self) -> list[ServiceNode]:
        """nodes that volumes can be attached to."""
        return [node for node in self._nodes if node.type != ServiceType.database]

    def can_attach_volumes(self) -> bool:
        return bool(self.volume_candidates())

    def settings_tabs(self, node_id: str) -> list[SettingsTab]:
        """Tabs of the settings panel for a node.

        Databases get neither an environment nor a volumes tab.
        """
        node = self.get_node(node_id)
        is_database = node.type == ServiceType.database
        return [
            SettingsTab(slug="settings", label="Settings"),
            SettingsTab(slug="environment", label="Environment", disabled=is_database),
            SettingsTab(slug="volumes", label="Volumes", disabled=is_database),
        ]

    def reference_options(self, node_id: str) -> list[str]:
        """Placeholders offered when editing a variable of ``node_id``."""
        node = self.get_node(node_id)
        databases = [
            (other.name, other.details.engine.value)
            for other in self._nodes
            if other.type == ServiceType.database
        ]
        return reference_options(node.name, databases)

    # --- Listeners ---

    def subscribe(self, listener: ChangeListener) -> None:
        """Call ``listener`` with a fresh snapshot after every committed edit."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        self._listeners.remove(listener)

    # --- Edits ---

    def add_node(
        self,
        type: ServiceType | str,
        name: str,
        details: ServiceDetails,
        description: str | None = None,
        variables: Sequence[Variable] = (),
    ) -> ServiceNode:
        """Create a node with a fresh id at the next grid position."""
        self._ensure_unique_name(name)
        node = self._build(
            id=generate_node_id(),
            name=name,
            type=type,
            description=description,
            details=details,
            variables=list(variables),
            volumes=[],
            position=position_for(len(self._nodes)),
        )
        self._commit([*self._nodes, node])
        logger.debug("added %s service '%s' (%s)", node.type.value, node.name, node.id)
        return node

    def rename_node(
        self,
        node_id: str,
        new_name: str,
        description: str | None = None,
    ) -> ServiceNode:
        """Rename a node; variables elsewhere that used the old name are left as-is."""
        node = self.get_node(node_id)
        self._ensure_unique_name(new_name, exclude_id=node_id)
        changes: dict = {"name": new_name}
        if description is not None:
            changes["description"] = description
        renamed = self._replace(node, **changes)
        logger.debug("renamed service '%s' to '%s'", node.name, new_name)
        return renamed

    def update_variables(self, node_id: str, variables: Sequence[Variable]) -> ServiceNode:
        """Replace the variables of a node and recompute every edge."""
        return self._replace(self.get_node(node_id), variables=list(variables))

    def update_details(self, node_id: str, details: ServiceDetails) -> ServiceNode:
        node = self.get_node(node_id)
        if details.type != node.type.value:
            raise InvalidOperationError(
                f"cannot apply {details.type} settings to {node.type.value} service '{node.name}'"
            )
        return self._replace(node, details=details)

    def attach_volume(self, node_id: str, volume: Volume) -> ServiceNode:
        node = self.get_node(node_id)
        self._ensure_accepts_volumes(node)
        return self._replace(node, volumes=[*node.volumes, volume])

    def set_volumes(self, node_id: str, volumes: Sequence[Volume]) -> ServiceNode:
        """Replace the volumes of a node (the volumes form submit)."""
        node = self.get_node(node_id)
        if volumes:
            self._ensure_accepts_volumes(node)
        return self._replace(node, volumes=list(volumes))

    def delete_node(self, node_id: str) -> None:
        """Remove a node and every edge touching it."""
        index = self._index_of(node_id)
        removed = self._nodes[index]
        self._commit(self._nodes[:index] + self._nodes[index + 1:])
        logger.debug("deleted service '%s' (%s)", removed.name, removed.id)

    def reorder(self, node_ids: Sequence[str]) -> None:
        """Set the deployment order; edges are not consulted."""
        self._commit(reorder(self._nodes, order_by_ids(self._nodes, node_ids)))

    # --- Internals ---

    def _index_of(self, node_id: str) -> int:
        for index, node in enumerate(self._nodes):
            if node.id == node_id:
                return index
        raise NodeNotFoundError(node_id)

    def _ensure_unique_name(self, name: str, exclude_id: str | None = None) -> None:
        for node in self._nodes:
            if node.name == name and node.id != exclude_id:
                raise DuplicateNameError(name)

    @staticmethod
    def _ensure_accepts_volumes(node: ServiceNode) -> None:
        if node.type == ServiceType.database:
            raise InvalidOperationError(
                f"volumes cannot be attached to database service '{node.name}'"
            )

    @staticmethod
    def _build(**fields) -> ServiceNode:
        try:
            return ServiceNode.model_validate(fields)
        except ValueError as exc:
            # pydantic's ValidationError is a ValueError
            raise InvalidOperationError(str(exc)) from exc

    def _replace(self, node: ServiceNode, **changes) -> ServiceNode:
        updated = self._build(**{**dict(node), **changes})
        index = self._index_of(node.id)
        self._commit(self._nodes[:index] + [updated] + self._nodes[index + 1:])
        return updated

    def _commit(self, nodes: list[ServiceNode]) -> None:
        self._nodes = nodes
        self._edges = synthesize(nodes)
        if self._listeners:
            snapshot = self.snapshot()
            for listener in list(self._listeners):
                listener(snapshot)
