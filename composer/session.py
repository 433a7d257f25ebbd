"""An editing session over one template.

Ties the pieces together: hydrate a stored template (or restore a draft),
let the caller edit ``composer.graph``, mirror every edit of a not-yet-saved
template into the draft store, then flatten and save or deploy.
"""

import logging

from composer.config import DEFAULT_DRAFT_SLOT
from composer.drafts import DraftStore
from composer.errors import InvalidOperationError, TemplateClientError
from composer.graph.converter import flatten, hydrate
from composer.graph.model import GraphModel
from composer.models.service_node import GraphSnapshot, Service
from composer.models.template import TemplateKind
from composer.sdk.template_client import TemplateClient
from composer.utils.identifiers import generate_template_name

logger = logging.getLogger(__name__)


class TemplateComposer:
    """Compose, save and deploy a template."""

    def __init__(
        self,
        client: TemplateClient,
        drafts: DraftStore | None = None,
        draft_slot: str = DEFAULT_DRAFT_SLOT,
    ) -> None:
        self.client = client
        self.drafts = drafts
        self.draft_slot = draft_slot

        self.template_id: str | None = None
        self.name = generate_template_name()
        self.description: str | None = None
        self.image_url: str | None = None
        self.kind = TemplateKind.personal

        self._saving = False
        self.graph = GraphModel()
        self.graph.subscribe(self._mirror_draft)

    @property
    def read_only(self) -> bool:
        """official and community templates can be deployed but not saved."""
        return self.kind != TemplateKind.personal

    @property
    def is_saving(self) -> bool:
        return self._saving

    @property
    def services(self) -> list[Service]:
        """the flat service list, in the current deployment order."""
        return flatten(self.graph.nodes)

    def start_new(self) -> GraphModel:
        """Begin a new template, picking up the draft left by a previous session."""
        self.template_id = None
        self.kind = TemplateKind.personal
        draft = self.drafts.load(self.draft_slot) if self.drafts else None
        if draft is not None:
            logger.info("restored draft '%s' with %d services", self.draft_slot, len(draft.nodes))
        self._use_graph(GraphModel.from_snapshot(draft or GraphSnapshot()))
        return self.graph

    def load(self, template_id: str) -> GraphModel:
        """Hydrate a stored template into a fresh graph."""
        template = self.client.get_template(template_id)
        snapshot = hydrate(template.services)

        self.template_id = template.template_id
        self.name = template.name
        self.description = template.description
        self.image_url = template.image_url
        self.kind = template.kind
        self._use_graph(GraphModel.from_snapshot(snapshot))
        logger.info("loaded template %s (%d services)", template_id, len(snapshot.nodes))
        return self.graph

    def save(self) -> str:
        """Create or update the template on the server.

        The draft is cleared only once the server confirms the save; on
        failure the graph and the draft are left as they were.
        """
        if self.read_only:
            raise InvalidOperationError(f"{self.kind.value} templates cannot be saved")
        if self._saving:
            raise InvalidOperationError("a save is already in progress")
        if not len(self.graph):
            raise InvalidOperationError("cannot save a template without services")

        self._saving = True
        try:
            template_id = self.client.save_template(
                self.template_id,
                self.services,
                name=self.name,
                description=self.description,
                image_url=self.image_url,
            )
        except TemplateClientError as exc:
            action = "update" if self.template_id else "create"
            logger.warning("failed to %s template: %s", action, exc)
            raise
        finally:
            self._saving = False

        self.template_id = template_id
        if self.drafts:
            self.drafts.clear(self.draft_slot)
        return template_id

    def deploy(self, project_id: str) -> dict:
        """Send the services, in deployment order, to the executor."""
        services = self.services
        if not services:
            raise InvalidOperationError("cannot deploy a template without services")
        return self.client.deploy(services, project_id)

    def _use_graph(self, graph: GraphModel) -> None:
        self.graph.unsubscribe(self._mirror_draft)
        self.graph = graph
        self.graph.subscribe(self._mirror_draft)

    def _mirror_draft(self, snapshot: GraphSnapshot) -> None:
        # stored templates are edited in place, only new ones get a draft
        if self.drafts is None or self.template_id is not None:
            return
        self.drafts.save(self.draft_slot, snapshot)
