"""Draft stores that mirror an unsaved graph so edits survive a reload.

Each store is keyed by a draft slot. Writes are best-effort: a draft that
cannot be written is logged and dropped, never allowed to break an edit.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from composer import config
from composer.models.service_node import GraphSnapshot

logger = logging.getLogger(__name__)


class DraftStore:
    """Protocol for keeping graph snapshots per draft slot."""

    def load(self, slot: str) -> GraphSnapshot | None:
        """Return the snapshot stored in ``slot``, if any."""
        raise NotImplementedError

    def save(self, slot: str, snapshot: GraphSnapshot) -> None:
        """Store ``snapshot`` in ``slot``, replacing the previous one."""
        raise NotImplementedError

    def clear(self, slot: str) -> None:
        """Forget the snapshot in ``slot``."""
        raise NotImplementedError


class MemoryDraftStore(DraftStore):
    """Keeps snapshots in a dict."""

    def __init__(self) -> None:
        self.drafts: dict[str, GraphSnapshot] = {}

    def load(self, slot: str) -> GraphSnapshot | None:
        return self.drafts.get(slot)

    def save(self, slot: str, snapshot: GraphSnapshot) -> None:
        self.drafts[slot] = snapshot.model_copy(deep=True)

    def clear(self, slot: str) -> None:
        self.drafts.pop(slot, None)


class FileDraftStore(DraftStore):
    """Writes one JSON file per slot, under COMPOSER_DRAFT_DIR by default."""

    def __init__(self, directory: Path | str | None = None) -> None:
        self.directory = Path(directory) if directory is not None else config.draft_dir()

    def _path(self, slot: str) -> Path:
        return self.directory / f"{slot}.json"

    def load(self, slot: str) -> GraphSnapshot | None:
        path = self._path(slot)
        if not path.exists():
            return None
        try:
            return GraphSnapshot.model_validate_json(path.read_text())
        except (OSError, ValidationError) as exc:
            logger.warning("ignoring unreadable draft %s: %s", path, exc)
            return None

    def save(self, slot: str, snapshot: GraphSnapshot) -> None:
        path = self._path(slot)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(snapshot.model_dump_json(indent=2))
        except OSError as exc:
            logger.warning("could not write draft %s: %s", path, exc)

    def clear(self, slot: str) -> None:
        path = self._path(slot)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("could not remove draft %s: %s", path, exc)
