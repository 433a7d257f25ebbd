"""Exceptions raised by template composition."""


class ComposerError(Exception):
    """Base class for template composition errors."""


class DuplicateNameError(ComposerError):
    """A service with the same name already exists in the graph."""

    def __init__(self, name: str) -> None:
        super().__init__(f"A service named '{name}' already exists")
        self.name = name


class InvalidOperationError(ComposerError):
    """The requested edit is not allowed for this graph or service."""


class NodeNotFoundError(ComposerError):
    """No node with the given id exists in the graph."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Node not found: {node_id}")
        self.node_id = node_id


class InvalidEnvFileError(ComposerError):
    """An uploaded file was rejected by the bulk variable importer."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"Invalid file: {filename}. Only .env files are allowed.")
        self.filename = filename


class TemplateClientError(ComposerError):
    """Exception raised when talking to the template API fails."""
    pass
