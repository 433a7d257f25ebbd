"""Data models for services in a template graph.

A service exists in two shapes: the live ``ServiceNode`` edited on the canvas
(carries an id and a position) and the flat ``Service`` that gets persisted
(list index is its deployment order). Edges are never stored; they are derived
from variable values, see ``composer.graph.edges``.
"""

from enum import Enum
from typing import Annotated, Literal, Self

from pydantic import BaseModel, Field, model_validator


class ServiceType(str, Enum):
    """Kinds of services a template can hold."""

    app = "app"
    docker = "docker"
    database = "database"


class DatabaseEngine(str, Enum):
    """Database engines that can be provisioned."""

    postgres = "postgres"
    mongo = "mongo"
    mysql = "mysql"
    mariadb = "mariadb"
    redis = "redis"
    clickhouse = "clickhouse"


class ProviderType(str, Enum):
    """Git providers an app can be built from."""

    github = "github"
    gitlab = "gitlab"
    bitbucket = "bitbucket"
    azure_devops = "azureDevOps"
    gitea = "gitea"


class Builder(str, Enum):
    """Build strategies for app services."""

    build_packs = "buildPacks"
    railpack = "railpack"
    nixpacks = "nixpacks"
    dockerfile = "dockerfile"
    heroku_build_packs = "herokuBuildPacks"
    static = "static"


class Variable(BaseModel):
    """a single environment variable; value may embed placeholders."""

    key: str
    value: str = ""


class Volume(BaseModel):
    """a host:container mount."""

    host_path: str
    container_path: str


class Position(BaseModel):
    """canvas coordinates, cosmetic only."""

    x: float
    y: float


class GitSettings(BaseModel):
    repository: str
    owner: str
    branch: str
    build_path: str = "/"
    port: int | None = 3000


class AppDetails(BaseModel):
    """settings for a service built from a git repository."""

    model_config = {"extra": "forbid"}

    type: Literal["app"] = "app"
    provider_type: ProviderType
    provider: str | None = None  # git provider account id
    builder: Builder | None = None
    git_settings: GitSettings


class DockerPort(BaseModel):
    host_port: int
    container_port: int
    scheme: Literal["http", "https"] = "http"


class DockerDetails(BaseModel):
    """settings for a service run from a container image."""

    model_config = {"extra": "forbid"}

    type: Literal["docker"] = "docker"
    url: str  # e.g. ghcr.io/org/image:latest
    account: str | None = None  # registry account id, None for public images
    ports: list[DockerPort] = Field(default_factory=list)


class DatabaseDetails(BaseModel):
    """settings for a managed database."""

    model_config = {"extra": "forbid"}

    type: Literal["database"] = "database"
    engine: DatabaseEngine
    exposed_ports: list[str] = Field(default_factory=list)


ServiceDetails = Annotated[
    AppDetails | DockerDetails | DatabaseDetails,
    Field(discriminator="type"),
]


class ServiceContent(BaseModel):
    """Fields shared by the live node and the persisted service.

    ``details`` is a tagged union whose own ``type`` tag must agree with the
    service ``type``; database services never carry volumes.
    """

    name: str = Field(min_length=1, max_length=50)
    type: ServiceType
    description: str | None = None
    details: ServiceDetails
    variables: list[Variable] = Field(default_factory=list)
    volumes: list[Volume] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_type_exclusivity(self) -> Self:
        """details must match type, and databases take no volumes."""
        if self.details.type != self.type.value:
            raise ValueError(
                f"details of type '{self.details.type}' do not match service type '{self.type.value}'"
            )
        if self.type == ServiceType.database and self.volumes:
            raise ValueError("database services cannot have volumes")
        return self

    def content(self) -> dict:
        """the persisted content, used for round-trip comparisons."""
        return self.model_dump(
            include={"name", "type", "description", "details", "variables", "volumes"}
        )


class Service(ServiceContent):
    """the flat, persisted form of a node."""


class ServiceNode(ServiceContent):
    """an editable node on the template canvas."""

    id: str
    position: Position


class ReferenceEdge(BaseModel):
    """a derived edge: ``source`` references ``target`` in its variables."""

    id: str
    source: str
    target: str
    label: str = "Ref"


class GraphSnapshot(BaseModel):
    """nodes plus derived edges; the unit kept in draft slots."""

    nodes: list[ServiceNode] = Field(default_factory=list)
    edges: list[ReferenceEdge] = Field(default_factory=list)
