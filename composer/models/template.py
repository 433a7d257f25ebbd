"""Data model for persisted templates."""

from enum import Enum

from pydantic import BaseModel

from composer.models.service_node import Service


class TemplateKind(str, Enum):
    """Who owns a template. Only personal templates are editable."""

    personal = "personal"
    official = "official"
    community = "community"


class Template(BaseModel):
    """a named, ordered list of services."""

    template_id: str
    name: str
    description: str | None = None
    image_url: str | None = None
    kind: TemplateKind = TemplateKind.personal
    services: list[Service]  # list order is deployment order
    created_at: str
    updated_at: str
