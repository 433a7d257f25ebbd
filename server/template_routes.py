"""API routes for template management."""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from composer.graph.converter import hydrate
from composer.models.service_node import GraphSnapshot, Service
from composer.models.template import Template, TemplateKind
from composer.utils.identifiers import generate_template_id, utc_timestamp
from server.template_db import (
    upsert_template as db_upsert_template,
    get_template as db_get_template,
    list_templates as db_list_templates,
    delete_template as db_delete_template,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class SaveTemplateRequest(BaseModel):
    """request body for creating or updating a template."""

    name: str
    description: str | None = None
    image_url: str | None = None
    kind: TemplateKind = TemplateKind.personal
    services: list[Service]  # deployment order


def _get_or_404(template_id: str) -> Template:
    template = db_get_template(template_id)
    if not template:
        raise HTTPException(status_code=404, detail=f"Template not found: {template_id}")
    return template


@router.get("/templates")
def list_templates(kind: TemplateKind | None = None) -> list[Template]:
    """list stored templates, newest first."""
    return db_list_templates(kind.value if kind else None)


@router.get("/templates/{template_id}")
def get_template(template_id: str) -> Template:
    """get a specific template."""
    return _get_or_404(template_id)


@router.get("/templates/{template_id}/graph")
def get_template_graph(template_id: str) -> GraphSnapshot:
    """get a template hydrated into nodes and derived edges."""
    return hydrate(_get_or_404(template_id).services)


@router.post("/templates", status_code=201)
def create_template(request: SaveTemplateRequest) -> Template:
    """create a template with a fresh id."""
    now = utc_timestamp()
    template = Template(
        template_id=generate_template_id(),
        name=request.name,
        description=request.description,
        image_url=request.image_url,
        kind=request.kind,
        services=request.services,
        created_at=now,
        updated_at=now,
    )
    db_upsert_template(template)
    logger.info("created template %s (%d services)", template.template_id, len(template.services))
    return template


@router.put("/templates/{template_id}")
def update_template(template_id: str, request: SaveTemplateRequest) -> Template:
    """replace the content of an existing template.

    No version check: the last write wins.
    """
    existing = _get_or_404(template_id)
    template = Template(
        template_id=template_id,
        name=request.name,
        description=request.description,
        image_url=request.image_url,
        kind=existing.kind,
        services=request.services,
        created_at=existing.created_at,
        updated_at=utc_timestamp(),
    )
    db_upsert_template(template)
    logger.info("updated template %s (%d services)", template_id, len(template.services))
    return template


@router.delete("/templates/{template_id}")
def delete_template(template_id: str) -> dict:
    """delete a template."""
    _get_or_404(template_id)
    db_delete_template(template_id)
    return {"deleted": template_id}
