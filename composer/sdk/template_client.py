"""HTTP client for the template persistence API and the deployment executor.

    client = TemplateClient()
    services = client.load_template("3f0c...")
    template_id = client.save_template(None, services, name="brave-teal-otter")
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx

from composer import config
from composer.errors import TemplateClientError
from composer.models.service_node import Service
from composer.models.template import Template

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> str:
    """Pull the server's error message out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    return str(detail) if detail else f"HTTP {response.status_code}"


def _parse_template(response: httpx.Response) -> Template:
    """Validate a successful response body as a template record."""
    try:
        return Template.model_validate(response.json())
    except ValueError as e:
        # covers both malformed JSON and pydantic ValidationError
        raise TemplateClientError(
            f"Invalid template in response from {response.url}: {e}"
        ) from e


class TemplateClient:
    """Load, save and deploy templates over HTTP."""

    def __init__(
        self,
        base_url: str | None = None,
        deploy_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Base URL of the template server
            deploy_url: Base URL of the deployment executor
            timeout: HTTP request timeout in seconds
            transport: optional httpx transport, mainly for tests
        """
        self.base_url = (base_url or config.api_url()).rstrip("/")
        self.deploy_url = (deploy_url or config.deploy_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else config.http_timeout()
        self._transport = transport

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise TemplateClientError(
                f"Failed to connect to server at {url}: {e}"
            ) from e

        if response.is_error:
            raise TemplateClientError(_error_detail(response))
        return response

    def get_template(self, template_id: str) -> Template:
        """Fetch a full template record."""
        response = self._request("GET", f"{self.base_url}/api/templates/{template_id}")
        return _parse_template(response)

    def load_template(self, template_id: str) -> list[Service]:
        """Fetch the ordered services of a template."""
        return self.get_template(template_id).services

    def save_template(
        self,
        template_id: str | None,
        services: Sequence[Service],
        name: str,
        description: str | None = None,
        image_url: str | None = None,
    ) -> str:
        """Create a template (no id) or update an existing one.

        Returns:
            the id of the stored template
        """
        body = {
            "name": name,
            "description": description,
            "image_url": image_url,
            "services": [service.model_dump(mode="json") for service in services],
        }
        if template_id is None:
            response = self._request("POST", f"{self.base_url}/api/templates", json=body)
        else:
            response = self._request(
                "PUT", f"{self.base_url}/api/templates/{template_id}", json=body
            )
        saved = _parse_template(response)
        logger.info("saved template %s with %d services", saved.template_id, len(services))
        return saved.template_id

    def deploy(self, services: Sequence[Service], project_id: str) -> dict:
        """Hand the ordered services to the deployment executor."""
        body = {
            "project_id": project_id,
            "services": [service.model_dump(mode="json") for service in services],
        }
        response = self._request("POST", f"{self.deploy_url}/api/deployments", json=body)
        try:
            result = response.json()
        except ValueError as e:
            raise TemplateClientError(
                f"Invalid response from {response.url}: {e}"
            ) from e
        logger.info("queued deployment of %d services to project %s", len(services), project_id)
        return result
