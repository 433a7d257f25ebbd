"""SDK for talking to the template server."""

from composer.sdk.template_client import TemplateClient

__all__ = [
    "TemplateClient",
]
