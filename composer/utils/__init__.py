"""Utility functions for template composition."""

from composer.utils.identifiers import (
    edge_id,
    generate_node_id,
    generate_template_id,
    generate_template_name,
    utc_timestamp,
)

__all__ = [
    "edge_id",
    "generate_node_id",
    "generate_template_id",
    "generate_template_name",
    "utc_timestamp",
]
