"""Analysis utilities for templates."""

from composer.analysis.template_summary import (
    DanglingReference,
    ServiceReference,
    TemplateSummary,
    template_summary,
)
from composer.analysis.inspect_template import (
    format_summary,
    load_services,
    summary_to_dict,
)

__all__ = [
    # template_summary exports
    "DanglingReference",
    "ServiceReference",
    "TemplateSummary",
    "template_summary",
    # inspect_template exports
    "format_summary",
    "load_services",
    "summary_to_dict",
]
