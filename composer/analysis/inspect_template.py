#!/usr/bin/env python3
"""CLI script to inspect a template file.

Usage:
    python -m composer.analysis.inspect_template <template.json>

    # or with JSON output
    python -m composer.analysis.inspect_template <template.json> --json

The file may hold a full template record or a bare list of services.
"""

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from composer.analysis.template_summary import TemplateSummary, template_summary
from composer.models.service_node import Service
from composer.models.template import Template

_SERVICE_LIST = TypeAdapter(list[Service])


def load_services(template_file: Path) -> list[Service]:
    """Load the ordered services from a template or service-list JSON file."""
    data = json.loads(template_file.read_text())
    if isinstance(data, dict):
        return Template.model_validate(data).services
    return _SERVICE_LIST.validate_python(data)


def format_summary(summary: TemplateSummary) -> str:
    """Format a template summary for human-readable output."""
    lines = []
    lines.append("=" * 60)
    lines.append("TEMPLATE SUMMARY")
    lines.append("=" * 60)
    lines.append("")

    counts = ", ".join(f"{kind}: {count}" for kind, count in sorted(summary.services_by_type.items()))
    lines.append(f"Services: {summary.service_count}" + (f" ({counts})" if counts else ""))
    lines.append(f"Secrets:  {summary.secret_count}")
    lines.append("")

    lines.append("-" * 40)
    lines.append("DEPLOYMENT ORDER")
    lines.append("-" * 40)
    for position, name in enumerate(summary.deployment_order, 1):
        lines.append(f"  {position}. {name}")
    if not summary.deployment_order:
        lines.append("  (no services)")
    lines.append("")

    if summary.references:
        lines.append("-" * 40)
        lines.append("REFERENCES")
        lines.append("-" * 40)
        for ref in summary.references:
            lines.append(f"  {ref.source} → {ref.target} ({', '.join(ref.variables)})")
        lines.append("")

    if summary.dangling:
        lines.append("-" * 40)
        lines.append("DANGLING REFERENCES")
        lines.append("-" * 40)
        for ref in summary.dangling:
            lines.append(f"  {ref.service}.{ref.variable} → {ref.missing} (no such service)")
        lines.append("")

    return "\n".join(lines)


def summary_to_dict(summary: TemplateSummary) -> dict:
    """Convert TemplateSummary to a JSON-serializable dict."""
    return asdict(summary)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Inspect a template file: deployment order and references."
    )
    parser.add_argument(
        "template_file",
        type=Path,
        help="path to the template JSON file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="output summary as JSON instead of human-readable format",
    )

    args = parser.parse_args(argv)

    if not args.template_file.exists():
        print(f"Error: template file not found: {args.template_file}", file=sys.stderr)
        return 1

    try:
        services = load_services(args.template_file)
    except (ValueError, ValidationError) as exc:
        print(f"Error: invalid template file: {exc}", file=sys.stderr)
        return 1

    summary = template_summary(services)

    if args.json:
        print(json.dumps(summary_to_dict(summary), indent=2))
    else:
        print(format_summary(summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())
