"""Summary of a template's services and the references between them.

Deployment order is reported as stored; it is not judged against the
references.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from composer.grammar import iter_secrets
from composer.graph.resolver import dangling_references, resolve
from composer.models.service_node import Service


@dataclass
class ServiceReference:
    """A resolved reference from one service to another."""

    source: str
    target: str
    variables: list[str] = field(default_factory=list)  # keys that hold the reference


@dataclass
class DanglingReference:
    """A placeholder naming a service that is not in the template."""

    service: str
    variable: str
    missing: str


@dataclass
class TemplateSummary:
    service_count: int
    deployment_order: list[str]
    services_by_type: dict[str, int] = field(default_factory=dict)
    references: list[ServiceReference] = field(default_factory=list)
    dangling: list[DanglingReference] = field(default_factory=list)
    secret_count: int = 0


def template_summary(services: Sequence[Service]) -> TemplateSummary:
    """Build a summary from a persisted service list."""
    summary = TemplateSummary(
        service_count=len(services),
        deployment_order=[service.name for service in services],
    )

    by_pair: dict[tuple[str, str], ServiceReference] = {}
    for service in services:
        kind = service.type.value
        summary.services_by_type[kind] = summary.services_by_type.get(kind, 0) + 1

        for variable in service.variables:
            summary.secret_count += sum(1 for _ in iter_secrets(variable.value))

            for target in resolve(variable.value, services, service.name):
                pair = (service.name, target)
                if pair not in by_pair:
                    by_pair[pair] = ServiceReference(source=service.name, target=target)
                    summary.references.append(by_pair[pair])
                by_pair[pair].variables.append(variable.key)

            for missing in dangling_references(variable.value, services):
                summary.dangling.append(DanglingReference(
                    service=service.name,
                    variable=variable.key,
                    missing=missing,
                ))

    return summary
