"""Placeholder grammar for variable interpolation.

Variable values are free text that may embed two kinds of directives, both
resolved downstream by the deployment executor, never here:

    {{ secret(64, "abcdef") }}        a generated secret
    {{ api.DFLOW_PUBLIC_DOMAIN }}     the public domain of service "api"
    {{ db.POSTGRES_URI }}             a connection attribute of database "db"

Reference directives are the only coupling between services; the graph layer
turns them into edges.
"""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

PUBLIC_DOMAIN_TOKEN = "DFLOW_PUBLIC_DOMAIN"

# private suffixes resolve inside the deployment network, public ones from outside
PRIVATE_SUFFIXES = ("URI", "NAME", "USERNAME", "PASSWORD", "HOST", "PORT")
PUBLIC_SUFFIXES = ("PUBLIC_HOST", "PUBLIC_PORT", "PUBLIC_URI")
REFERENCE_SUFFIXES = PRIVATE_SUFFIXES + PUBLIC_SUFFIXES

DEFAULT_SECRET_LENGTH = 64
DEFAULT_SECRET_CHARSET = "abcdefghijklMNOPQRSTUVWXYZ"

# longest alternatives first so PUBLIC_HOST is not read as HOST
_SUFFIX_PATTERN = "|".join(sorted(REFERENCE_SUFFIXES, key=len, reverse=True))
_TOKEN_PATTERN = rf"{PUBLIC_DOMAIN_TOKEN}|[A-Z][A-Z0-9]*_(?:{_SUFFIX_PATTERN})"

REFERENCE_PATTERN = re.compile(
    rf"\{{\{{\s*(?P<name>[A-Za-z0-9_-]+)\.(?P<token>{_TOKEN_PATTERN})\s*\}}\}}"
)
SECRET_PATTERN = re.compile(
    r'\{\{\s*secret\(\s*(?P<length>\d+)\s*,\s*"(?P<charset>[^"]*)"\s*\)\s*\}\}'
)


@dataclass(frozen=True)
class Reference:
    """A reference directive found in a variable value."""

    name: str  # target service name
    token: str  # e.g. POSTGRES_URI or DFLOW_PUBLIC_DOMAIN
    start: int
    end: int

    @property
    def is_public_domain(self) -> bool:
        return self.token == PUBLIC_DOMAIN_TOKEN


@dataclass(frozen=True)
class SecretDirective:
    length: int
    charset: str


def iter_references(value: str) -> Iterator[Reference]:
    """Yield every syntactically valid reference directive in ``value``.

    Malformed placeholders are skipped; they stay as inert text.
    """
    for match in REFERENCE_PATTERN.finditer(value):
        yield Reference(
            name=match.group("name"),
            token=match.group("token"),
            start=match.start(),
            end=match.end(),
        )


def iter_secrets(value: str) -> Iterator[SecretDirective]:
    for match in SECRET_PATTERN.finditer(value):
        yield SecretDirective(
            length=int(match.group("length")),
            charset=match.group("charset"),
        )


def reference_placeholder(name: str, token: str) -> str:
    return f"{{{{ {name}.{token} }}}}"


def public_domain_placeholder(name: str) -> str:
    """Placeholder for the public domain of service ``name``."""
    return reference_placeholder(name, PUBLIC_DOMAIN_TOKEN)


def database_placeholder(name: str, engine: str, suffix: str) -> str:
    """Placeholder for one connection attribute of database ``name``.

    ``engine`` is the lowercase engine value (``postgres``); the token uses
    its uppercase form (``POSTGRES_URI``).
    """
    if suffix not in REFERENCE_SUFFIXES:
        raise ValueError(f"suffix must be one of {REFERENCE_SUFFIXES}")
    return reference_placeholder(name, f"{engine.upper()}_{suffix}")


def secret_placeholder(
    length: int = DEFAULT_SECRET_LENGTH,
    charset: str = DEFAULT_SECRET_CHARSET,
) -> str:
    if length <= 0:
        raise ValueError("secret length must be positive")
    if '"' in charset:
        raise ValueError("secret charset cannot contain double quotes")
    return f'{{{{ secret({length}, "{charset}") }}}}'


def append_placeholder(value: str | None, placeholder: str) -> str:
    """Append a placeholder to the current text of a field."""
    return f"{value or ''}{placeholder}"


def reference_options(
    service_name: str,
    databases: Iterable[tuple[str, str]],
) -> list[str]:
    """Placeholders offered by the reference dropdown of a variable field.

    Args:
        service_name: name of the service whose variable is being edited
        databases: (name, engine) pairs of the database services in the graph

    Returns:
        the service's own public domain, a secret, then every suffix of
        every database, in that order
    """
    options = [
        public_domain_placeholder(service_name),
        secret_placeholder(),
    ]
    for name, engine in databases:
        options.extend(
            database_placeholder(name, engine, suffix)
            for suffix in REFERENCE_SUFFIXES
        )
    return options
