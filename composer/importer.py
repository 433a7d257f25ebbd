"""Bulk import of environment variables from pasted text or .env files."""

import logging
import re
from collections.abc import Sequence

from composer.errors import InvalidEnvFileError
from composer.models.service_node import Variable

logger = logging.getLogger(__name__)

_ASSIGNMENT = re.compile(r"^([^=]+)=(.*)$")
_WRAPPING_QUOTES = re.compile(r'^"(.*)"$')
_ENV_FILENAME = re.compile(r"^\.?env(\.|$)", re.IGNORECASE)
_COMMENT_PREFIXES = ("#", "//")


def parse_env(text: str | None) -> list[Variable]:
    """Parse dotenv-style text into variables, keeping line order.

    Blank lines and ``#`` or ``//`` comments are skipped. A line without
    ``=`` becomes a key with an empty value. One pair of double quotes is
    removed only when it wraps the entire value.
    """
    variables: list[Variable] = []
    # only \n separates lines; strip() takes care of \r
    for line in (text or "").split("\n"):
        line = line.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue

        match = _ASSIGNMENT.match(line)
        if match:
            key, value = match.groups()
            value = _WRAPPING_QUOTES.sub(r"\1", value.strip())
            variables.append(Variable(key=key.strip(), value=value))
        else:
            variables.append(Variable(key=line, value=""))
    return variables


def is_env_file(filename: str) -> bool:
    """Accept ``.env``, ``.env.local``, ``env.production`` and the like."""
    return filename.startswith(".env") or bool(_ENV_FILENAME.match(filename))


def apply_paste(
    variables: Sequence[Variable],
    index: int,
    text: str,
) -> list[Variable]:
    """Replace the field at ``index`` with the rows parsed from pasted text.

    Text that parses to nothing leaves the list unchanged.
    """
    parsed = parse_env(text)
    if not parsed:
        return list(variables)
    if not 0 <= index < len(variables):
        raise IndexError(f"no variable field at index {index}")
    return [*variables[:index], *parsed, *variables[index + 1:]]


def apply_file(
    variables: Sequence[Variable],
    filename: str,
    text: str,
) -> list[Variable]:
    """Append the rows of an uploaded .env file.

    One trailing empty row (the blank field of a fresh form) is dropped first.

    Raises:
        InvalidEnvFileError: the filename does not look like a .env file
    """
    if not is_env_file(filename):
        logger.info("rejected variable import from %s", filename)
        raise InvalidEnvFileError(filename)

    parsed = parse_env(text)
    if not parsed:
        return list(variables)

    result = list(variables)
    if result and not result[-1].key and not result[-1].value:
        result.pop()
    result.extend(parsed)
    logger.debug("imported %d variables from %s", len(parsed), filename)
    return result
