"""ID generation, naming and timestamp utilities."""

import random
import uuid
from datetime import datetime, timezone

_ADJECTIVES = (
    "brave", "calm", "eager", "fancy", "gentle", "happy", "jolly", "keen",
    "lively", "mellow", "nimble", "proud", "quiet", "rapid", "silly", "witty",
)
_COLORS = (
    "amber", "azure", "coral", "crimson", "emerald", "gold", "indigo", "ivory",
    "jade", "lime", "olive", "plum", "ruby", "silver", "teal", "violet",
)
_ANIMALS = (
    "badger", "beaver", "falcon", "ferret", "gecko", "heron", "koala", "lemur",
    "lynx", "marmot", "otter", "panda", "puffin", "raven", "tapir", "walrus",
)


def generate_node_id() -> str:
    """Generate a node ID (UUID4), valid for one editing session only."""
    return str(uuid.uuid4())


def generate_template_id() -> str:
    """Generate a unique template ID (UUID4)."""
    return str(uuid.uuid4())


def edge_id(source: str, target: str) -> str:
    """Build the ID of the reference edge from source to target."""
    return f"e-{source}-{target}"


def generate_template_name(rng: random.Random | None = None) -> str:
    """Generate a default template name like ``brave-teal-otter``."""
    rng = rng or random.Random()
    return "-".join(
        rng.choice(words) for words in (_ADJECTIVES, _COLORS, _ANIMALS)
    )


def utc_timestamp() -> str:
    """Generate an ISO8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()
