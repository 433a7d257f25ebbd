"""Environment-driven settings for the composer client side."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()  # load environment variables from .env file

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_DRAFT_DIR = Path.home() / ".composer" / "drafts"

# key of the draft slot used while composing a template that was never saved
DEFAULT_DRAFT_SLOT = "create-new-template"


def api_url() -> str:
    """base URL of the template persistence API."""
    return os.getenv("COMPOSER_API_URL", DEFAULT_API_URL)


def deploy_url() -> str:
    """base URL of the deployment executor, defaults to the API URL."""
    return os.getenv("COMPOSER_DEPLOY_URL") or api_url()


def http_timeout() -> float:
    return float(os.getenv("COMPOSER_HTTP_TIMEOUT", "10.0"))


def draft_dir() -> Path:
    return Path(os.getenv("COMPOSER_DRAFT_DIR", str(DEFAULT_DRAFT_DIR)))
