"""
Configuration settings for the User Resource API and its documentation harness
"""

import os
import logging

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment"""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Server configuration
PORT = int(os.getenv("PORT", 8080))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
API_PREFIX = "/api/v1/users"

# Backend behaviour for identifiers that were never created.
# Permissive mode upserts on PUT and echoes a placeholder on DELETE;
# strict mode answers 404 for both.
USERS_PERMISSIVE_UPDATE = _env_flag("USERS_PERMISSIVE_UPDATE", True)
USERS_PERMISSIVE_DELETE = _env_flag("USERS_PERMISSIVE_DELETE", True)

# Pagination bounds for the list endpoint
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", 20))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", 100))

# Documentation output
SNIPPETS_OUTPUT_DIR = os.getenv("SNIPPETS_OUTPUT_DIR", "build/generated-snippets")
SNIPPETS_FORMAT = os.getenv("SNIPPETS_FORMAT", "asciidoctor")
SUPPORTED_SNIPPET_FORMATS = ("asciidoctor", "markdown")

if SNIPPETS_FORMAT not in SUPPORTED_SNIPPET_FORMATS:
    raise ValueError(
        f"SNIPPETS_FORMAT must be one of {', '.join(SUPPORTED_SNIPPET_FORMATS)}, got '{SNIPPETS_FORMAT}'"
    )

# CORS settings
ALLOWED_ORIGINS = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")]
