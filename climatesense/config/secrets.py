"""Credential access for ClimateSense.

The only secret is the LLM provider API key. It is read from the process
environment (optionally populated from a .env file by config.settings).

Usage:
    from config.secrets import get_openai_api_key

    api_key = get_openai_api_key()
"""

import os
from functools import lru_cache
from typing import Optional

import structlog

logger = structlog.get_logger()


def get_secret(secret_id: str) -> Optional[str]:
    """
    Get a secret from the process environment.

    Args:
        secret_id: The name of the secret (e.g., 'OPENAI_API_KEY')

    Returns:
        The secret value, or None if not set
    """
    value = os.environ.get(secret_id)
    if not value:
        # Not fatal: authentication errors surface on the first remote call
        logger.warning("secret_not_found", secret_id=secret_id)
        return None
    return value


@lru_cache(maxsize=1)
def get_openai_api_key() -> Optional[str]:
    """Get the LLM API key."""
    return get_secret('OPENAI_API_KEY')


def clear_secret_cache() -> None:
    """Clear cached secrets. Useful for testing or when secrets are rotated."""
    get_openai_api_key.cache_clear()
