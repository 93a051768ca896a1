"""ClimateSense configuration.

This package contains:
- settings: Environment variables and configuration
- secrets: Credential access
- errors: Custom exceptions and error codes
"""

from config.settings import settings
from config.errors import ClimateSenseError
from config.secrets import get_secret, get_openai_api_key

__all__ = [
    "settings",
    "ClimateSenseError",
    "get_secret",
    "get_openai_api_key",
]
