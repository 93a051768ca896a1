"""ClimateSense configuration settings.

Loads configuration from environment variables with sensible defaults.
The LLM credential is read through the config.secrets module.
"""

import os
from typing import List, Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load .env file for local development
load_dotenv()


def _split_origins(value: str) -> List[str]:
    """Split a comma-separated origin list, dropping blanks."""
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables.

    Note: The credential (OPENAI_API_KEY) is not validated at startup.
    A missing key surfaces as an LLM error on the first remote call.
    """

    # LLM Configuration (non-secrets)
    llm_model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o"))
    llm_design_model: Optional[str] = field(default_factory=lambda: os.getenv("LLM_DESIGN_MODEL"))
    llm_temperature: float = field(default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.2")))
    llm_max_tokens: Optional[int] = field(
        default_factory=lambda: int(os.getenv("LLM_MAX_TOKENS")) if os.getenv("LLM_MAX_TOKENS") else None
    )
    llm_base_url: Optional[str] = field(default_factory=lambda: os.getenv("LLM_BASE_URL") or None)

    # Web Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8080")))
    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY", "dev-secret-key-change-in-production"))
    cors_origins: List[str] = field(
        default_factory=lambda: _split_origins(os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"))
    )

    # Sessions (one design controller each, evicted by LRU and idle time)
    session_limit: int = field(default_factory=lambda: int(os.getenv("SESSION_LIMIT", "500")))
    session_ttl_seconds: float = field(default_factory=lambda: float(os.getenv("SESSION_TTL", "3600")))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Internal: cached secret value (use openai_api_key property instead)
    _openai_api_key: Optional[str] = field(default=None, repr=False)

    @property
    def openai_api_key(self) -> Optional[str]:
        """Get the LLM API key from the environment."""
        if self._openai_api_key is None:
            from config.secrets import get_openai_api_key
            self._openai_api_key = get_openai_api_key()
        return self._openai_api_key

    @property
    def design_model(self) -> str:
        """Model used for layout synthesis and refinement."""
        return self.llm_design_model or self.llm_model


# Singleton settings instance
settings = Settings()
