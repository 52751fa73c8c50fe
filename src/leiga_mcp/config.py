"""Runtime configuration for the Leiga MCP server.

Values come from the environment (``LEIGA_*``) or a local ``.env`` file.
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_TOKEN_PATH = Path.home() / ".leiga" / "leiga-token.json"


class Settings(BaseSettings):
    """Leiga MCP settings."""

    # OpenAPI application credentials
    client_id: Optional[str] = None
    secret: Optional[str] = None

    # Remote endpoints
    api_base_url: str = "https://app.leiga.com/openapi/api"
    web_url: str = "https://app.leiga.com"

    # Credential cache shared with other Leiga tooling
    token_path: Path = DEFAULT_TOKEN_PATH

    request_timeout: float = 30.0  # seconds
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="LEIGA_", env_file=".env", extra="ignore")

    def has_credentials(self) -> bool:
        return bool(self.client_id) and bool(self.secret)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
