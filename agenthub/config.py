import os
from functools import lru_cache
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings

from agenthub.errors import ConfigurationError

# Placeholder principal used when a request does not identify its user
PLACEHOLDER_USER_ID = "00000000-0000-0000-0000-000000000001"


class Settings(BaseSettings):
    # App
    app_name: str = "AgentHub"
    app_env: str = "development"  # selects .env.<app_env> on top of .env
    debug: bool = False
    log_level: str = "INFO"

    # Database (required, no default)
    database_url: str
    db_pool_size: int = 10
    db_max_overflow: int = 20
    script_pool_size: int = 2  # scripts and tests keep a small fixed pool

    # Property alias for Alembic compatibility
    @property
    def DATABASE_URL(self) -> str:
        return self.database_url

    # Acting principal fallback (single-tenant deployments)
    default_user_id: str = PLACEHOLDER_USER_ID
    default_user_name: str = "Admin"
    default_user_email: str = "admin@ia-agent.com"

    # Embedding
    embedding_model: str = "text-embedding-3-small"
    embedding_dimension: int = 1536  # must match knowledge_base.embedding vector(1536)
    openai_api_key: Optional[str] = None  # Set via OPENAI_API_KEY env var

    # Scripts
    scripts_strict: bool = True  # exit non-zero when a setup/migration step fails

    # API
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def env_files(app_env: Optional[str] = None) -> tuple[str, ...]:
    """Env files to load, later files overriding earlier ones."""
    app_env = app_env or os.getenv("APP_ENV", "development")
    return (".env", f".env.{app_env}")


@lru_cache()
def get_settings() -> Settings:
    try:
        return Settings(_env_file=env_files())
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]).upper() for err in e.errors()]
        raise ConfigurationError(
            f"Invalid or missing configuration: {', '.join(missing)}"
        ) from e


settings = get_settings()
