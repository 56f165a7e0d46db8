"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with COURSECATALOG_ prefix.
No YAML files, no file-based config — just env vars (12-factor app style).
"""

from typing import Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via COURSECATALOG_* env vars."""

    # Storage
    store_backend: Literal["sql", "json"] = "sql"
    database_url: str = "sqlite+aiosqlite:///./coursecatalog.db"
    json_store_path: str = "./data/catalog.json"
    auto_create_schema: bool = True
    seed_path: Optional[str] = None

    # Auth
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Server
    environment: str = "development"
    debug: bool = False  # echo SQL
    host: str = "0.0.0.0"
    port: int = 5000

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    enable_error_logging: bool = False  # tracebacks for 500s

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    model_config = {"env_prefix": "COURSECATALOG_"}

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Refuse the weakest bcrypt work factors outside development."""
        if self.environment != "development" and self.bcrypt_rounds < 10:
            raise ValueError(
                "COURSECATALOG_BCRYPT_ROUNDS must be at least 10 in "
                "non-development environments"
            )
        return self


# Singleton: import this everywhere
settings = Settings()
