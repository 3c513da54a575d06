from functools import lru_cache
import os

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config_models import DatabaseConfig, LoggingConfig, ServerConfig

_TRUTHY = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


class Settings(BaseSettings):
    """Application settings assembled from environment variables and defaults."""

    # Environment
    environment: str = Field(default="development", pattern="^(development|staging|production)$")
    debug: bool = Field(default=False)

    # Site
    api_title: str = Field(default="PostBoard")
    api_version: str = Field(default="1.0.0")
    api_description: str = Field(default="Server-rendered blog post board built with FastAPI")

    # Server
    server: ServerConfig = Field(default_factory=ServerConfig)

    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Database (populated in validator)
    database: DatabaseConfig | None = None

    # CORS origins, comma separated in CORS_ALLOW_ORIGINS
    cors_allow_origins: str = Field(default="")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, **values):
        # Ensure plain ValueError is raised (not Pydantic ValidationError)
        if not os.getenv("DATABASE_URL"):
            raise ValueError("DATABASE_URL environment variable is required")
        super().__init__(**values)

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    @model_validator(mode="after")
    def _assemble_subconfigs(self):
        """Assemble nested configurations from environment variables."""
        database_url = os.environ["DATABASE_URL"]

        pool_size = int(os.getenv("DB_POOL_SIZE", "10"))
        max_overflow = int(os.getenv("DB_MAX_OVERFLOW", "20"))
        pool_timeout = int(os.getenv("DB_POOL_TIMEOUT", "30"))
        echo = self.environment == "development" and self.debug

        self.database = DatabaseConfig(
            url=database_url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            # SQLite has no migration step in local runs, so create the schema by default
            create_all=_env_flag("DB_CREATE_ALL", database_url.startswith("sqlite")),
        )

        # Adjust logging for environment
        if self.environment == "production":
            self.logging.level = "WARNING"
        elif self.environment == "development":
            self.logging.level = "DEBUG"

        self.server.check_db_on_start = _env_flag("DB_CHECK_ON_START", self.server.check_db_on_start)

        return self


@lru_cache
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
