"""
Configuration management for the Points API
"""

import os

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str | None = None
    db_user: str = "points"
    db_pass: str = "points_dev"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "points"
    database_pool_size: int = 10
    database_max_overflow: int = 20
    sql_echo: bool = False
    alembic_ini: str | None = None

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_reload: bool = False
    cors_origins: list[str] = ["*"]
    graphiql: bool = True

    # Leaderboard
    max_top_users_limit: int = 100

    # Environment
    environment: str = "development"  # 'development', 'staging', 'production'
    debug: bool = True
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "POINTS_"
        case_sensitive = False


# Global settings instance
settings = Settings()


def build_database_url(
    user: str, password: str, host: str, port: int | str, name: str
) -> str:
    """Assemble a PostgreSQL DSN from its parts, escaping reserved characters."""
    return URL.create(
        "postgresql",
        username=user,
        password=password,
        host=host,
        port=int(port),
        database=name,
    ).render_as_string(hide_password=False)


def get_database_url() -> str:
    """Get database URL, checking environment variables first for test compatibility."""
    db_url = os.getenv("POINTS_DATABASE_URL")
    if db_url:
        return db_url
    if settings.database_url:
        return settings.database_url
    return build_database_url(
        settings.db_user,
        settings.db_pass,
        settings.db_host,
        settings.db_port,
        settings.db_name,
    )


def is_production() -> bool:
    return settings.environment.lower() in ("production", "prod")
