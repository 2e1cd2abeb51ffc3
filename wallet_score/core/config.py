from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="Wallet Score API")
    environment: Literal["dev", "test", "staging", "prod"] = Field(default="dev")
    debug: bool = Field(default=False, description="Expose driver error details in 500 responses")
    log_level: str = Field(default="INFO")

    database_url: str = Field(
        default="sqlite+pysqlite:///./wallet_score.db",
        validation_alias=AliasChoices("DATABASE_URL", "NEON_CONNECTION_STRING"),
    )
    database_sslmode: Optional[str] = Field(default=None, description="libpq sslmode for PostgreSQL, e.g. 'require'")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    allowed_origins: list[str] | str = Field(default_factory=lambda: ["*"])

    run_startup_ddl: bool = Field(default=True)

    # Database connection pooling settings
    db_pool_size: int = Field(default=5, ge=1, le=50, description="Number of connections to keep in the pool")
    db_max_overflow: int = Field(default=10, ge=0, le=100, description="Max connections to create beyond pool_size")
    db_pool_timeout: int = Field(default=30, ge=1, le=300, description="Seconds to wait for connection from pool")
    db_pool_recycle: int = Field(default=3600, ge=300, description="Seconds before recycling a connection")
    db_pool_pre_ping: bool = Field(default=True, description="Enable connection health checks before use")

    @field_validator("database_url", mode="before")
    @classmethod
    def _normalize_database_url(cls, value: object) -> object:
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        if isinstance(value, str):
            stripped = value.strip()
            # Hosted Postgres providers hand out postgres:// which SQLAlchemy no longer accepts
            if stripped.startswith("postgres://"):
                return "postgresql://" + stripped[len("postgres://"):]
            return stripped
        return value

    @field_validator("database_sslmode", mode="before")
    @classmethod
    def _normalize_blank_sslmode(cls, value: object) -> Optional[str]:
        if value in (None, "", b""):
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        if isinstance(value, str):
            return value.strip() or None
        raise TypeError("DATABASE_SSLMODE must be a string")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> list[str]:
        if value in (None, "", b""):
            return ["*"]
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        if isinstance(value, str):
            stripped = value.strip()
            return [item.strip() for item in stripped.split(",") if item.strip()] or ["*"]
        if isinstance(value, (list, tuple)):
            return [str(item).strip() for item in value if str(item).strip()]
        raise TypeError("ALLOWED_ORIGINS must be a comma separated string or a list")

    @computed_field(return_type=bool)
    def is_production(self) -> bool:
        return self.environment == "prod"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
