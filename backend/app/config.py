"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded outside the dev placeholder)
    - get_settings() is cached (lru_cache) — single frozen instance per process
    - Services receive AuthConfig at construction; request handling never reads the environment

Design Decisions:
    - AuthConfig as a frozen dataclass: the token and identity services depend on
      four values, not on the whole settings surface
"""

from dataclasses import dataclass
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_JWT_SECRET = "dev-only-secret-change-me-before-deploying-anywhere"

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


@dataclass(frozen=True)
class AuthConfig:
    """Signing and hashing parameters shared by the token and identity services."""
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_ttl_hours: int = 24
    password_hash_rounds: int = 10


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, frozen=True,
    )

    # Database
    database_url: str = "postgresql+asyncpg://goals:goals@db:5432/goals"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_expiry_hours: int = Field(24, gt=0)
    password_hash_rounds: int = Field(10, ge=10, le=31)

    @field_validator("jwt_algorithm")
    @classmethod
    def require_hmac_algorithm(cls, v: str) -> str:
        if v not in HMAC_ALGORITHMS:
            raise ValueError(f"jwt_algorithm must be one of {', '.join(HMAC_ALGORITHMS)}")
        return v

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def uses_dev_secret(self) -> bool:
        return self.jwt_secret == DEV_JWT_SECRET

    def auth_config(self) -> AuthConfig:
        return AuthConfig(
            jwt_secret=self.jwt_secret,
            jwt_algorithm=self.jwt_algorithm,
            token_ttl_hours=self.token_expiry_hours,
            password_hash_rounds=self.password_hash_rounds,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
