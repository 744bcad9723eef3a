"""Configuration: environment-driven settings (pydantic-settings), cached per process.

Invariants:
    - Credentials only ever arrive through the environment or .env
    - ledger_lock_timeout_seconds > 0 and ledger_max_attempts >= 1: a ledger call always ends
    - get_settings() returns the same Settings instance for the life of the process

Design Decisions:
    - Every non-secret value has a default matching the docker-compose stack
    - No default candidate limit exists; candidate_max_limit is only a ceiling
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Persistence
    database_url: str = "postgresql+asyncpg://rollcall:rollcall@db:5432/rollcall"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Participant ledger: bounded lock wait, whole-operation retries
    ledger_lock_timeout_seconds: float = Field(5.0, gt=0)
    ledger_max_attempts: int = Field(3, ge=1)

    # Candidate ranking
    candidate_max_limit: int = Field(25, ge=1)

    # HTTP
    cors_origins: list[str] = ["http://localhost:5173"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_asyncpg_driver(cls, v):
        """Managed Postgres URLs come as postgresql://; the async engine needs asyncpg."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return "postgresql+asyncpg://" + v[len("postgresql://"):]
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
