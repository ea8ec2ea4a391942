"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) - single instance per process
    - signer_private_key has no usable default; startup fails without it

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - admin_keys parsed from a JSON object env var: {"<fid>": "<address>"}
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from fname_registry.core.attestation import (
    DEFAULT_CHAIN_ID, DEFAULT_VERIFYING_CONTRACT,
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, populate_by_name=True,
    )

    environment: str = "dev"
    service_name: str = Field("fname-registry", alias="dd_service")

    # Database
    database_url: str = (
        "postgresql+asyncpg://fnames:fnames@db:5432/fnames"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Signing
    signer_private_key: str = ""
    admin_keys: dict[int, str] = {}
    eip712_chain_id: int = DEFAULT_CHAIN_ID
    eip712_verifying_contract: str = DEFAULT_VERIFYING_CONTRACT

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
