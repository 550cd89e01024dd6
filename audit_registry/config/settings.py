# audit_registry/config/settings.py

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from audit_registry.domain.models.registry import (
    BURN_PRINCIPAL,
    DEFAULT_MAX_AUDITS,
    DEFAULT_SUBMISSION_FEE,
    RegistryConfig,
)


class RegistrySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "audit-registry"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "0.1.0"

    # --- Registry ---
    max_audits: int = Field(DEFAULT_MAX_AUDITS, gt=0)
    submission_fee: int = DEFAULT_SUBMISSION_FEE
    burn_principal: str = BURN_PRINCIPAL
    registry_principal: Optional[str] = None

    # --- Store ---
    store_backend: Literal["memory", "database"] = "memory"
    database_url: Optional[str] = None

    # --- Authorization oracle ---
    oracle_backend: Literal["static", "redis"] = "static"
    verified_registries: List[str] = Field(default_factory=list)
    redis_url: Optional[str] = None
    verified_registries_key: str = "registry:verified"

    # --- Value transfer / clock ---
    ledger_default_balance: Optional[int] = None
    clock: Literal["wall", "manual"] = "wall"

    # --- Messaging ---
    publish_events: bool = False
    rabbitmq_url: Optional[str] = None

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    def default_registry_config(self) -> RegistryConfig:
        """Construction-time config. The principal is latched separately, through the service."""
        return RegistryConfig(
            submission_fee=self.submission_fee,
            max_audits=self.max_audits,
        )


@lru_cache
def get_settings() -> RegistrySettings:
    return RegistrySettings()
