from types import MappingProxyType
from typing import Mapping, Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = Field(default=SecretStr("postgres"))
    database: str = "postgres"
    schema_name: Optional[str] = Field(default=None, validation_alias="DB_SCHEMA")
    serverless: bool = Field(
        default=True,
        description="If true, disable connection pooling so serverless DBs can pause.",
    )
    url_override: Optional[SecretStr] = Field(
        default=None,
        validation_alias="DATABASE_URL",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        if self.url_override is not None:
            return self.url_override.get_secret_value()
        username = quote_plus(self.username)
        password = quote_plus(self.password.get_secret_value())
        return (
            "postgresql+asyncpg://"
            f"{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


class WebhookConfig(BaseSettings):
    """Discord destination per source account."""

    maincro: Optional[str] = None
    altcro: Optional[str] = None
    ducro: Optional[str] = None
    tricro: Optional[str] = None
    extra_accounts: dict[str, str] = Field(default_factory=dict)
    timeout_seconds: float = Field(default=10.0, gt=0)

    @property
    def destinations(self) -> Mapping[str, str]:
        """Read-only account -> webhook URL mapping, unset URLs omitted."""

        candidates = {
            "maincro": self.maincro,
            "altcro": self.altcro,
            "ducro": self.ducro,
            "tricro": self.tricro,
            **self.extra_accounts,
        }
        return MappingProxyType(
            {
                name: url.strip()
                for name, url in candidates.items()
                if url and url.strip()
            }
        )

    model_config = SettingsConfigDict(
        env_prefix="WEBHOOK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Natro Webhook Relay"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    create_tables_on_startup: bool = True
    log_retention_minutes: int = Field(default=20, ge=1)

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # Discord destinations
    webhooks: WebhookConfig = Field(default_factory=WebhookConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
