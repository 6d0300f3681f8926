"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str = Field(default="logs/app.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./database.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        """Whether the configured backend is SQLite."""
        return self.url.startswith("sqlite")


class IdentityProviderConfig(BaseModel):
    """Keycloak admin API configuration for the remote identity store."""

    base_url: str = Field(
        default="http://localhost:8080", description="Keycloak server base URL"
    )
    realm: str = Field(default="app-realm", description="Realm holding user identities")
    admin_realm: str = Field(
        default="master", description="Realm used to obtain the admin token"
    )
    admin_client_id: str = Field(
        default="admin-cli", description="Client used for the admin password grant"
    )
    admin_username: str = Field(default="admin", description="Admin username")
    admin_password: str = Field(default="admin", description="Admin password")
    timeout_seconds: float = Field(
        default=10.0, description="Upper bound for every identity provider call"
    )


class AccountsConfig(BaseModel):
    """Account policy configuration."""

    min_password_length: int = Field(
        default=6, description="Minimum password length for new credentials"
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    identity_provider: IdentityProviderConfig = Field(
        default_factory=IdentityProviderConfig,
        description="Identity provider configuration",
    )
    accounts: AccountsConfig = Field(
        default_factory=AccountsConfig, description="Account policy configuration"
    )
