"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

FIREBASE_JWKS_URI = (
    "https://www.googleapis.com/service_accounts/v1/jwk/"
    "securetoken@system.gserviceaccount.com"
)


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class OIDCProviderConfig(BaseModel):
    """Identity provider whose ID tokens this API accepts."""

    issuer: str = Field(description="Token issuer (exact match against 'iss')")
    jwks_uri: str = Field(description="JWKS endpoint for JWT validation")
    client_id: str | None = Field(
        default=None,
        description="Project/client identifier, accepted as a token audience",
    )
    audiences: list[str] = Field(
        default_factory=list,
        description="Additional audiences accepted for this provider",
    )
    enabled: bool = Field(default=True, description="Accept tokens from this provider")
    dev_only: bool = Field(
        default=False, description="Only accept this provider in development and test"
    )

    @classmethod
    def firebase(cls, project_id: str, **kwargs) -> OIDCProviderConfig:
        """Build the provider entry for a Firebase Authentication project."""
        return cls(
            issuer=f"https://securetoken.google.com/{project_id}",
            jwks_uri=FIREBASE_JWKS_URI,
            client_id=project_id,
            **kwargs,
        )


class OIDCConfig(BaseModel):
    """OIDC configuration model."""

    providers: dict[str, OIDCProviderConfig] = Field(
        default_factory=dict, description="Identity provider configurations"
    )
    jwks_cache_ttl: int = Field(
        default=3600, description="Seconds a fetched JWKS stays cached"
    )
    jwks_timeout: float = Field(
        default=5.0, description="Timeout in seconds for JWKS requests"
    )


class JWTClaimsConfig(BaseModel):
    """JWT claims mapping configuration."""

    user_id: str = Field(
        default="sub", description="Claim name for user ID (usually 'sub')"
    )
    email: str = Field(default="email", description="Claim name for email address")
    email_verified: str = Field(
        default="email_verified", description="Claim name for the verified-email flag"
    )
    name: str = Field(default="name", description="Claim name for user's full name")


class JWTConfig(BaseModel):
    """JWT validation configuration."""

    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["RS256"],
        description="JWT algorithms allowed for token validation",
    )
    audiences: list[str] = Field(
        default_factory=list,
        description="JWT audiences accepted in addition to each provider's own",
    )
    clock_skew: int = Field(default=60, description="Clock skew tolerance in seconds")
    verify_exp: bool = Field(default=True, description="Verify token expiration")
    verify_nbf: bool = Field(default=True, description="Verify not-before claim")
    verify_iat: bool = Field(default=True, description="Verify issued-at claim")
    require_exp: bool = Field(default=True, description="Require expiration claim")
    require_iat: bool = Field(default=True, description="Require issued-at claim")
    claims: JWTClaimsConfig = Field(
        default_factory=JWTClaimsConfig, description="JWT claims mapping configuration"
    )


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./automarket.db",
        description="SQLAlchemy connection URL for the document store",
    )
    echo: bool = Field(default=False, description="Echo SQL statements")
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class StoreConfig(BaseModel):
    """Document store configuration."""

    backend: Literal["sql", "memory"] = Field(
        default="sql", description="Document store implementation"
    )
    users_collection: str = Field(default="users")
    cars_collection: str = Field(default="cars")


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    name: str = Field(default="Auto Marketplace Backend", description="Service name")
    version: str = Field(default="1.0.0", description="Service version")
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8080, description="Application port")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @field_validator("port")
    @classmethod
    def _valid_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError(f"port out of range: {value}")
        return value

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    oidc: OIDCConfig = Field(
        default_factory=OIDCConfig, description="OIDC configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT validation configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    store: StoreConfig = Field(
        default_factory=StoreConfig, description="Document store configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
