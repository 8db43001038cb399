"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

GRAPHQL_OPERATIONS = (
    "bookList",
    "book",
    "bookSearch",
    "bookCreate",
    "bookUpdate",
    "bookDelete",
)


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(default=["GET", "POST", "OPTIONS"])
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


class ReplicaSetConfig(BaseModel):
    """Replica set layout used when initiating a fresh MongoDB deployment."""

    name: str = Field(default="rs0", description="Replica set name")
    members: list[str] = Field(
        default_factory=lambda: ["mongo1:27017", "mongo2:27017", "mongo3:27017"],
        description="host:port of each replica set member, in member id order",
    )


class DatabaseConfig(BaseModel):
    """MongoDB configuration model."""

    url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string",
    )
    name: str = Field(default="bookshelf", description="Database name")
    books_collection: str = Field(
        default="books", description="Collection holding book records"
    )
    id_prefix: str = Field(
        default="book_", description="Prefix of the derived secondary identifier"
    )
    min_pool_size: int = Field(default=5, description="Minimum connection pool size")
    max_pool_size: int = Field(default=10, description="Maximum connection pool size")
    server_selection_timeout_ms: int = Field(
        default=30000, description="Server selection timeout in milliseconds"
    )
    socket_timeout_ms: int = Field(
        default=45000, description="Socket timeout in milliseconds"
    )
    retry_writes: bool = Field(default=True, description="Enable retryable writes")
    replica_set: ReplicaSetConfig = Field(
        default_factory=ReplicaSetConfig, description="Replica set layout"
    )

    @field_validator("max_pool_size")
    @classmethod
    def _pool_bounds(cls, value: int, info) -> int:
        minimum = info.data.get("min_pool_size", 0)
        if value < minimum:
            raise ValueError(
                f"max_pool_size ({value}) must be >= min_pool_size ({minimum})"
            )
        return value


class AuthConfig(BaseModel):
    """Shared bearer token authorization."""

    token: str | None = Field(
        default=None, description="Pre-shared bearer token compared on protected operations"
    )
    scheme: str = Field(default="Bearer", description="Expected authorization scheme")
    protected_operations: list[str] = Field(
        default_factory=lambda: ["bookCreate"],
        description="GraphQL fields that require the bearer token",
    )

    @field_validator("token")
    @classmethod
    def _empty_token_is_unset(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("protected_operations")
    @classmethod
    def _known_operations(cls, value: list[str]) -> list[str]:
        unknown = [op for op in value if op not in GRAPHQL_OPERATIONS]
        if unknown:
            raise ValueError(f"Unknown GraphQL operations: {', '.join(unknown)}")
        return value


class ClientConfig(BaseModel):
    """Settings for the GraphQL gateway client and the CLI grid."""

    base_url: str = Field(
        default="http://localhost:5000", description="Base URL of the GraphQL server"
    )
    timeout_seconds: float = Field(default=30.0, description="HTTP request timeout")
    notification_life_seconds: float = Field(
        default=3.0, description="How long an error or success message stays visible"
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=5000, description="Application port")
    graphql_path: str = Field(default="/gql", description="Path of the GraphQL endpoint")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @field_validator("graphql_path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        value = value.strip() or "/gql"
        return value if value.startswith("/") else f"/{value}"

    @property
    def introspection(self) -> bool:
        """Schema introspection and the GraphiQL IDE are disabled in production."""
        return self.environment != "production"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    auth: AuthConfig = Field(
        default_factory=AuthConfig, description="Authorization configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    client: ClientConfig = Field(
        default_factory=ClientConfig, description="Gateway client configuration"
    )
