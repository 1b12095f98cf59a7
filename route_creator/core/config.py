"""Application configuration using Pydantic Settings."""
from functools import lru_cache
from typing import Any, List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Route Creator", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    # Routing
    api_namespace: str = Field(default="custom/v2", alias="API_NAMESPACE")

    # Authentication
    api_key_header: str = Field(default="X-API-Key", alias="API_KEY_HEADER")
    api_keys: Union[str, List[str]] = Field(default=[], alias="API_KEYS")

    # Rate Limiting
    rate_limit_requests: int = Field(default=60, alias="RATE_LIMIT_REQUESTS")
    rate_limit_window: int = Field(default=60, alias="RATE_LIMIT_WINDOW")

    # Transient store
    transient_store: str = Field(default="memory", alias="TRANSIENT_STORE")

    # AWS
    aws_region: str = Field(default="us-west-2", alias="AWS_REGION")
    aws_access_key_id: Optional[str] = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[str] = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")

    # DynamoDB
    dynamodb_endpoint_url: Optional[str] = Field(default=None, alias="DYNAMODB_ENDPOINT_URL")
    dynamodb_transient_table: str = Field(
        default="route-creator-transient", alias="DYNAMODB_TRANSIENT_TABLE"
    )
    dynamodb_timeout: int = Field(default=5, alias="DYNAMODB_TIMEOUT")

    # CORS
    cors_allow_origin: str = Field(default="*", alias="CORS_ALLOW_ORIGIN")
    cors_allow_methods: Union[str, List[str]] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE"], alias="CORS_ALLOW_METHODS"
    )
    cors_allow_headers: Union[str, List[str]] = Field(
        default=["Content-Type", "Authorization"], alias="CORS_ALLOW_HEADERS"
    )

    @field_validator("api_keys", "cors_allow_methods", "cors_allow_headers", mode="before")
    @classmethod
    def parse_comma_list(cls, v: Any) -> List[str]:
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("api_namespace")
    @classmethod
    def normalize_namespace(cls, v: str) -> str:
        return v.strip("/")

    @field_validator("transient_store")
    @classmethod
    def normalize_store(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid:
            raise ValueError(f"Log level must be one of {valid}")
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
