# src/messages_api/config/settings.py
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_DEPLOYMENT_MODES = ["local-dev", "aws-mock", "aws-prod"]
VALID_RELAY_MODES = ["direct", "delegated"]

# moto server default port
LOCAL_ENDPOINT_URL = "http://localhost:5000"


@dataclass(frozen=True)
class RelayConfig:
    """Destinations of the relay, bound once at startup."""

    queue_name: str
    bucket_name: str


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from messages_api.config.settings import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """

    # Application Settings
    app_name: str = Field(
        default="messages-api",
        description="Application name"
    )

    # Deployment Mode
    deployment_mode: str = Field(
        default="local-dev",
        description="Deployment mode: local-dev, aws-mock, or aws-prod"
    )

    # Relay Mode
    relay_mode: str = Field(
        default="direct",
        description="direct uploads on create, delegated leaves the upload to the queue consumer"
    )

    consumer_enabled: bool = Field(
        default=True,
        description="Run the queue consumer inside the API process in delegated mode"
    )

    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID",
        validate_default=True
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY",
        validate_default=True
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL",
        validate_default=True
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        default="messages-storage",
        description="S3 bucket holding message content"
    )

    # SQS Configuration
    sqs_queue_name: str = Field(
        default="messages-queue",
        description="SQS queue name"
    )

    sqs_queue_url: Optional[str] = Field(
        default=None,
        alias="SQS_QUEUE_URL",
        description="Full SQS queue URL (resolved from the queue name if not set)"
    )

    sqs_wait_time_seconds: int = Field(
        default=5,
        ge=0,
        le=20,
        description="Long-poll wait for the queue consumer"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator('deployment_mode', mode='before')
    @classmethod
    def normalize_deployment_mode(cls, v):
        """Normalize deployment mode values for backwards compatibility."""
        if v:
            mode_mapping = {
                "local-mock": "local-dev",
                "local": "local-dev",
                "cloud": "aws-prod",
            }
            return mode_mapping.get(v, v)
        return v

    @field_validator('deployment_mode')
    @classmethod
    def validate_deployment_mode(cls, v):
        """Validate deployment mode is one of the allowed values."""
        if v not in VALID_DEPLOYMENT_MODES:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {VALID_DEPLOYMENT_MODES}")
        return v

    @field_validator('relay_mode', mode='before')
    @classmethod
    def normalize_relay_mode(cls, v):
        if isinstance(v, str):
            v = v.lower()
            return {"sync": "direct", "async": "delegated"}.get(v, v)
        return v

    @field_validator('relay_mode')
    @classmethod
    def validate_relay_mode(cls, v):
        if v not in VALID_RELAY_MODES:
            raise ValueError(f"Invalid relay_mode: {v}. Must be one of {VALID_RELAY_MODES}")
        return v

    @field_validator('aws_endpoint_url')
    @classmethod
    def set_endpoint_url_based_on_mode(cls, v, info: ValidationInfo):
        """Point local-dev at the moto server unless an endpoint is given."""
        if v is None and info.data.get('deployment_mode') == "local-dev":
            return LOCAL_ENDPOINT_URL
        return v

    @field_validator('aws_access_key_id', 'aws_secret_access_key')
    @classmethod
    def set_mock_credentials_for_local_modes(cls, v, info: ValidationInfo):
        """Auto-set mock credentials for local modes if not provided."""
        if v is None and info.data.get('deployment_mode') in ["local-dev", "aws-mock"]:
            return "mock"
        # In production, None lets the IAM execution role handle auth
        return v

    @property
    def relay_config(self) -> RelayConfig:
        return RelayConfig(queue_name=self.sqs_queue_name, bucket_name=self.s3_bucket_name)

    @property
    def is_delegated(self) -> bool:
        return self.relay_mode == "delegated"

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
