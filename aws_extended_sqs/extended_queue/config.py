"""
Settings for the extended queue client.

Values are read from the environment (prefix EXTENDED_SQS_) or a .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_DELAY, SLOW_REQUEST_THRESHOLD_MS


class ExtendedQueueSettings(BaseSettings):
    """Extended queue client configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXTENDED_SQS_",
        env_file=".env",
        extra="ignore",
    )

    # Bucket holding oversize message payloads
    message_bucket_name: str = Field("", description="S3 bucket for oversize payloads")

    # AWS session
    region: str | None = Field(None, description="AWS region (SDK default when unset)")
    profile: str | None = Field(None, description="AWS profile (SDK default when unset)")

    # Retry driver
    retry_attempts: int = Field(DEFAULT_RETRY_ATTEMPTS, ge=0)
    retry_delay_seconds: float = Field(DEFAULT_RETRY_DELAY, ge=0)

    # Requests at or above this duration are logged
    slow_request_ms: int = Field(SLOW_REQUEST_THRESHOLD_MS, ge=0)
