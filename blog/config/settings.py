"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Object storage credentials can be supplied under two names: a server-only
name (OSS_REGION) and a public-exposed name (PUBLIC_OSS_REGION). The first
non-empty value wins. When any required credential is missing, uploads are
written to local disk instead.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _first_non_empty(*values: Optional[str]) -> str:
    """Return the first value that is not None or blank."""
    for value in values:
        if value and value.strip():
            return value.strip()
    return ""


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Personal Blog"
    api_version: str = "v1"

    # Object Storage (Aliyun OSS, S3-compatible)
    oss_region: str = Field(
        default="",
        description="OSS region, e.g. oss-cn-hangzhou"
    )
    public_oss_region: str = Field(
        default="",
        description="Public-exposed alternate for OSS_REGION"
    )
    oss_access_key_id: str = Field(
        default="",
        description="OSS access key ID"
    )
    public_oss_access_key_id: str = Field(
        default="",
        description="Public-exposed alternate for OSS_ACCESS_KEY_ID"
    )
    oss_access_key_secret: str = Field(
        default="",
        description="OSS access key secret"
    )
    public_oss_access_key_secret: str = Field(
        default="",
        description="Public-exposed alternate for OSS_ACCESS_KEY_SECRET"
    )
    oss_bucket: str = Field(
        default="",
        description="OSS bucket name"
    )
    public_oss_bucket: str = Field(
        default="",
        description="Public-exposed alternate for OSS_BUCKET"
    )
    oss_base_path: str = Field(
        default="",
        description="Optional key prefix for every uploaded object"
    )
    public_oss_base_path: str = Field(
        default="",
        description="Public-exposed alternate for OSS_BASE_PATH"
    )
    oss_endpoint_url: Optional[str] = Field(
        default=None,
        description="OSS endpoint URL. Auto-constructed from region if not provided."
    )

    # Upload Behavior
    upload_retry_max_attempts: int = Field(
        default=3,
        description="Total put attempts against object storage before giving up"
    )
    upload_retry_initial_delay: float = Field(
        default=1.0,
        description="Seconds to wait after the first failed attempt"
    )
    upload_retry_max_delay: float = Field(
        default=5.0,
        description="Ceiling in seconds for the exponential backoff delay"
    )
    upload_root: str = Field(
        default="public/uploads",
        description="Local directory used when object storage is not configured"
    )
    upload_url_prefix: str = Field(
        default="/uploads",
        description="URL prefix the local upload directory is served under"
    )
    max_upload_size_mb: int = Field(
        default=50,
        description="Maximum size of a single uploaded file in MB"
    )

    # MongoDB Configuration
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string"
    )
    mongodb_database: str = Field(
        default="blog",
        description="Database holding the sites collection"
    )
    mongodb_mock_mode: bool = Field(
        default=False,
        description="Use an in-memory database instead of MongoDB. Enables local dev without a server."
    )

    # Site
    site_url: str = Field(
        default="https://www.1713yjk.uk",
        description="Canonical public URL of the site, used in JSON-LD"
    )
    google_tag_manager_id: str = Field(
        default="",
        description="Google Tag Manager container ID. Tags are omitted when empty."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def storage_region(self) -> str:
        return _first_non_empty(self.oss_region, self.public_oss_region)

    @property
    def storage_access_key_id(self) -> str:
        return _first_non_empty(self.oss_access_key_id, self.public_oss_access_key_id)

    @property
    def storage_access_key_secret(self) -> str:
        return _first_non_empty(self.oss_access_key_secret, self.public_oss_access_key_secret)

    @property
    def storage_bucket(self) -> str:
        return _first_non_empty(self.oss_bucket, self.public_oss_bucket)

    @property
    def storage_base_path(self) -> str:
        """Key prefix without surrounding slashes; empty means no prefix."""
        return _first_non_empty(self.oss_base_path, self.public_oss_base_path).strip("/")

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set.

        Object storage is optional (local disk is the fallback), so only
        the database is checked here, and only outside mock mode.
        """
        missing = []

        if not self.mongodb_mock_mode and not self.mongodb_uri:
            missing.append("MONGODB_URI")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    This is safe because settings don't change during runtime.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()
