from __future__ import annotations

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DeploySettings(BaseSettings):
    """AWS identity read from ``CLOUDFORGE_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="CLOUDFORGE_", case_sensitive=False)

    aws_access_key_id: SecretStr | None = None
    aws_secret_access_key: SecretStr | None = None
    aws_region: str | None = None
    aws_s3_bucket: str | None = None
    aws_cloudfront_distribution_id: str | None = None
