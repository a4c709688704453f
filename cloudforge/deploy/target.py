"""Deploy target resolution from config and environment."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import boto3

from ..core.errors import ConfigurationError
from ..core.models import DeployConfig
from ..core.settings import DeploySettings


@dataclass(frozen=True)
class DeployTarget:
    directory: Path
    bucket: str
    region: str
    access_key_id: str
    secret_access_key: str
    distribution_id: str | None
    acl: str


def resolve_target(config: DeployConfig | None, settings: DeploySettings) -> DeployTarget:
    """Merge the deploy section with environment settings.

    Config-file values win for the bucket, region and distribution.

    Raises:
        ConfigurationError: naming every missing field
    """
    config = config or DeployConfig()
    bucket = config.bucket or settings.aws_s3_bucket
    region = config.region or settings.aws_region
    distribution_id = config.distribution_id or settings.aws_cloudfront_distribution_id
    access_key = settings.aws_access_key_id
    secret_key = settings.aws_secret_access_key

    missing = [
        name
        for name, value in (
            ("deploy.directory", config.directory),
            ("deploy.bucket", bucket),
            ("deploy.region", region),
            ("CLOUDFORGE_AWS_ACCESS_KEY_ID", access_key),
            ("CLOUDFORGE_AWS_SECRET_ACCESS_KEY", secret_key),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError.missing("deploy", missing)

    return DeployTarget(
        directory=config.directory,  # type: ignore[arg-type]
        bucket=bucket,  # type: ignore[arg-type]
        region=region,  # type: ignore[arg-type]
        access_key_id=access_key.get_secret_value(),  # type: ignore[union-attr]
        secret_access_key=secret_key.get_secret_value(),  # type: ignore[union-attr]
        distribution_id=distribution_id or None,
        acl=config.acl,
    )


def create_clients(target: DeployTarget) -> tuple[Any, Any]:
    """Return ``(s3, cloudfront)`` clients for the target's credentials."""
    session = boto3.session.Session(
        aws_access_key_id=target.access_key_id,
        aws_secret_access_key=target.secret_access_key,
        region_name=target.region,
    )
    return session.client("s3"), session.client("cloudfront")
