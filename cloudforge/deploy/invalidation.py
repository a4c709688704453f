"""CloudFront cache invalidation after a deploy."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ..core.errors import DeployError

logger = logging.getLogger(__name__)


def invalidate_distribution(
    client: Any, distribution_id: str, paths: Sequence[str] = ("/*",)
) -> str:
    """Create a CloudFront invalidation and return its id."""
    reference = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%d%H%M%S%f")
    try:
        response = client.create_invalidation(
            DistributionId=distribution_id,
            InvalidationBatch={
                "CallerReference": reference,
                "Paths": {"Quantity": len(paths), "Items": list(paths)},
            },
        )
    except (BotoCoreError, ClientError) as exc:
        raise DeployError(
            f"CloudFront invalidation of {distribution_id} failed: {exc}"
        ) from exc

    invalidation_id = response["Invalidation"]["Id"]
    logger.info(f"Created invalidation {invalidation_id} for {distribution_id}")
    return invalidation_id
