"""Mirror a local directory into an S3 bucket."""

from __future__ import annotations

import hashlib
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from botocore.exceptions import BotoCoreError, ClientError

from ..core.errors import DeployError
from ..rendering.io import IGNORED_NAMES

logger = logging.getLogger(__name__)

# S3 DeleteObjects accepts at most 1000 keys per request.
_DELETE_BATCH = 1000


@dataclass
class SyncResult:
    uploaded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)


def local_objects(directory: Path) -> dict[str, Path]:
    """Map object keys (POSIX relative paths) to local files."""
    return {
        path.relative_to(directory).as_posix(): path
        for path in sorted(directory.rglob("*"))
        if path.is_file() and path.name not in IGNORED_NAMES
    }


def remote_objects(client: Any, bucket: str) -> dict[str, str]:
    """Map every key in ``bucket`` to its ETag (quotes stripped)."""
    objects: dict[str, str] = {}
    paginator = client.get_paginator("list_objects_v2")
    for page in paginator.paginate(Bucket=bucket):
        for item in page.get("Contents", []):
            objects[item["Key"]] = item.get("ETag", "").strip('"')
    return objects


def file_md5(path: Path) -> str:
    digest = hashlib.md5()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _batched(keys: list[str], size: int) -> Iterable[list[str]]:
    for start in range(0, len(keys), size):
        yield keys[start : start + size]


def sync_directory(
    client: Any,
    directory: Path,
    bucket: str,
    *,
    acl: str | None = "public-read",
    delete_removed: bool = True,
) -> SyncResult:
    """Upload ``directory`` to ``bucket`` and delete keys absent locally.

    Files whose MD5 matches the remote (non-multipart) ETag are skipped.

    Raises:
        DeployError: wrapping the S3 client failure
    """
    if not directory.is_dir():
        raise FileNotFoundError(f"Deploy directory not found: {directory}")

    result = SyncResult()
    try:
        remote = remote_objects(client, bucket)
        for key, path in local_objects(directory).items():
            if remote.get(key) == file_md5(path):
                result.skipped.append(key)
                continue

            extra_args: dict[str, str] = {}
            if acl:
                extra_args["ACL"] = acl
            content_type, _ = mimetypes.guess_type(path.name)
            if content_type:
                extra_args["ContentType"] = content_type

            client.upload_file(str(path), bucket, key, ExtraArgs=extra_args)
            result.uploaded.append(key)
            logger.debug(f"Uploaded {path} → s3://{bucket}/{key}")

        if delete_removed:
            stale = sorted(set(remote) - set(local_objects(directory)))
            for batch in _batched(stale, _DELETE_BATCH):
                client.delete_objects(
                    Bucket=bucket,
                    Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
                )
                result.deleted.extend(batch)
    except (BotoCoreError, ClientError) as exc:
        raise DeployError(f"S3 sync to {bucket} failed: {exc}") from exc

    logger.info(
        f"Synced {directory} → s3://{bucket}: {len(result.uploaded)} uploaded, "
        f"{len(result.skipped)} unchanged, {len(result.deleted)} deleted"
    )
    return result
