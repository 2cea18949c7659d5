# ABOUTME: S3 object storage for achievement photos: validation, upload, delete and presigned URLs.
# ABOUTME: Bucket and region from config; storage_enabled() is False when S3_BUCKET_NAME is unset.

import logging
import os
import secrets
import time

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.config import (
    AWS_REGION,
    MAX_UPLOAD_BYTES,
    PRESIGNED_URL_TTL,
    S3_BUCKET_NAME,
)

logger = logging.getLogger(__name__)

IMAGE_KEY_PREFIX = "images/"

_s3_client = None


class StorageError(RuntimeError):
    """Raised when the object store rejects an operation."""


def storage_enabled() -> bool:
    return bool(S3_BUCKET_NAME)


def get_s3_client():
    """Return the process-wide S3 client, creating it on first use."""
    global _s3_client
    if _s3_client is None:
        _s3_client = boto3.client("s3", region_name=AWS_REGION)
    return _s3_client


def make_image_key(filename: str, now_ms: int | None = None) -> str:
    """Unique object key: images/<epoch ms>-<random><original extension>."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    ext = os.path.splitext(filename or "")[1].lower()
    return f"{IMAGE_KEY_PREFIX}{now_ms}-{secrets.randbelow(10**9)}{ext}"


def validate_image(content_type: str | None, size: int) -> None:
    """Raise ValueError if the upload is not an image or exceeds MAX_UPLOAD_BYTES."""
    if not content_type or not content_type.startswith("image/"):
        raise ValueError("Only image files are allowed!")
    if size > MAX_UPLOAD_BYTES:
        limit_mb = MAX_UPLOAD_BYTES / (1024 * 1024)
        raise ValueError(f"Each image must be at most {limit_mb:g}MB")


def upload_image(data: bytes, filename: str, content_type: str) -> str:
    """Store image bytes under a fresh key and return the key."""
    key = make_image_key(filename)
    try:
        get_s3_client().put_object(
            Bucket=S3_BUCKET_NAME,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
    except (BotoCoreError, ClientError) as e:
        raise StorageError(f"Could not upload {filename!r}") from e
    logger.info("Uploaded achievement image %s (%d bytes)", key, len(data))
    return key


def delete_images(keys: list[str]) -> None:
    """Remove the given objects from the bucket."""
    if not keys:
        return
    try:
        get_s3_client().delete_objects(
            Bucket=S3_BUCKET_NAME,
            Delete={"Objects": [{"Key": k} for k in keys], "Quiet": True},
        )
    except (BotoCoreError, ClientError) as e:
        raise StorageError("Could not delete images") from e


def presigned_url(key: str) -> str:
    """Time-limited GET URL for one stored image."""
    try:
        return get_s3_client().generate_presigned_url(
            "get_object",
            Params={"Bucket": S3_BUCKET_NAME, "Key": key},
            ExpiresIn=PRESIGNED_URL_TTL,
        )
    except (BotoCoreError, ClientError) as e:
        raise StorageError(f"Could not sign URL for {key}") from e
