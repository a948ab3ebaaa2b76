"""S3 access for generated documents and externalized pre-fill sessions."""

import logging
import os
import re
from datetime import datetime
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

import config

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"

_s3_client = None


class StorageError(Exception):
    """Raised when the object store cannot be read or written."""


def get_s3_client():
    """Build the S3 client on first use so importing this module never needs credentials."""
    global _s3_client
    if _s3_client is None:
        _s3_client = boto3.client(
            "s3",
            endpoint_url=config.S3_ENDPOINT,
            aws_access_key_id=config.S3_ACCESS_KEY,
            aws_secret_access_key=config.S3_SECRET_KEY,
            region_name=config.S3_REGION,
            config=Config(s3={'addressing_style': 'path'})
        )
    return _s3_client


def object_url(key: str, bucket: str = None) -> str:
    return f"{config.S3_ENDPOINT}/{bucket or config.S3_BUCKET}/{key}"


def _object_exists(client, bucket: str, key: str) -> bool:
    try:
        client.head_object(Bucket=bucket, Key=key)
    except ClientError:
        return False
    return True


def get_unique_output_key(output_key: str, client=None, bucket: str = None) -> str:
    """Return output_key, or the first free `<base>_<n><ext>` variant when it is taken."""
    client = client or get_s3_client()
    bucket = bucket or config.S3_BUCKET
    if not _object_exists(client, bucket, output_key):
        return output_key

    base, ext = os.path.splitext(output_key)
    match = re.match(r'(.+)_(\d+)$', base)
    if match:
        base = match.group(1)
        start = int(match.group(2)) + 1
    else:
        start = 2

    for i in range(start, 1000):
        new_key = f"{base}_{i}{ext}"
        if not _object_exists(client, bucket, new_key):
            return new_key

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return f"{base}_{timestamp}{ext}"


def upload_document(content: bytes, key: str, content_type: str = HTML_CONTENT_TYPE,
                    client=None, bucket: str = None) -> str:
    """Upload a rendered document and return its public URL."""
    client = client or get_s3_client()
    bucket = bucket or config.S3_BUCKET
    try:
        client.put_object(Bucket=bucket, Key=key, Body=content, ContentType=content_type)
    except (BotoCoreError, ClientError) as e:
        raise StorageError(f"Failed to upload {key}: {e}") from e
    logger.info("Uploaded %s (%d bytes) to bucket %s", key, len(content), bucket)
    return object_url(key, bucket)


def read_object(key: str, client=None, bucket: str = None) -> Optional[bytes]:
    """Read an object body, or None when the key does not exist."""
    client = client or get_s3_client()
    bucket = bucket or config.S3_BUCKET
    try:
        response = client.get_object(Bucket=bucket, Key=key)
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
            return None
        raise StorageError(f"Failed to read {key}: {e}") from e
    return response['Body'].read()


def write_object(key: str, body: bytes, content_type: str = "application/json",
                 client=None, bucket: str = None) -> None:
    client = client or get_s3_client()
    bucket = bucket or config.S3_BUCKET
    try:
        client.put_object(Bucket=bucket, Key=key, Body=body, ContentType=content_type)
    except (BotoCoreError, ClientError) as e:
        raise StorageError(f"Failed to write {key}: {e}") from e


def delete_object(key: str, client=None, bucket: str = None) -> None:
    client = client or get_s3_client()
    bucket = bucket or config.S3_BUCKET
    try:
        client.delete_object(Bucket=bucket, Key=key)
    except (BotoCoreError, ClientError) as e:
        raise StorageError(f"Failed to delete {key}: {e}") from e
