"""
Artifact storage - writes uploaded images to Cloudflare R2 through its
S3-compatible API and deletes them again during a purge.
"""
import logging
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Optional
from urllib.parse import unquote, urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from photo_ingest.config import (
    ARTIFACT_PREFIX,
    R2_ACCESS_KEY_ID,
    R2_BUCKET_NAME,
    R2_ENDPOINT,
    R2_PUBLIC_DOMAIN,
    R2_REGION,
    R2_SECRET_ACCESS_KEY,
)
from photo_ingest.core.errors import ArtifactDeleteFailed, StorageWriteFailed
from photo_ingest.core.utils import discard, now_millis
from photo_ingest.models import StoredArtifact

logger = logging.getLogger(__name__)

def create_r2_client():
    return boto3.client(
        "s3",
        endpoint_url=R2_ENDPOINT or None,
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        region_name=R2_REGION,
    )

def public_origin(domain: str) -> str:
    """Turn a bare host such as "pub-x.r2.dev" into "https://pub-x.r2.dev"."""
    domain = domain.strip().rstrip("/")
    if "://" not in domain:
        domain = f"https://{domain}"
    return domain

def clean_filename(filename: str) -> str:
    """Keep only the last path component of a client-supplied filename."""
    name = PureWindowsPath(PurePosixPath(filename or "").name).name
    return name or "upload"

def artifact_key(filename: str, timestamp_ms: Optional[int] = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = now_millis()
    return f"{ARTIFACT_PREFIX}/{timestamp_ms}-{clean_filename(filename)}"

def key_from_url(url: str) -> str:
    """Recover the object key from a public artifact URL."""
    return unquote(urlparse(url).path).lstrip("/")

class ArtifactStore:
    """Put/delete access to the image bucket."""

    def __init__(self, client, bucket: str = R2_BUCKET_NAME, public_domain: str = R2_PUBLIC_DOMAIN):
        self.client = client
        self.bucket = bucket
        self.origin = public_origin(public_domain)

    def url_for(self, key: str) -> str:
        return f"{self.origin}/{key}"

    def write(self, path: Path, original_filename: str, content_type: str,
              timestamp_ms: Optional[int] = None) -> StoredArtifact:
        """
        Store the file at `path` under images/<millis>-<filename>.

        The local file is removed once the object is stored. On failure it
        is left in place for the caller to clean up.
        """
        key = artifact_key(original_filename, timestamp_ms)
        content_type = content_type or "application/octet-stream"
        try:
            body = Path(path).read_bytes()
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError, OSError) as e:
            logger.error(f"R2 upload error for {key}: {str(e)}")
            raise StorageWriteFailed(str(e)) from e

        discard(path)
        url = self.url_for(key)
        logger.info(f"Stored {key} ({len(body)} bytes) at {url}")
        return StoredArtifact(key=key, url=url, content_type=content_type)

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise ArtifactDeleteFailed(key, str(e)) from e
