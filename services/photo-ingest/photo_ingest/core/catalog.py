"""
Catalog operations over the whole metadata collection: the latest image per
project, and the bulk purge of every image.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from photo_ingest.config import ARTIFACT_PREFIX, PURGE_CONCURRENCY
from photo_ingest.core.errors import (
    ArtifactDeleteFailed,
    MetadataDeleteFailed,
    MetadataReadFailed,
)
from photo_ingest.core.metadata import MetadataStore
from photo_ingest.core.storage import ArtifactStore, key_from_url

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

@dataclass
class PurgeResult:
    deleted: int = 0
    warnings: List[str] = field(default_factory=list)

def _upload_time(record: Dict[str, Any]) -> datetime:
    """Upload timestamp of a record as an aware datetime; missing or unreadable sorts first."""
    value = record.get("upload_date")
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return _EPOCH
    if not isinstance(value, datetime):
        return _EPOCH
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value

def latest_per_project(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    One record per project_name, the one with the newest upload_date.

    Records with identical timestamps keep the one seen first; no other
    ordering is guaranteed.
    """
    latest: Dict[str, Dict[str, Any]] = {}
    for record in records:
        key = record.get("project_name")
        existing = latest.get(key)
        if existing is None or _upload_time(record) > _upload_time(existing):
            latest[key] = record
    return list(latest.values())

def artifact_key_for(record: Dict[str, Any]) -> Optional[str]:
    """
    Object key of a record's image. The stored filename is the key's exact
    basename; the public URL is only consulted for records without one.
    """
    filename = record.get("filename")
    if filename:
        return f"{ARTIFACT_PREFIX}/{filename}"
    url = record.get("r2_url")
    if url:
        return key_from_url(url)
    return None

def list_records(metadata: MetadataStore) -> List[Dict[str, Any]]:
    try:
        return metadata.list_all()
    except Exception as e:
        logger.error(f"Metadata fetch error: {str(e)}")
        raise MetadataReadFailed(str(e)) from e

async def purge_all(metadata: MetadataStore, artifacts: ArtifactStore,
                    concurrency: int = PURGE_CONCURRENCY) -> PurgeResult:
    """
    Delete every record's artifact and metadata document.

    Deletes run concurrently and are all awaited before returning. A failed
    artifact delete becomes a warning; a failed metadata delete raises
    MetadataDeleteFailed once every task has settled.
    """
    records = await asyncio.to_thread(list_records, metadata)
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def bounded(func, *args):
        async with semaphore:
            return await asyncio.to_thread(func, *args)

    async def delete_artifact(record):
        key = None
        try:
            key = artifact_key_for(record)
            if key is not None:
                await bounded(artifacts.delete, key)
        except ArtifactDeleteFailed:
            raise
        except Exception as e:
            raise ArtifactDeleteFailed(key or str(record.get("id")), str(e)) from e

    artifact_tasks = [delete_artifact(record) for record in records]
    metadata_tasks = [bounded(metadata.delete, record["id"]) for record in records]

    outcomes = await asyncio.gather(*artifact_tasks, *metadata_tasks, return_exceptions=True)
    artifact_results = outcomes[:len(artifact_tasks)]
    metadata_results = outcomes[len(artifact_tasks):]

    result = PurgeResult()
    for outcome in artifact_results:
        if isinstance(outcome, BaseException):
            logger.warning(str(outcome))
            result.warnings.append(str(outcome))

    failures = []
    for record, outcome in zip(records, metadata_results):
        if isinstance(outcome, BaseException):
            logger.error(f"Failed to delete metadata {record['id']}: {str(outcome)}")
            failures.append(outcome)
        else:
            result.deleted += 1

    if failures:
        raise MetadataDeleteFailed(f"{len(failures)} of {len(records)} records not deleted") from failures[0]

    logger.info(f"Purged {result.deleted} images with {len(result.warnings)} warnings")
    return result
