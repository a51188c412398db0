"""
Upload pipeline - turns one uploaded photo plus optional coordinates into a
stored artifact and a metadata record.

Steps run strictly in order:

    validate -> resolve coordinates -> resolve address -> write artifact -> persist metadata

Validation runs before the upload is staged to disk. Once staged, the temp
file belongs to `UploadPipeline.run` and is removed on every exit path.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

import aiofiles
from fastapi import UploadFile

from photo_ingest.config import MAX_PROJECT_NAME_LENGTH
from photo_ingest.core.coordinates import CoordinateResolver
from photo_ingest.core.errors import MetadataWriteFailed, UploadValidationError
from photo_ingest.core.geocoding import AddressResolver
from photo_ingest.core.metadata import MetadataStore
from photo_ingest.core.storage import ArtifactStore
from photo_ingest.core.utils import discard
from photo_ingest.models import ImageRecord, UploadResponse

logger = logging.getLogger(__name__)

STAGE_CHUNK_SIZE = 1024 * 1024

@dataclass
class StagedUpload:
    """The first uploaded file, spooled to a local temp file."""
    path: Path
    filename: str
    content_type: str

@dataclass
class UploadRequest:
    project_name: str
    monitored_date: str
    upload: StagedUpload
    latitude: Optional[str] = None
    longitude: Optional[str] = None

def validate_upload_fields(project_name: Optional[str], monitored_date: Optional[str],
                           files: Optional[List[Any]]) -> None:
    """Reject a request before anything is written to disk."""
    if not project_name or not monitored_date or not files:
        raise UploadValidationError("Missing required fields.")
    if len(project_name) > MAX_PROJECT_NAME_LENGTH:
        raise UploadValidationError("Invalid project name.")

class UploadPipeline:
    """End-to-end handling of POST /upload."""

    def __init__(self, metadata: MetadataStore, artifacts: ArtifactStore,
                 coordinates: CoordinateResolver, addresses: AddressResolver, temp_dir: Path):
        self.metadata = metadata
        self.artifacts = artifacts
        self.coordinates = coordinates
        self.addresses = addresses
        self.temp_dir = Path(temp_dir)

    async def stage(self, file: UploadFile) -> StagedUpload:
        """Spool an uploaded file into the temp directory under a random name."""
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        path = self.temp_dir / uuid.uuid4().hex
        try:
            async with aiofiles.open(path, 'wb') as f:
                while True:
                    chunk = await file.read(STAGE_CHUNK_SIZE)
                    if not chunk:
                        break
                    await f.write(chunk)
        except BaseException:
            discard(path)
            raise
        return StagedUpload(
            path=path,
            filename=file.filename or "upload",
            content_type=file.content_type or "application/octet-stream",
        )

    def run(self, request: UploadRequest) -> UploadResponse:
        upload = request.upload
        try:
            coord = self.coordinates.resolve(
                request.latitude, request.longitude,
                upload.path, upload.filename, upload.content_type,
            )

            address = self.addresses.resolve(coord.latitude, coord.longitude)
            logger.info(f"Resolved ({coord.latitude}, {coord.longitude}) to {address!r}")

            artifact = self.artifacts.write(upload.path, upload.filename, upload.content_type)

            record = ImageRecord(
                project_name=request.project_name,
                monitored_date=request.monitored_date,
                filename=artifact.filename,
                r2_url=artifact.url,
                latitude=coord.latitude,
                longitude=coord.longitude,
                address=address,
                upload_date=datetime.now(timezone.utc),
            )
            try:
                record_id = self.metadata.create(record.model_dump())
            except Exception as e:
                # The stored object is not rolled back and is left orphaned
                logger.error(f"Metadata write failed, orphaned artifact {artifact.key}: {str(e)}")
                raise MetadataWriteFailed(str(e)) from e

            logger.info(f"Saved image {record_id} for project {request.project_name!r}")
            return UploadResponse(
                id=record_id,
                r2_url=artifact.url,
                latitude=coord.latitude,
                longitude=coord.longitude,
                address=address,
            )
        finally:
            discard(upload.path)
