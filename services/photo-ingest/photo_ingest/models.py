"""
Data models for the Photo Ingest Service.
"""
from datetime import datetime
from pydantic import BaseModel, Field
from typing import List

class Coordinate(BaseModel):
    """Model for geographic coordinates."""
    latitude: float = Field(..., description="Latitude")
    longitude: float = Field(..., description="Longitude")

class StoredArtifact(BaseModel):
    """An image persisted to the object store."""
    key: str = Field(..., description="Object key, images/<millis>-<filename>")
    url: str = Field(..., description="Public URL of the object")
    content_type: str = Field(..., description="MIME type taken from the upload")

    @property
    def filename(self) -> str:
        return self.key.split("/", 1)[1]

class ImageRecord(BaseModel):
    """Metadata document written once per successful upload."""
    project_name: str
    monitored_date: str
    filename: str
    r2_url: str
    latitude: float
    longitude: float
    address: str
    upload_date: datetime

class UploadResponse(BaseModel):
    """Response model for a successful upload."""
    status: str = "ok"
    id: str
    r2_url: str
    latitude: float
    longitude: float
    address: str

class DeleteResponse(BaseModel):
    """Response model for the bulk delete."""
    status: str = "ok"
    message: str
    deleted: int
    warnings: List[str] = Field(default_factory=list)
