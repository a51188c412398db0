"""
Error types raised by the upload pipeline and the catalog operations.

Each error carries the HTTP status it maps to and the generic message shown
to the client. Diagnostic detail stays in the exception chain and the logs.
"""
from typing import Optional


class PhotoIngestError(Exception):
    """Base class for every error the service reports to a client."""

    status_code = 500
    error = "Internal Server Error."

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.error)
        self.detail = detail

    def to_response(self) -> dict:
        return {"error": self.error}


class UploadValidationError(PhotoIngestError):
    """Missing or malformed request fields."""

    status_code = 400
    error = "Missing required fields."

    def __init__(self, error: Optional[str] = None):
        if error:
            self.error = error
        super().__init__(error)


class MissingGPS(PhotoIngestError):
    """The extraction service could not find coordinates in the image."""

    status_code = 400
    error = "Missing or invalid GPS metadata."

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": self.error, "message": self.message}


class ExtractionUnavailable(PhotoIngestError):
    error = "EXIF extraction failed"


class StorageWriteFailed(PhotoIngestError):
    error = "Failed to upload to R2."


class MetadataWriteFailed(PhotoIngestError):
    error = "Failed to save image metadata."


class MetadataReadFailed(PhotoIngestError):
    error = "Internal Server Error."


class MetadataDeleteFailed(PhotoIngestError):
    error = "Failed to delete all images."


class ArtifactDeleteFailed(PhotoIngestError):
    """Raised per object during a purge; collected as a warning, never returned."""

    error = "Failed to delete artifact."

    def __init__(self, key: str, reason: str):
        super().__init__(f"Failed to delete {key}: {reason}")
        self.key = key
