"""
Coordinate resolution - trusts client-supplied coordinates when they are valid,
otherwise asks the EXIF extraction service to read them from the image.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union
import logging

import requests
from requests import Session

from photo_ingest.config import EXTRACTION_SERVICE_URL, REQUEST_TIMEOUT
from photo_ingest.core.errors import ExtractionUnavailable, MissingGPS
from photo_ingest.core.utils import parse_coordinate
from photo_ingest.models import Coordinate

logger = logging.getLogger(__name__)

DEFAULT_MISSING_GPS_MESSAGE = "No coordinates found."

@dataclass
class ExtractionSuccess:
    latitude: float
    longitude: float

@dataclass
class ExtractionFailure:
    message: str

ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]

def client_coordinates(latitude: Any, longitude: Any) -> Optional[Coordinate]:
    """Return the client pair only if both halves are finite numbers."""
    lat = parse_coordinate(latitude)
    lon = parse_coordinate(longitude)
    if lat is None or lon is None:
        return None
    return Coordinate(latitude=lat, longitude=lon)

def parse_extraction_response(data: Any) -> ExtractionResult:
    """
    Validate an extraction service payload into a tagged result.

    Raises ExtractionUnavailable when the payload does not follow the
    {success, latitude?, longitude?, message?} contract.
    """
    if not isinstance(data, dict) or "success" not in data:
        raise ExtractionUnavailable(f"Malformed extraction response: {data!r}")

    if not data["success"]:
        message = data.get("message") or DEFAULT_MISSING_GPS_MESSAGE
        return ExtractionFailure(message=str(message))

    lat = parse_coordinate(data.get("latitude"))
    lon = parse_coordinate(data.get("longitude"))
    if lat is None or lon is None:
        raise ExtractionUnavailable(f"Extraction reported success without usable coordinates: {data!r}")
    return ExtractionSuccess(latitude=lat, longitude=lon)

class CoordinateResolver:
    """Produces a validated coordinate pair for an upload."""

    def __init__(self, service_url: str = EXTRACTION_SERVICE_URL, session: Session = None,
                 timeout: float = REQUEST_TIMEOUT):
        self.service_url = service_url
        self.session = session
        self.timeout = timeout

    def extract(self, image_path: Path, filename: str, content_type: str) -> ExtractionResult:
        """Post the image to the extraction service and validate its answer."""
        if not self.service_url:
            raise ExtractionUnavailable("Extraction service URL is not configured")

        requester = self.session if self.session else requests
        try:
            with open(image_path, "rb") as image:
                response = requester.post(
                    self.service_url,
                    files={"image": (filename, image, content_type)},
                    timeout=self.timeout,
                )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError, OSError) as e:
            logger.error(f"EXIF extraction request failed: {str(e)}")
            raise ExtractionUnavailable(str(e)) from e

        return parse_extraction_response(data)

    def resolve(self, latitude: Any, longitude: Any, image_path: Path, filename: str,
                content_type: str) -> Coordinate:
        """
        Resolve the coordinates of an upload.

        Client values win when both are finite numbers; the extraction
        service is not contacted in that case.
        """
        coord = client_coordinates(latitude, longitude)
        if coord is not None:
            logger.info(f"Using client coordinates ({coord.latitude}, {coord.longitude})")
            return coord

        logger.info(f"No usable client coordinates, extracting GPS from {filename}")
        result = self.extract(image_path, filename, content_type)
        if isinstance(result, ExtractionFailure):
            logger.info(f"No GPS metadata in {filename}: {result.message}")
            raise MissingGPS(result.message)

        logger.info(f"Extracted coordinates ({result.latitude}, {result.longitude}) from {filename}")
        return Coordinate(latitude=result.latitude, longitude=result.longitude)
