import logging

import requests
from requests import Session

from photo_ingest.config import OPENCAGE_API_KEY, OPENCAGE_URL, REQUEST_TIMEOUT, UNKNOWN_LOCATION

# Configure logging
logger = logging.getLogger(__name__)

def reverse_geocode(lat: float, lon: float, api_key: str, session: Session = None,
                    url: str = OPENCAGE_URL, timeout: float = REQUEST_TIMEOUT) -> str:
    """
    Reverse geocode coordinates using OpenCage.

    Args:
        lat: Latitude
        lon: Longitude
        api_key: OpenCage API key
        session: Optional requests session

    Returns:
        The first result's formatted address, or UNKNOWN_LOCATION on any failure
    """
    requester = session if session else requests
    # The space is sent as "+", giving q=<lat>+<lon>
    params = {"q": f"{lat} {lon}", "key": api_key}
    try:
        response = requester.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        results = response.json().get("results") or []
        if not results:
            logger.info(f"No geocoding results for ({lat}, {lon})")
            return UNKNOWN_LOCATION
        formatted = results[0].get("formatted")
        if not formatted:
            return UNKNOWN_LOCATION
        return formatted
    except Exception as e:
        # Any failure resolves to UNKNOWN_LOCATION
        logger.error(f"Geocoding failed: {str(e)}")
        return UNKNOWN_LOCATION

class AddressResolver:
    """Binds the geocoding credentials so the pipeline only passes coordinates."""

    def __init__(self, api_key: str = OPENCAGE_API_KEY, session: Session = None,
                 url: str = OPENCAGE_URL, timeout: float = REQUEST_TIMEOUT):
        self.api_key = api_key
        self.session = session
        self.url = url
        self.timeout = timeout

    def resolve(self, lat: float, lon: float) -> str:
        return reverse_geocode(lat, lon, self.api_key, session=self.session,
                               url=self.url, timeout=self.timeout)
