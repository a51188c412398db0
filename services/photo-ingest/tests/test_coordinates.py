import pytest
import requests

from photo_ingest.core.coordinates import (
    CoordinateResolver,
    ExtractionFailure,
    ExtractionSuccess,
    client_coordinates,
    parse_extraction_response,
)
from photo_ingest.core.errors import ExtractionUnavailable, MissingGPS

@pytest.fixture
def image_path(tmp_path):
    path = tmp_path / "upload"
    path.write_bytes(b"fake-image")
    return path

@pytest.fixture
def resolver(extraction_session):
    return CoordinateResolver(service_url="http://exif.local/extract", session=extraction_session)

def test_client_coordinates_are_trusted(resolver, extraction_session, image_path):
    coord = resolver.resolve("12.34", "56.78", image_path, "site.jpg", "image/jpeg")
    assert (coord.latitude, coord.longitude) == (12.34, 56.78)
    extraction_session.post.assert_not_called()

def test_zero_is_a_valid_coordinate(resolver, extraction_session, image_path):
    coord = resolver.resolve("0", "0", image_path, "site.jpg", "image/jpeg")
    assert (coord.latitude, coord.longitude) == (0.0, 0.0)
    extraction_session.post.assert_not_called()

@pytest.mark.parametrize("lat, lon", [
    (None, None),
    ("12.34", None),
    (None, "56.78"),
    ("", "56.78"),
    ("north", "56.78"),
    ("12.34", "nan"),
    ("inf", "56.78"),
])
def test_unusable_client_coordinates_fall_back_to_extraction(resolver, extraction_session, image_path, lat, lon):
    coord = resolver.resolve(lat, lon, image_path, "site.jpg", "image/jpeg")
    assert (coord.latitude, coord.longitude) == (1.5, 2.5)
    extraction_session.post.assert_called_once()
    args, kwargs = extraction_session.post.call_args
    assert args[0] == "http://exif.local/extract"
    assert kwargs["files"]["image"][0] == "site.jpg"

def test_extraction_failure_raises_missing_gps(resolver, extraction_session, make_response, image_path):
    extraction_session.post.return_value = make_response({"success": False, "message": "no GPS tag"})
    with pytest.raises(MissingGPS) as exc_info:
        resolver.resolve(None, None, image_path, "site.jpg", "image/jpeg")
    assert exc_info.value.message == "no GPS tag"
    assert exc_info.value.status_code == 400

def test_extraction_failure_without_message(resolver, extraction_session, make_response, image_path):
    extraction_session.post.return_value = make_response({"success": False})
    with pytest.raises(MissingGPS) as exc_info:
        resolver.resolve(None, None, image_path, "site.jpg", "image/jpeg")
    assert exc_info.value.message == "No coordinates found."

def test_extraction_service_unreachable(resolver, extraction_session, image_path):
    extraction_session.post.side_effect = requests.ConnectionError("refused")
    with pytest.raises(ExtractionUnavailable):
        resolver.resolve(None, None, image_path, "site.jpg", "image/jpeg")

def test_extraction_service_error_status(resolver, extraction_session, make_response, image_path):
    extraction_session.post.return_value = make_response({"detail": "boom"}, status_code=502)
    with pytest.raises(ExtractionUnavailable):
        resolver.resolve(None, None, image_path, "site.jpg", "image/jpeg")

def test_extraction_service_not_configured(extraction_session, image_path):
    resolver = CoordinateResolver(service_url="", session=extraction_session)
    with pytest.raises(ExtractionUnavailable):
        resolver.resolve(None, None, image_path, "site.jpg", "image/jpeg")
    extraction_session.post.assert_not_called()

def test_parse_extraction_response_accepts_string_coordinates():
    assert parse_extraction_response({"success": True, "latitude": "10.5", "longitude": "-3"}) == \
        ExtractionSuccess(latitude=10.5, longitude=-3.0)

def test_parse_extraction_response_failure():
    assert parse_extraction_response({"success": False, "message": "stripped"}) == \
        ExtractionFailure(message="stripped")

@pytest.mark.parametrize("payload", [
    None,
    [],
    {"latitude": 1, "longitude": 2},
    {"success": True},
    {"success": True, "latitude": 1},
    {"success": True, "latitude": "x", "longitude": 2},
])
def test_parse_extraction_response_rejects_malformed(payload):
    with pytest.raises(ExtractionUnavailable):
        parse_extraction_response(payload)

def test_client_coordinates_helper():
    assert client_coordinates(" 1.25 ", "2").latitude == 1.25
    assert client_coordinates("1", "") is None
