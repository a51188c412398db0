import pytest
import requests
from unittest.mock import MagicMock

from photo_ingest.core.coordinates import CoordinateResolver
from photo_ingest.core.geocoding import AddressResolver
from photo_ingest.core.pipeline import UploadPipeline
from photo_ingest.core.storage import ArtifactStore
from photo_ingest.services import Services


class FakeMetadataStore:
    """In-memory stand-in for the Firestore collection."""

    def __init__(self):
        self.records = {}
        self.fail_create = False
        self.fail_list = False
        self.fail_delete_ids = set()
        self._counter = 0

    def create(self, record):
        if self.fail_create:
            raise RuntimeError("firestore unavailable")
        self._counter += 1
        record_id = f"doc{self._counter}"
        self.records[record_id] = dict(record)
        return record_id

    def list_all(self):
        if self.fail_list:
            raise RuntimeError("firestore unavailable")
        return [{"id": record_id, **record} for record_id, record in self.records.items()]

    def delete(self, record_id):
        if record_id in self.fail_delete_ids:
            raise RuntimeError("firestore unavailable")
        self.records.pop(record_id, None)


def json_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


@pytest.fixture
def make_response():
    return json_response


@pytest.fixture
def metadata():
    return FakeMetadataStore()


@pytest.fixture
def s3_client():
    return MagicMock()


@pytest.fixture
def artifacts(s3_client):
    return ArtifactStore(s3_client, bucket="field-photos", public_domain="cdn.example.com")


@pytest.fixture
def extraction_session():
    session = MagicMock()
    session.post.return_value = json_response({"success": True, "latitude": 1.5, "longitude": 2.5})
    return session


@pytest.fixture
def geocode_session():
    session = MagicMock()
    session.get.return_value = json_response({"results": [{"formatted": "1 Quarry Road, Site A"}]})
    return session


@pytest.fixture
def temp_dir(tmp_path):
    return tmp_path / "temp_uploads"


@pytest.fixture
def services(metadata, artifacts, extraction_session, geocode_session):
    return Services(
        metadata=metadata,
        artifacts=artifacts,
        coordinates=CoordinateResolver(service_url="http://exif.local/extract", session=extraction_session),
        addresses=AddressResolver(api_key="test-key", session=geocode_session),
    )


@pytest.fixture
def pipeline(services, temp_dir):
    return UploadPipeline(
        metadata=services.metadata,
        artifacts=services.artifacts,
        coordinates=services.coordinates,
        addresses=services.addresses,
        temp_dir=temp_dir,
    )
