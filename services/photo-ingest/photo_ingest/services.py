"""
Process-wide service handles, built once at startup and handed to routes
through FastAPI dependencies.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import requests
from fastapi import Depends

from photo_ingest.config import TEMP_UPLOAD_DIR
from photo_ingest.core.coordinates import CoordinateResolver
from photo_ingest.core.geocoding import AddressResolver
from photo_ingest.core.metadata import MetadataStore, create_firestore_client
from photo_ingest.core.pipeline import UploadPipeline
from photo_ingest.core.storage import ArtifactStore, create_r2_client

logger = logging.getLogger(__name__)

@dataclass
class Services:
    metadata: MetadataStore
    artifacts: ArtifactStore
    coordinates: CoordinateResolver
    addresses: AddressResolver

_services: Optional[Services] = None

def init_services() -> Services:
    """Connect to Firestore and R2 and open the shared HTTP session."""
    session = requests.Session()
    services = Services(
        metadata=MetadataStore(create_firestore_client()),
        artifacts=ArtifactStore(create_r2_client()),
        coordinates=CoordinateResolver(session=session),
        addresses=AddressResolver(session=session),
    )
    logger.info("Service handles initialised")
    return services

def get_services() -> Services:
    global _services
    if _services is None:
        _services = init_services()
    return _services

def get_pipeline(services: Services = Depends(get_services)) -> UploadPipeline:
    return UploadPipeline(
        metadata=services.metadata,
        artifacts=services.artifacts,
        coordinates=services.coordinates,
        addresses=services.addresses,
        temp_dir=Path(TEMP_UPLOAD_DIR),
    )
