"""
Metadata store - image records kept in a Firestore collection.
"""
import json
import logging
from typing import Any, Dict, List

import firebase_admin
from firebase_admin import credentials, firestore

from photo_ingest.config import METADATA_COLLECTION, SERVICE_ACCOUNT_KEY

logger = logging.getLogger(__name__)

def create_firestore_client(service_account_key: str = SERVICE_ACCOUNT_KEY):
    """
    Initialise the default Firebase app from a JSON service account string
    and return a Firestore client. Safe to call more than once.
    """
    try:
        firebase_admin.get_app()
    except ValueError:
        cred = credentials.Certificate(json.loads(service_account_key))
        firebase_admin.initialize_app(cred)
        logger.info("Firebase app initialised")
    return firestore.client()

class MetadataStore:
    """create / list_all / delete over one collection."""

    def __init__(self, client, collection: str = METADATA_COLLECTION):
        self.collection = client.collection(collection)

    def create(self, record: Dict[str, Any]) -> str:
        _, doc_ref = self.collection.add(record)
        return doc_ref.id

    def list_all(self) -> List[Dict[str, Any]]:
        return [{"id": doc.id, **doc.to_dict()} for doc in self.collection.stream()]

    def delete(self, record_id: str) -> None:
        self.collection.document(record_id).delete()
