"""
Configuration settings for the Photo Ingest Service.
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Server settings
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Metadata store (Firestore) settings
SERVICE_ACCOUNT_KEY = os.getenv("SERVICE_ACCOUNT_KEY", "")  # JSON service account, not a path
METADATA_COLLECTION = os.getenv("METADATA_COLLECTION", "images")

# Object store (Cloudflare R2, S3-compatible) settings
R2_ENDPOINT = os.getenv("R2_ENDPOINT", "")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID", "")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY", "")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "")
R2_PUBLIC_DOMAIN = os.getenv("R2_PUBLIC_DOMAIN", "")  # bare host or full origin
R2_REGION = os.getenv("R2_REGION", "auto")
ARTIFACT_PREFIX = "images"

# Reverse geocoding (OpenCage) settings
OPENCAGE_URL = "https://api.opencagedata.com/geocode/v1/json"
OPENCAGE_API_KEY = os.getenv("OPENCAGE_API_KEY", "")
UNKNOWN_LOCATION = "Unknown Location"

# EXIF/GPS extraction service settings
EXTRACTION_SERVICE_URL = os.getenv("PYTHON_SERVICE_URL", "")

# Outbound HTTP timeout in seconds
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))

# Upload settings
TEMP_UPLOAD_DIR = os.getenv("TEMP_UPLOAD_DIR", "temp_uploads")
UPLOAD_FIELD_NAME = "images"
MAX_PROJECT_NAME_LENGTH = 255

# Bulk delete settings
PURGE_CONCURRENCY = int(os.getenv("PURGE_CONCURRENCY", "16"))  # max deletes in flight

# Logging settings
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_SESSION_FORMAT = "photo_ingest_{timestamp}.txt"  # .txt suffix
