"""
Photo Ingest Service - Stores geotagged field photos per project and keeps a
queryable catalog of them.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from photo_ingest.config import CORS_ORIGINS, HOST, LOG_DIR, LOG_LEVEL, LOG_SESSION_FORMAT, PORT
from photo_ingest.core.catalog import latest_per_project, list_records, purge_all
from photo_ingest.core.errors import PhotoIngestError
from photo_ingest.core.pipeline import UploadPipeline, UploadRequest, validate_upload_fields
from photo_ingest.core.utils import get_local_ip
from photo_ingest.models import DeleteResponse, UploadResponse
from photo_ingest.services import Services, get_pipeline, get_services

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Create session-specific log file
Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
session_timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
log_file = Path(LOG_DIR) / LOG_SESSION_FORMAT.format(timestamp=session_timestamp)

# Configure file handler with same format as terminal
file_handler = logging.FileHandler(log_file)
file_handler.setLevel(LOG_LEVEL)
file_handler.setFormatter(logging.Formatter('%(message)s'))  # Same as terminal

# Add file handler to root logger
logging.getLogger().addHandler(file_handler)

logger.info(f"Session started - Log file: {log_file}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    get_services()
    logger.info(f"Server running at: http://{get_local_ip()}:{PORT}")
    yield

app = FastAPI(
    title="Photo Ingest Service",
    description="Service for storing geotagged field photos by project",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(PhotoIngestError)
async def photo_ingest_error_handler(request: Request, exc: PhotoIngestError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())

@app.get("/", response_class=PlainTextResponse)
async def root():
    return "API is running."

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.utcnow()}

@app.post("/upload", response_model=UploadResponse)
async def upload_image(
    images: Optional[List[UploadFile]] = File(None),
    project_name: Optional[str] = Form(None),
    monitored_date: Optional[str] = Form(None),
    latitude: Optional[str] = Form(None),
    longitude: Optional[str] = Form(None),
    pipeline: UploadPipeline = Depends(get_pipeline),
):
    """
    Store the first uploaded image with its location and address.
    """
    validate_upload_fields(project_name, monitored_date, images)

    staged = await pipeline.stage(images[0])
    request = UploadRequest(
        project_name=project_name,
        monitored_date=monitored_date,
        upload=staged,
        latitude=latitude,
        longitude=longitude,
    )
    # pipeline.run removes the staged file however it exits
    return await asyncio.to_thread(pipeline.run, request)

@app.get("/images")
async def get_latest_images(services: Services = Depends(get_services)):
    """
    Latest image per project.
    """
    records = await asyncio.to_thread(list_records, services.metadata)
    return latest_per_project(records)

@app.delete("/images", response_model=DeleteResponse)
async def delete_all_images(services: Services = Depends(get_services)):
    """
    Delete every image from the metadata store and the bucket.
    """
    result = await purge_all(services.metadata, services.artifacts)
    return DeleteResponse(
        message="All images deleted from Firestore and R2.",
        deleted=result.deleted,
        warnings=result.warnings,
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)
