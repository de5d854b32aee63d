"""
Hometown Content Server — Health Check Route
==============================================

What:  GET /health for process supervisors and uptime checks.
How:   Cheap filesystem probes only; the document is not parsed.

    healthy:   data.json readable AND upload directory writable
    degraded:  either probe failed (still HTTP 200, so the static site keeps
               being served while an operator fixes permissions)
"""

import logging
import time

from fastapi import APIRouter, Depends

from hometown_server import __version__
from hometown_server.dependencies import get_document_store, get_upload_store
from hometown_server.schemas.content import HealthResponse
from hometown_server.services import DocumentStore, UploadStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    documents: DocumentStore = Depends(get_document_store),
    uploads: UploadStore = Depends(get_upload_store),
) -> HealthResponse:
    data_ok = documents.is_readable()
    upload_ok = uploads.is_writable()

    if not data_ok:
        logger.warning("Health check: content document not readable: %s", documents.path)
    if not upload_ok:
        logger.warning("Health check: upload directory not writable: %s", uploads.upload_dir)

    return HealthResponse(
        status="healthy" if data_ok and upload_ok else "degraded",
        version=__version__,
        data_file="readable" if data_ok else "unreadable",
        upload_dir="writable" if upload_ok else "unwritable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
