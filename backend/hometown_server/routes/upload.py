"""
Hometown Content Server — Upload Route Handler
================================================

What:  POST /api/upload — accepts one multipart file in the `file` field.

Request Flow:
    1. Client sends multipart/form-data with a `file` field
    2. Missing field, or a text part named `file` → 400 {"error": "没有文件被上传"}
    3. UploadStore checks the declared type, reads with a size cap, writes
    4. 200 {"success": true, "fileUrl": "/uploads/<generated name>"}

The returned fileUrl is what the admin page stores inside the content
document; nothing here checks that it is ever referenced.
"""

import logging

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from hometown_server.dependencies import get_upload_store
from hometown_server.exceptions import NO_FILE_UPLOADED, ValidationError
from hometown_server.schemas.content import ErrorResponse, UploadResponse
from hometown_server.services import UploadStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Upload"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        200: {"description": "File stored", "model": UploadResponse},
        400: {"description": "No file, unsupported type, or too large", "model": ErrorResponse},
        500: {"description": "File could not be written", "model": ErrorResponse},
    },
    summary="Upload an image or audio file",
    description=(
        "Stores a JPEG, PNG, GIF, WebP, MP3 or WAV file of at most 5MB under "
        "/uploads and returns its public path."
    ),
    openapi_extra={
        "requestBody": {
            "content": {
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "properties": {"file": {"type": "string", "format": "binary"}},
                    }
                }
            }
        }
    },
)
async def upload_file(
    request: Request,
    store: UploadStore = Depends(get_upload_store),
) -> UploadResponse:
    # A plain text part named "file" counts as no file at all.
    form = await request.form()
    file = form.get("file")
    if not isinstance(file, UploadFile):
        raise ValidationError(message=NO_FILE_UPLOADED, field="file")

    try:
        stored = await store.save(file)
    finally:
        await file.close()

    return UploadResponse(success=True, fileUrl=stored.url)
