"""
Hometown Content Server — Pydantic Response Schemas
=====================================================

What:  Pydantic models describing the API's JSON responses.
Why:   FastAPI uses them to serialize responses and generate OpenAPI docs.

The content document itself has no schema here: it is passed through as
arbitrary JSON and only checked for its four required top-level keys by
DocumentStore.validate().

Field names are camelCase (`fileUrl`) because the existing front-end and
admin page read them that way.
"""

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Returned by POST /api/upload on success."""

    success: bool = Field(default=True)
    fileUrl: str = Field(description="Public path of the stored file, e.g. /uploads/1717401234567-42.jpg")


class SaveResponse(BaseModel):
    """Returned by POST /api/data on success."""

    success: bool = Field(default=True)
    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(BaseModel):
    """
    Error body for every 4xx/5xx produced by the API.

    Example:
        {"error": "没有文件被上传"}

    The request correlation ID travels in the X-Request-ID header.
    """

    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """
    Health check response.

    status is "healthy" when the document is readable and the upload
    directory is writable, "degraded" otherwise.
    """

    status: str = Field(description="healthy or degraded")
    version: str = Field(description="Application version")
    data_file: str = Field(description="readable or unreadable")
    upload_dir: str = Field(description="writable or unwritable")
    uptime_seconds: float = Field(description="Seconds since service started")
