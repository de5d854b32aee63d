"""
Hometown Content Server — Content Document Route Handlers
===========================================================

What:  GET /api/data returns the content document verbatim;
       POST /api/data replaces it.
Who:   GET is called by the public front-end, POST by the admin page.

No merge/patch semantics: the admin page always posts the whole document.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from hometown_server.dependencies import get_document_store
from hometown_server.schemas.content import ErrorResponse, SaveResponse
from hometown_server.services import DocumentStore

logger = logging.getLogger(__name__)

SAVE_SUCCEEDED = "数据保存成功"

router = APIRouter(prefix="/api", tags=["Content"])


@router.get(
    "/data",
    responses={
        200: {"description": "The content document as stored"},
        500: {"description": "Document missing or unreadable", "model": ErrorResponse},
    },
    summary="Read the site content document",
)
async def read_data(
    store: DocumentStore = Depends(get_document_store),
) -> JSONResponse:
    document = await store.read()
    return JSONResponse(content=document)


@router.post(
    "/data",
    response_model=SaveResponse,
    responses={
        200: {"description": "Document replaced", "model": SaveResponse},
        400: {"description": "Body is not an object with hometowns/banner/audioStory/products", "model": ErrorResponse},
        500: {"description": "Document could not be written", "model": ErrorResponse},
    },
    summary="Replace the site content document",
    description=(
        "Overwrites the whole document. The body must be a JSON object with "
        "non-empty hometowns, banner, audioStory and products; any other keys "
        "are stored unchanged."
    ),
)
async def save_data(
    payload: Any = Body(...),
    store: DocumentStore = Depends(get_document_store),
) -> SaveResponse:
    await store.write(payload)
    return SaveResponse(success=True, message=SAVE_SUCCEEDED)
