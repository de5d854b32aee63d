"""
FastAPI dependencies that hand the per-application stores to route handlers.

The stores live on `app.state` (set by create_app), so each app instance,
including the ones built by the test suite, owns its own directories.
"""

from fastapi import Request

from hometown_server.services import DocumentStore, UploadStore


def get_upload_store(request: Request) -> UploadStore:
    return request.app.state.upload_store


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store
