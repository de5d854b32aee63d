# Services package init
"""
Hometown Content Server — Services Layer
==========================================

What:  Filesystem-backed stores sitting between routes (HTTP) and disk.

Service Inventory:
    - UploadStore:   validates and writes uploaded images/audio
    - DocumentStore: reads and replaces the site's content document

Both are created once per application by main.create_app() and handed to
routes through the dependencies in hometown_server.dependencies.
"""

from hometown_server.services.document_store import DocumentStore
from hometown_server.services.upload_store import StoredUpload, UploadStore

__all__ = ["DocumentStore", "StoredUpload", "UploadStore"]
