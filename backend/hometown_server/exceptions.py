"""
Hometown Content Server — Custom Exception Hierarchy
======================================================

What:  Application-specific exceptions for the upload and document stores.
Why:   Services raise typed errors; global handlers in main.py turn them into
       `{"error": "..."}` responses with the right status code, so no route
       needs its own try/except.
How:   Each exception carries a user-facing message and an optional context
       dict. The context is logged server-side and never returned.

Exception Hierarchy:
    HometownServerError (base)          → 500
    ├── ValidationError                 → 400 Bad Request (client can fix)
    ├── FileStorageError                → 500 (upload could not be written)
    ├── DocumentReadError               → 500 (data.json missing/unreadable/invalid)
    └── DocumentWriteError              → 500 (data.json could not be replaced)

Messages are in Chinese because they are displayed as-is by the site's
admin page.
"""

from typing import Any, Dict, Optional

NO_FILE_UPLOADED = "没有文件被上传"
UNSUPPORTED_FILE_TYPE = "不支持的文件类型"
FILE_TOO_LARGE = "文件大小超过限制"
UPLOAD_FAILED = "文件上传失败"
INVALID_DATA_FORMAT = "数据格式不正确"
READ_DATA_FAILED = "读取数据失败"
SAVE_DATA_FAILED = "保存数据失败"
INTERNAL_ERROR = "服务器内部错误"


class HometownServerError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = INTERNAL_ERROR,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HometownServerError):
    """
    Raised when client input fails validation.

    When:    No file field, disallowed MIME type, oversized upload, document
             missing a required key or not a JSON object.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = INVALID_DATA_FORMAT,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class FileStorageError(HometownServerError):
    """
    Raised when an uploaded file cannot be written.

    When:    Disk full, permission denied, upload directory removed underneath us.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = UPLOAD_FAILED,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DocumentReadError(HometownServerError):
    """Content document is missing, unreadable, or not valid JSON."""

    def __init__(
        self,
        message: str = READ_DATA_FAILED,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DocumentWriteError(HometownServerError):
    """Content document could not be serialized or replaced on disk."""

    def __init__(
        self,
        message: str = SAVE_DATA_FAILED,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
