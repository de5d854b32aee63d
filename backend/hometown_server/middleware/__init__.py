# Middleware package init
"""
Hometown Content Server — Middleware Package
==============================================

What:  Cross-cutting concerns applied to every request, static files included.

Middleware Chain (outermost first):
    Request → [CORS] → [Request ID] → [Access Log] → Route / StaticFiles

    1. CORS outermost: preflights are answered before anything else runs, and
       every response on the way out (404s and errors included) gets the
       Access-Control-* headers.
    2. Request ID: correlation ID for log lines, echoed in X-Request-ID.
    3. Access log: method, path, status and duration, tagged with the ID.
"""

from hometown_server.middleware.cors import PermissiveCORSMiddleware
from hometown_server.middleware.logging import RequestLoggingMiddleware
from hometown_server.middleware.request_id import RequestIDMiddleware, request_id_var

__all__ = [
    "PermissiveCORSMiddleware",
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
    "request_id_var",
]
