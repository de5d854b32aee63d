"""
Hometown Content Server — Permissive CORS Middleware
======================================================

What:  Adds Access-Control-* headers to every response and answers OPTIONS
       preflights directly with 204.

    Access-Control-Allow-Origin:  *
    Access-Control-Allow-Methods: GET, POST, PUT, DELETE, OPTIONS
    Access-Control-Allow-Headers: Content-Type, Authorization

Starlette's CORSMiddleware only decorates requests that carry an Origin
header. The headers here are sent unconditionally: API responses, static
files, 404s and error bodies alike.

There is no authentication: any origin may read and overwrite the content
document.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


class PermissiveCORSMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response
