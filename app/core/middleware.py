from __future__ import annotations

import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.context import request_scope

REQUEST_ID_HEADER = "X-Request-Id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        """Binds the caller's X-Request-Id (or a new uuid4) and echoes it back."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        with request_scope(request_id, request.url.path):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
