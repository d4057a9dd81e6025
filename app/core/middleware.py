import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.audit import audit_context_var, bind_request_context
from app.core.logging_config import request_id_var

logger = logging.getLogger("app.requests")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns every request an id (client supplied ``X-Request-ID`` or a fresh
    uuid4), exposes it on ``request.state`` and to the logging filter, logs
    the request outcome and echoes the id back in the response headers.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        client_ip = request.client.host if request.client else "unknown"
        context_token = bind_request_context(client_ip, request.headers.get("User-Agent"))
        start = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f'"{request.method} {request.url.path}" {response.status_code}',
                extra={
                    "http_method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "latency_ms": round(duration_ms, 2),
                    "client_ip": client_ip,
                },
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            audit_context_var.reset(context_token)
            request_id_var.reset(token)
