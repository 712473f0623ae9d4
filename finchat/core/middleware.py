"""HTTP middleware: request correlation and access logging.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from finchat.core.config import settings
from finchat.core.logging import clear_request_id, hash_identifier, set_request_id

logger = logging.getLogger(__name__)

# Polled by load balancers; logged at DEBUG to keep access logs readable
QUIET_PATHS = frozenset({"/health"})


async def request_id_middleware(request: Request, call_next) -> Response:
    """Tag the request with an id and emit one ``http.request`` line for it.

    The id comes from the incoming request-id header when present, otherwise
    a fresh UUID4. It is echoed back in the same header, next to
    ``X-Request-Duration-ms``.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    started = time.perf_counter()
    try:
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        client_host = request.client.host if request.client else None
        logger.log(
            logging.DEBUG if request.url.path in QUIET_PATHS else logging.INFO,
            "http.request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
                "client_hash": hash_identifier(client_host) if client_host else None,
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers["X-Request-Duration-ms"] = f"{elapsed_ms:.2f}"
    return response
