"""
common.middleware
~~~~~~~~~~~~~~~~~
Structured JSON request-logging middleware powered by structlog.

Binds the calling tenant (``X-Healthcare-Entity-ID``) into structlog's
context variables so every service log line emitted while handling the
request carries ``tenant_id``, then logs one record per request.
"""
import time

import structlog

from common.exceptions import TenantHeaderError

logger = structlog.get_logger(__name__)

TENANT_HEADER = "HTTP_X_HEALTHCARE_ENTITY_ID"


class StructuredLoggingMiddleware:
    """
    WSGI middleware that emits one structured log record per HTTP request.

    Log record fields:
        event       – "http_request"
        method      – HTTP verb (GET, POST, …)
        path        – URL path
        status      – HTTP response status code (int)
        duration_ms – Round-trip duration in milliseconds (float, 2 dp)
        tenant_id   – raw tenant header value, when the client sent one
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        structlog.contextvars.clear_contextvars()
        tenant_id = request.META.get(TENANT_HEADER)
        if tenant_id:
            structlog.contextvars.bind_contextvars(tenant_id=tenant_id)

        start = time.monotonic()
        try:
            response = self.get_response(request)
            duration_ms = round((time.monotonic() - start) * 1000, 2)
            logger.info(
                "http_request",
                method=request.method,
                path=request.get_full_path(),
                status=response.status_code,
                duration_ms=duration_ms,
            )
        finally:
            structlog.contextvars.clear_contextvars()
        return response


def tenant_id_from_request(request) -> int:
    """
    Return the tenant id sent in the ``X-Healthcare-Entity-ID`` header.

    Raises:
        TenantHeaderError: Header missing or not a positive integer.
    """
    raw = request.META.get(TENANT_HEADER, "").strip()
    if not raw:
        raise TenantHeaderError("X-Healthcare-Entity-ID header is required.")
    try:
        tenant_id = int(raw)
    except ValueError:
        raise TenantHeaderError(f"Invalid X-Healthcare-Entity-ID header: {raw!r}.")
    if tenant_id <= 0:
        raise TenantHeaderError(f"Invalid X-Healthcare-Entity-ID header: {raw!r}.")
    return tenant_id
