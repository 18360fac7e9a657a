"""HTTP middleware for the PolicyKit API."""

from __future__ import annotations

import logging
import time

from fastapi import Request

logger = logging.getLogger(__name__)


async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

    # Generated documents are firm-specific
    if request.url.path.startswith("/policies"):
        response.headers["Cache-Control"] = "no-store, max-age=0"

    return response


async def log_requests(request: Request, call_next):
    """Log method, path, status and latency for each request."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response
