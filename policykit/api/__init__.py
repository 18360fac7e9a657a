"""PolicyKit API for FCA policy document assembly."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from policykit.api.config import Settings
from policykit.api.middleware import add_security_headers, log_requests
from policykit.core.policies import get_policy_catalog

settings = Settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "1.0.0"
    templates_loaded: int = 0
    clauses_loaded: int = 0


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title=settings.api_title,
    description="Clause library, detail-level tiering and policy requirements "
    "for UK FCA-regulated firms.",
    version=settings.api_version,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
)

app.middleware("http")(add_security_headers)
app.middleware("http")(log_requests)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[] if settings.is_production and "*" in settings.cors_origins else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "X-Request-ID"],
)

app.state.settings = settings

# Build the shared catalog once so custom entries are in place before the first request
_catalog = get_policy_catalog(settings.custom_catalog_path)
logger.info(
    "Policy catalog ready: %d templates, %d clauses",
    len(_catalog.get_templates()),
    len(_catalog.get_clauses()),
)

from policykit.api.policies import router as policies_router

app.include_router(policies_router)


# =============================================================================
# Health Endpoint
# =============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    catalog = get_policy_catalog()
    return HealthResponse(
        status="ok",
        version=settings.api_version,
        templates_loaded=len(catalog.get_templates()),
        clauses_loaded=len(catalog.get_clauses()),
    )
