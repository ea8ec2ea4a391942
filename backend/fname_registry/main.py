"""Fname Registry API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map FnameRegistryError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and signer initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: cleaner startup/shutdown pairing
    - Signer built before the app serves: a missing key fails startup, not
      the first transfer
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import fname_registry.infrastructure.database as database
from fname_registry.api.error_handlers import register_error_handlers
from fname_registry.api.routes import health, signer, transfers
from fname_registry.config import get_settings
from fname_registry.core.attestation import AttestationDomain
from fname_registry.core.authorization import AllowListAuthorization
from fname_registry.infrastructure.observability import setup_logging
from fname_registry.infrastructure.signature_authority import init_signature_authority

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    init_signature_authority(
        settings.signer_private_key,
        AllowListAuthorization(settings.admin_keys),
        AttestationDomain(
            chain_id=settings.eip712_chain_id,
            verifying_contract=settings.eip712_verifying_contract,
        ),
    )
    logger.info(
        "Fname registry started",
        extra={
            "environment": settings.environment,
            "service": settings.service_name,
        },
    )
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Fname registry shutting down")


app = FastAPI(
    title="Fname Registry", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(transfers.router)
app.include_router(signer.router)
