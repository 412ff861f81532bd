import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from medix.api import diagnose, health, triage
from medix.config import get_settings
from medix.logging_config import configure_logging
from medix.middleware.error_handler import (
    generic_exception_handler,
    validation_exception_handler,
)
from medix.middleware.rate_limit import limiter
from medix.service import TriageService
from medix.services.metrics import init_metrics
from medix.services.reference_store import ReferenceStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize services at startup, clean up at shutdown."""
    settings = get_settings()
    configure_logging("medix-triage", settings.env, settings.log_level)
    init_metrics(settings.gcp_project_id)

    # Reference retrieval (optional, requires Postgres)
    reference_store: ReferenceStore | None = None
    if settings.reference_dsn:
        reference_store = ReferenceStore(settings.reference_dsn)
        try:
            await reference_store.connect()
        except Exception:
            logger.warning("Reference database not available — retrieval disabled", exc_info=True)
            reference_store = None

    service = TriageService.from_settings(settings, reference_store=reference_store)
    if service.adapter.configured_count == 0:
        logger.warning("No generative backend configured — deterministic fallback only")

    # Wire dependencies into API modules
    triage.set_dependencies(service)
    diagnose.set_dependencies(service)
    health.set_dependencies(service)

    logger.info(
        "AI Medix triage service started (env=%s, providers=%s)",
        settings.env,
        ",".join(settings.provider_chain),
    )
    yield

    # Cleanup
    await service.close()
    if reference_store:
        await reference_store.close()
    logger.info("AI Medix triage service shut down")


app = FastAPI(
    title="AI Medix Triage",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# CORS
_settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(triage.router)
app.include_router(diagnose.router)
