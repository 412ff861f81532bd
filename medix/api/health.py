import logging
import time

from fastapi import APIRouter, Request

from medix.config import get_settings
from medix.middleware.rate_limit import HEALTH_RATE_LIMIT, limiter
from medix.models import HealthResponse, ProviderStatus
from medix.providers.adapter import tier_label

logger = logging.getLogger(__name__)

router = APIRouter()

_service = None

# Process start, for uptime reporting
_START_TIME = time.monotonic()


def set_dependencies(service) -> None:
    global _service
    _service = service


@router.get("/health", response_model=HealthResponse)
@limiter.limit(HEALTH_RATE_LIMIT)
async def health_check(request: Request) -> HealthResponse:
    settings = get_settings()
    checks: dict[str, str] = {}
    providers: list[ProviderStatus] = []

    if _service is not None:
        for index, provider in enumerate(_service.adapter.providers):
            providers.append(
                ProviderStatus(
                    name=provider.name,
                    tier=tier_label(index),
                    model=provider.model,
                    configured=provider.configured,
                )
            )
        configured = sum(1 for p in providers if p.configured)
        checks["providers"] = "ok" if configured else "none_configured"
    else:
        checks["providers"] = "not_initialized"

    # Reference retrieval (optional)
    store = _service.reference_store if _service is not None else None
    if store is not None:
        try:
            ok = await store.health_check()
            checks["references"] = "ok" if ok else "fail"
        except Exception:
            logger.warning("Reference store health check failed", exc_info=True)
            checks["references"] = "fail"
    else:
        checks["references"] = "not_configured"

    # Deterministic fallback keeps requests answerable, so nothing here is fatal
    status = "healthy" if checks["providers"] == "ok" else "degraded"

    return HealthResponse(
        status=status,
        environment=settings.env,
        providers=providers,
        fallback_order=[p.name for p in providers] + ["deterministic-fallback"],
        checks=checks,
        uptime=f"{int(time.monotonic() - _START_TIME)}s",
    )
