from fastapi import APIRouter, HTTPException, Request

from medix.config import get_settings
from medix.middleware.rate_limit import TRIAGE_RATE_LIMIT, limiter
from medix.models import PatientInput, TriageResponse
from medix.safety.intake import too_short

router = APIRouter(prefix="/api")

# Set by main.py at startup
_service = None


def set_dependencies(service) -> None:
    global _service
    _service = service


@router.post("/triage", response_model=TriageResponse)
@limiter.limit(TRIAGE_RATE_LIMIT)
async def run_triage(request: Request, patient: PatientInput) -> TriageResponse:
    """Classify symptom urgency and return structured next steps."""
    if _service is None:
        raise HTTPException(status_code=503, detail="Triage service not initialized")

    reason = too_short(patient.symptoms, get_settings().min_symptom_length)
    if reason is not None:
        raise HTTPException(status_code=422, detail=reason)

    return await _service.run_triage(patient)
