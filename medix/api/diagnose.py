from fastapi import APIRouter, HTTPException, Request

from medix.config import get_settings
from medix.middleware.rate_limit import DIAGNOSE_RATE_LIMIT, limiter
from medix.models import DiagnoseResponse, PatientInput
from medix.safety.intake import needs_more_info, too_short

router = APIRouter(prefix="/api/med")

# Set by main.py at startup
_service = None


def set_dependencies(service) -> None:
    global _service
    _service = service


@router.post("/diagnose", response_model=DiagnoseResponse)
@limiter.limit(DIAGNOSE_RATE_LIMIT)
async def run_diagnose(request: Request, patient: PatientInput) -> DiagnoseResponse:
    """Suggest OTC medicines, subject to the safety gate and denylist."""
    if _service is None:
        raise HTTPException(status_code=503, detail="Diagnose service not initialized")

    settings = get_settings()
    reason = too_short(patient.symptoms, settings.min_symptom_length) or needs_more_info(
        patient.symptoms, min_length=settings.min_diagnose_detail_length
    )
    if reason is not None:
        raise HTTPException(status_code=422, detail=reason)

    return await _service.run_diagnose(patient)
