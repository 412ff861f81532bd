from typing import Any, TypedDict

from medix.models import PatientInput
from medix.providers.base import ProviderCallRecord
from medix.safety.gate import SafetyAssessment
from medix.services.reference_store import ReferenceDocument


class PipelineState(TypedDict, total=False):
    # Input
    request_id: str
    patient: PatientInput

    # Safety gate
    safety: SafetyAssessment

    # Retrieval
    references: list[ReferenceDocument]

    # Generation
    system_prompt: str
    user_content: str
    raw_text: str | None
    provider_used: str | None
    provider_name: str | None
    provider_calls: list[ProviderCallRecord]

    # Extraction / validation
    candidate: Any
    validation_errors: list[dict[str, Any]]
    result: Any
    repaired: bool

    # Outcome
    fallback_reason: str | None
    response: Any
