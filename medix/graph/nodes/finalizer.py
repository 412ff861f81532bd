import logging
from typing import Any

from medix.graph.state import PipelineState
from medix.models import DETERMINISTIC_FALLBACK, DiagnoseResponse, TriageResponse
from medix.safety import defaults
from medix.safety.post_filter import filter_medicines
from medix.structured.schemas import DiagnoseResult, TriageResult

logger = logging.getLogger(__name__)


def merge_notes(*groups: list[str]) -> list[str]:
    """Concatenate note lists in order, dropping exact duplicates."""
    merged: list[str] = []
    for group in groups:
        for note in group:
            if note not in merged:
                merged.append(note)
    return merged


def build_triage_response(
    result: TriageResult,
    state: PipelineState,
    provider_used: str | None,
    provider_name: str | None = None,
    repaired: bool = False,
) -> TriageResponse:
    safety = state["safety"]
    return TriageResponse(
        **result.model_dump(),
        safety_notes=list(safety.safety_notes),
        provider_used=provider_used,
        provider_name=provider_name,
        repaired=repaired,
        request_id=state.get("request_id", ""),
    )


def build_diagnose_response(
    result: DiagnoseResult,
    state: PipelineState,
    provider_used: str | None,
    provider_name: str | None = None,
    repaired: bool = False,
    extra_notes: list[str] | None = None,
) -> DiagnoseResponse:
    safety = state["safety"]
    return DiagnoseResponse(
        **result.model_dump(exclude={"safety_notes"}),
        safety_notes=merge_notes(
            result.safety_notes, extra_notes or [], safety.safety_notes
        ),
        provider_used=provider_used,
        provider_name=provider_name,
        repaired=repaired,
        request_id=state.get("request_id", ""),
    )


async def triage_finalizer_node(state: PipelineState) -> dict[str, Any]:
    response = build_triage_response(
        state["result"],
        state,
        provider_used=state.get("provider_used"),
        provider_name=state.get("provider_name"),
        repaired=state.get("repaired", False),
    )
    return {"response": response}


async def diagnose_finalizer_node(state: PipelineState) -> dict[str, Any]:
    result: DiagnoseResult = state["result"]
    safe = result.model_copy(update={"medicines": filter_medicines(result.medicines)})
    response = build_diagnose_response(
        safe,
        state,
        provider_used=state.get("provider_used"),
        provider_name=state.get("provider_name"),
        repaired=state.get("repaired", False),
    )
    return {"result": safe, "response": response}


def _fallback_reason(state: PipelineState) -> str:
    if state.get("raw_text") is None:
        return defaults.PROVIDERS_EXHAUSTED
    return defaults.VALIDATION_FAILED


async def triage_fallback_node(state: PipelineState) -> dict[str, Any]:
    reason = _fallback_reason(state)
    logger.warning(
        "Deterministic triage fallback for request %s (%s)",
        state.get("request_id", ""),
        reason,
    )
    result = defaults.fallback_triage(reason)
    response = build_triage_response(
        result,
        state,
        provider_used=DETERMINISTIC_FALLBACK,
        provider_name=state.get("provider_name"),
    )
    return {"result": result, "response": response, "fallback_reason": reason}


async def diagnose_fallback_node(state: PipelineState) -> dict[str, Any]:
    reason = _fallback_reason(state)
    logger.warning(
        "Deterministic diagnose fallback for request %s (%s)",
        state.get("request_id", ""),
        reason,
    )
    result = defaults.fallback_diagnose()
    response = build_diagnose_response(
        result,
        state,
        provider_used=DETERMINISTIC_FALLBACK,
        provider_name=state.get("provider_name"),
    )
    return {"result": result, "response": response, "fallback_reason": reason}
