import logging
from typing import Any

from medix.graph.nodes.finalizer import build_diagnose_response, build_triage_response
from medix.graph.state import PipelineState
from medix.safety import defaults
from medix.safety.gate import assess

logger = logging.getLogger(__name__)


async def safety_gate_node(state: PipelineState) -> dict[str, Any]:
    """Deterministic checks; always completes before any generative call."""
    return {"safety": assess(state["patient"])}


async def emergency_triage_node(state: PipelineState) -> dict[str, Any]:
    """Short-circuit: emergency patterns answer without calling a backend."""
    safety = state["safety"]
    logger.warning(
        "Emergency short-circuit for request %s: %s",
        state.get("request_id", ""),
        "; ".join(safety.warnings),
    )
    result = defaults.emergency_triage(safety.warnings)
    response = build_triage_response(result, state, provider_used=None)
    return {"result": result, "response": response}


async def blocked_diagnose_node(state: PipelineState) -> dict[str, Any]:
    """Short-circuit: blocked or emergency intake gets no medicine suggestions."""
    safety = state["safety"]
    logger.info(
        "Diagnose blocked for request %s (emergency=%s, blocked=%s)",
        state.get("request_id", ""),
        safety.emergency_detected,
        safety.blocked,
    )
    result = defaults.blocked_diagnose(emergency=safety.emergency_detected)
    response = build_diagnose_response(
        result, state, provider_used=None, extra_notes=list(safety.warnings)
    )
    return {"result": result, "response": response}
