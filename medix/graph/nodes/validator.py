import logging
from typing import Any

from medix.graph.state import PipelineState
from medix.structured.extractor import extract
from medix.structured.repair import RepairLoop
from medix.structured.schemas import SchemaKind
from medix.structured.validator import validate

logger = logging.getLogger(__name__)


async def validator_node(state: PipelineState, *, kind: SchemaKind) -> dict[str, Any]:
    """Extract a JSON value from the raw completion and validate it."""
    raw_text = state.get("raw_text") or ""
    candidate = extract(raw_text)
    if candidate is None:
        logger.warning(
            "Could not extract JSON from %s output (request %s)",
            state.get("provider_name"),
            state.get("request_id", ""),
        )
        # Hand the raw text to the repair step so it has something to fix
        return {
            "candidate": raw_text,
            "validation_errors": [
                {"loc": "<root>", "msg": "Output is not parseable JSON", "type": "json_invalid"}
            ],
            "result": None,
        }

    outcome = validate(candidate, kind)
    if not outcome.ok:
        logger.warning(
            "%s output failed validation (request %s): %s",
            SchemaKind(kind).value,
            state.get("request_id", ""),
            outcome.errors,
        )
    return {
        "candidate": candidate,
        "validation_errors": outcome.errors,
        "result": outcome.data,
    }


async def repair_node(
    state: PipelineState, *, repair_loop: RepairLoop, kind: SchemaKind
) -> dict[str, Any]:
    """One self-correction attempt; a second failure goes to the fallback."""
    result = await repair_loop.repair(
        state.get("candidate"),
        state.get("validation_errors", []),
        kind,
        state.get("system_prompt"),
    )
    return {"result": result, "repaired": result is not None}
