import logging
from typing import Any

from medix.graph.state import PipelineState
from medix.prompts import (
    DIAGNOSE_SYSTEM_PROMPT,
    TRIAGE_SYSTEM_PROMPT,
    build_diagnose_content,
    build_user_content,
    format_reference_context,
)
from medix.providers.adapter import ProviderAdapter
from medix.providers.base import GenerationOptions
from medix.structured.schemas import SchemaKind

logger = logging.getLogger(__name__)


def render_prompts(state: PipelineState, kind: SchemaKind) -> tuple[str, str]:
    patient = state["patient"]
    if kind == SchemaKind.DIAGNOSE:
        return DIAGNOSE_SYSTEM_PROMPT, build_diagnose_content(patient)
    content = build_user_content(patient) + format_reference_context(
        state.get("references", [])
    )
    return TRIAGE_SYSTEM_PROMPT, content


async def generator_node(
    state: PipelineState,
    *,
    adapter: ProviderAdapter,
    kind: SchemaKind,
    options: GenerationOptions,
) -> dict[str, Any]:
    """Render prompts and run them through the backend fallback chain."""
    system_prompt, user_content = render_prompts(state, kind)
    completion = await adapter.complete(
        system_prompt,
        user_content,
        options,
        request_id=state.get("request_id", ""),
    )
    return {
        "system_prompt": system_prompt,
        "user_content": user_content,
        "raw_text": completion.text,
        "provider_used": completion.tier,
        "provider_name": completion.provider_name,
        "provider_calls": completion.records,
    }
