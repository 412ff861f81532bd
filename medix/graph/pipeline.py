import functools

from langgraph.graph import END, StateGraph

from medix.graph.nodes.finalizer import (
    diagnose_fallback_node,
    diagnose_finalizer_node,
    triage_fallback_node,
    triage_finalizer_node,
)
from medix.graph.nodes.generator import generator_node
from medix.graph.nodes.rag_retriever import reference_retriever_node
from medix.graph.nodes.safety_gate import (
    blocked_diagnose_node,
    emergency_triage_node,
    safety_gate_node,
)
from medix.graph.nodes.validator import repair_node, validator_node
from medix.graph.state import PipelineState
from medix.providers.adapter import ProviderAdapter
from medix.providers.base import GenerationOptions
from medix.services.reference_store import ReferenceStore
from medix.structured.repair import RepairLoop
from medix.structured.schemas import SchemaKind


def _after_triage_gate(state: PipelineState) -> str:
    return "emergency" if state["safety"].emergency_detected else "continue"


def _after_diagnose_gate(state: PipelineState) -> str:
    safety = state["safety"]
    return "blocked" if safety.blocked or safety.emergency_detected else "continue"


def _after_generate(state: PipelineState) -> str:
    return "exhausted" if state.get("raw_text") is None else "validate"


def _after_validate(state: PipelineState) -> str:
    return "valid" if state.get("result") is not None else "repair"


def _after_repair(state: PipelineState) -> str:
    return "valid" if state.get("result") is not None else "failed"


def _add_generation_stages(
    graph: StateGraph,
    *,
    kind: SchemaKind,
    adapter: ProviderAdapter,
    repair_loop: RepairLoop,
    options: GenerationOptions,
    finalizer,
    fallback,
) -> None:
    """generate -> validate -> [repair] -> finalize, with fallback exits."""
    graph.add_node(
        "generate",
        functools.partial(generator_node, adapter=adapter, kind=kind, options=options),
    )
    graph.add_node("validate", functools.partial(validator_node, kind=kind))
    graph.add_node(
        "repair", functools.partial(repair_node, repair_loop=repair_loop, kind=kind)
    )
    graph.add_node("finalize", finalizer)
    graph.add_node("fallback", fallback)

    graph.add_conditional_edges(
        "generate", _after_generate, {"validate": "validate", "exhausted": "fallback"}
    )
    graph.add_conditional_edges(
        "validate", _after_validate, {"valid": "finalize", "repair": "repair"}
    )
    graph.add_conditional_edges(
        "repair", _after_repair, {"valid": "finalize", "failed": "fallback"}
    )
    graph.add_edge("finalize", END)
    graph.add_edge("fallback", END)


def build_triage_pipeline(
    adapter: ProviderAdapter,
    repair_loop: RepairLoop,
    options: GenerationOptions,
    reference_store: ReferenceStore | None = None,
    top_k: int = 5,
):
    """Build and compile the triage graph."""
    graph = StateGraph(PipelineState)

    graph.add_node("safety_gate", safety_gate_node)
    graph.add_node("emergency", emergency_triage_node)
    graph.add_node(
        "retrieve",
        functools.partial(
            reference_retriever_node, reference_store=reference_store, top_k=top_k
        ),
    )
    _add_generation_stages(
        graph,
        kind=SchemaKind.TRIAGE,
        adapter=adapter,
        repair_loop=repair_loop,
        options=options,
        finalizer=triage_finalizer_node,
        fallback=triage_fallback_node,
    )

    graph.set_entry_point("safety_gate")
    graph.add_conditional_edges(
        "safety_gate", _after_triage_gate, {"emergency": "emergency", "continue": "retrieve"}
    )
    graph.add_edge("emergency", END)
    graph.add_edge("retrieve", "generate")

    return graph.compile()


def build_diagnose_pipeline(
    adapter: ProviderAdapter,
    repair_loop: RepairLoop,
    options: GenerationOptions,
):
    """Build and compile the OTC medicine-suggestion graph."""
    graph = StateGraph(PipelineState)

    graph.add_node("safety_gate", safety_gate_node)
    graph.add_node("blocked", blocked_diagnose_node)
    _add_generation_stages(
        graph,
        kind=SchemaKind.DIAGNOSE,
        adapter=adapter,
        repair_loop=repair_loop,
        options=options,
        finalizer=diagnose_finalizer_node,
        fallback=diagnose_fallback_node,
    )

    graph.set_entry_point("safety_gate")
    graph.add_conditional_edges(
        "safety_gate", _after_diagnose_gate, {"blocked": "blocked", "continue": "generate"}
    )
    graph.add_edge("blocked", END)

    return graph.compile()
