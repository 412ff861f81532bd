import logging
from typing import Any

from medix.graph.state import PipelineState
from medix.services.reference_store import ReferenceStore

logger = logging.getLogger(__name__)


async def reference_retriever_node(
    state: PipelineState,
    *,
    reference_store: ReferenceStore | None = None,
    top_k: int = 5,
) -> dict[str, Any]:
    """Fetch citation-worthy references for the symptom text.

    Degrades to an empty list when no store is configured or the lookup
    fails; the pipeline proceeds without references either way.
    """
    if reference_store is None:
        return {"references": []}

    query = state["patient"].symptoms
    try:
        references = await reference_store.retrieve(query, top_k=top_k)
    except Exception:
        logger.warning("Reference retrieval failed, continuing without references", exc_info=True)
        return {"references": []}

    logger.info(
        "Retrieved %d references for request %s",
        len(references),
        state.get("request_id", ""),
    )
    return {"references": references}
