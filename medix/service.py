import logging
import time
import uuid

from medix.config import Settings
from medix.graph.pipeline import build_diagnose_pipeline, build_triage_pipeline
from medix.models import (
    DETERMINISTIC_FALLBACK,
    DiagnoseResponse,
    PatientInput,
    TriageResponse,
)
from medix.providers.adapter import ProviderAdapter, build_provider
from medix.providers.base import GenerationOptions
from medix.safety import defaults
from medix.safety.gate import assess
from medix.services.metrics import record_pipeline_outcome
from medix.services.reference_store import ReferenceStore
from medix.structured.repair import RepairLoop

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class TriageService:
    """Entry points for triage and OTC suggestions.

    Both calls are total: provider exhaustion, unusable output and any
    unexpected pipeline error all end in a schema-valid deterministic result.
    """

    def __init__(
        self,
        adapter: ProviderAdapter,
        repair_loop: RepairLoop,
        generation_options: GenerationOptions | None = None,
        reference_store: ReferenceStore | None = None,
        rag_top_k: int = 5,
    ) -> None:
        self.adapter = adapter
        self.repair_loop = repair_loop
        self.reference_store = reference_store
        options = generation_options or GenerationOptions()
        self._triage_graph = build_triage_pipeline(
            adapter, repair_loop, options, reference_store=reference_store, top_k=rag_top_k
        )
        self._diagnose_graph = build_diagnose_pipeline(adapter, repair_loop, options)

    @classmethod
    def from_settings(
        cls, settings: Settings, reference_store: ReferenceStore | None = None
    ) -> "TriageService":
        adapter = ProviderAdapter.from_settings(settings)
        repair_provider = next(
            (p for p in adapter.providers if p.name == settings.repair_provider),
            None,
        ) or build_provider(settings.repair_provider, settings)
        repair_loop = RepairLoop(
            repair_provider,
            GenerationOptions(
                temperature=settings.repair_temperature,
                max_tokens=settings.repair_max_tokens,
                json_mode=True,
            ),
            timeout=settings.provider_timeout_seconds,
        )
        return cls(
            adapter,
            repair_loop,
            GenerationOptions(
                temperature=settings.generation_temperature,
                max_tokens=settings.generation_max_tokens,
                json_mode=True,
            ),
            reference_store=reference_store,
            rag_top_k=settings.rag_top_k,
        )

    async def run_triage(self, patient: PatientInput) -> TriageResponse:
        start = time.monotonic()
        request_id = uuid.uuid4().hex
        try:
            state = await self._triage_graph.ainvoke(
                {"patient": patient, "request_id": request_id}
            )
            response: TriageResponse = state["response"]
        except Exception:
            logger.exception("Triage pipeline error for request %s", request_id)
            safety = assess(patient)
            result = (
                defaults.emergency_triage(safety.warnings)
                if safety.emergency_detected
                else defaults.fallback_triage(defaults.PIPELINE_ERROR)
            )
            response = TriageResponse(
                **result.model_dump(),
                safety_notes=list(safety.safety_notes),
                provider_used=None if safety.emergency_detected else DETERMINISTIC_FALLBACK,
                request_id=request_id,
            )

        response = response.model_copy(update={"latency_ms": _elapsed_ms(start)})
        logger.info(
            "Triage complete: urgency=%s provider=%s repaired=%s latency_ms=%d",
            response.urgency.value,
            response.provider_used,
            response.repaired,
            response.latency_ms,
            extra={"request_id": request_id},
        )
        record_pipeline_outcome("triage", response.provider_used, response.repaired)
        return response

    async def run_diagnose(self, patient: PatientInput) -> DiagnoseResponse:
        start = time.monotonic()
        request_id = uuid.uuid4().hex
        try:
            state = await self._diagnose_graph.ainvoke(
                {"patient": patient, "request_id": request_id}
            )
            response: DiagnoseResponse = state["response"]
        except Exception:
            logger.exception("Diagnose pipeline error for request %s", request_id)
            safety = assess(patient)
            result = (
                defaults.blocked_diagnose(emergency=safety.emergency_detected)
                if safety.blocked or safety.emergency_detected
                else defaults.fallback_diagnose()
            )
            response = DiagnoseResponse(
                **result.model_dump(exclude={"safety_notes"}),
                safety_notes=list(safety.warnings) + list(safety.safety_notes),
                provider_used=DETERMINISTIC_FALLBACK,
                request_id=request_id,
            )

        response = response.model_copy(update={"latency_ms": _elapsed_ms(start)})
        logger.info(
            "Diagnose complete: medicines=%d provider=%s repaired=%s latency_ms=%d",
            len(response.medicines),
            response.provider_used,
            response.repaired,
            response.latency_ms,
            extra={"request_id": request_id},
        )
        record_pipeline_outcome("diagnose", response.provider_used, response.repaired)
        return response

    async def close(self) -> None:
        await self.adapter.close()
        repair_provider = self.repair_loop.provider
        if repair_provider is not None and repair_provider not in self.adapter.providers:
            await repair_provider.close()
