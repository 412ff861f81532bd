import asyncio
import logging
import time
from dataclasses import dataclass, field

from medix.config import Settings
from medix.providers.anthropic_client import AnthropicProvider
from medix.providers.base import (
    GenerationOptions,
    ProviderCallRecord,
    ProviderNotConfigured,
    TextProvider,
)
from medix.providers.gemini_client import GeminiProvider
from medix.providers.groq_client import GroqProvider
from medix.providers.openai_compat_client import sambanova_provider
from medix.services.metrics import record_provider_call

logger = logging.getLogger(__name__)

TIER_LABELS = ["primary", "secondary", "tertiary"]

PROVIDER_FACTORIES = {
    "groq": GroqProvider,
    "sambanova": sambanova_provider,
    "gemini": GeminiProvider,
    "anthropic": AnthropicProvider,
}


def tier_label(index: int) -> str:
    if index < len(TIER_LABELS):
        return TIER_LABELS[index]
    return f"fallback-{index + 1}"


def build_provider(name: str, settings: Settings) -> TextProvider:
    try:
        factory = PROVIDER_FACTORIES[name]
    except KeyError:
        raise ValueError(f"Unknown generative backend: {name}") from None
    return factory(settings)


@dataclass
class Completion:
    """Outcome of one logical call across the fallback chain."""

    text: str | None = None
    tier: str | None = None
    provider_name: str | None = None
    records: list[ProviderCallRecord] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return self.text is None


class ProviderAdapter:
    """Ordered fallback over interchangeable backends.

    Backends are tried strictly in priority order, each at most once per
    call and each under its own timeout. Total exhaustion is returned as an
    empty ``Completion``, never raised.
    """

    def __init__(self, providers: list[TextProvider], timeout: float = 12.0) -> None:
        self._providers = list(providers)
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderAdapter":
        providers = [build_provider(name, settings) for name in settings.provider_chain]
        return cls(providers, timeout=settings.provider_timeout_seconds)

    @property
    def providers(self) -> list[TextProvider]:
        return list(self._providers)

    @property
    def configured_count(self) -> int:
        return sum(1 for p in self._providers if p.configured)

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        options: GenerationOptions,
        request_id: str = "",
    ) -> Completion:
        completion = Completion()

        for index, provider in enumerate(self._providers):
            used_fallback = index > 0
            if not provider.configured:
                logger.debug("Skipping %s: not configured", provider.name)
                completion.records.append(
                    ProviderCallRecord(
                        provider_name=provider.name,
                        latency_ms=0,
                        success=False,
                        used_fallback=used_fallback,
                        error="not configured",
                    )
                )
                continue

            start = time.monotonic()
            try:
                text = await asyncio.wait_for(
                    provider.generate(system_prompt, user_content, options),
                    timeout=self._timeout,
                )
            except asyncio.TimeoutError:
                error = f"timed out after {self._timeout:.1f}s"
            except ProviderNotConfigured as exc:
                error = str(exc)
            except Exception as exc:
                error = f"{type(exc).__name__}: {exc}"
            else:
                record = ProviderCallRecord(
                    provider_name=provider.name,
                    latency_ms=int((time.monotonic() - start) * 1000),
                    success=True,
                    used_fallback=used_fallback,
                )
                self._log_record(record, request_id)
                completion.records.append(record)
                completion.text = text
                completion.tier = tier_label(index)
                completion.provider_name = provider.name
                return completion

            record = ProviderCallRecord(
                provider_name=provider.name,
                latency_ms=int((time.monotonic() - start) * 1000),
                success=False,
                used_fallback=used_fallback,
                error=error,
            )
            self._log_record(record, request_id)
            completion.records.append(record)

        logger.warning(
            "All generative backends exhausted (%d tried)",
            len(self._providers),
            extra={"request_id": request_id},
        )
        return completion

    def _log_record(self, record: ProviderCallRecord, request_id: str) -> None:
        extra = {
            "request_id": request_id,
            "provider": record.provider_name,
            "latency_ms": record.latency_ms,
            "success": record.success,
            "fallback": record.used_fallback,
        }
        if record.success:
            logger.info("Generative call succeeded via %s", record.provider_name, extra=extra)
        else:
            extra["error"] = record.error
            logger.warning("Generative call failed for %s", record.provider_name, extra=extra)
        record_provider_call(record)

    async def close(self) -> None:
        for provider in self._providers:
            try:
                await provider.close()
            except Exception:
                logger.debug("Error closing %s", provider.name, exc_info=True)
